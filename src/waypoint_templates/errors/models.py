"""Error body models returned by the Waypoint HTTP gateway."""

from dataclasses import dataclass
from typing import Any

import httpx

PROBLEM_FIELDS = frozenset({"type", "title", "status", "detail", "instance"})

# google.rpc.Status as rendered by grpc-gateway
STATUS_FIELDS = frozenset({"code", "message", "details"})

# Subset of google.rpc.Code names used for titles
GRPC_CODE_NAMES = {
    1: "Canceled",
    2: "Unknown",
    3: "Invalid argument",
    4: "Deadline exceeded",
    5: "Not found",
    6: "Already exists",
    7: "Permission denied",
    9: "Failed precondition",
    13: "Internal error",
    14: "Unavailable",
    16: "Unauthenticated",
}


@dataclass
class ProblemDetail:
    """Normalized error body.

    Holds either an RFC 7807 problem details object or a grpc-gateway status
    body mapped onto the same fields (``message`` becomes ``detail``, the
    code name becomes ``title``).

    See: https://datatracker.ietf.org/doc/html/rfc7807
    """

    type: str | None = None
    title: str | None = None
    status: int | None = None
    detail: str | None = None
    instance: str | None = None

    # Fields outside the standard set
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ProblemDetail | None":
        """Parse an error body from an HTTP response.

        Args:
            response: HTTP response object

        Returns:
            ProblemDetail object, or None if the body is neither an RFC 7807
            document nor a grpc-gateway status
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError):
            return None

        if not isinstance(data, dict):
            return None

        content_type = response.headers.get("content-type", "")
        if "application/problem+json" in content_type or PROBLEM_FIELDS & data.keys():
            return cls._from_problem(data)

        if "message" in data and "code" in data:
            return cls._from_status(data, response.status_code)

        return None

    @classmethod
    def _from_problem(cls, data: dict[str, Any]) -> "ProblemDetail":
        extensions = {k: v for k, v in data.items() if k not in PROBLEM_FIELDS}
        return cls(
            type=data.get("type"),
            title=data.get("title"),
            status=data.get("status"),
            detail=data.get("detail"),
            instance=data.get("instance"),
            extensions=extensions or None,
        )

    @classmethod
    def _from_status(cls, data: dict[str, Any], status: int) -> "ProblemDetail":
        code = data.get("code")
        extensions: dict[str, Any] = {"grpc_code": code}
        if data.get("details"):
            extensions["details"] = data["details"]
        extensions.update({k: v for k, v in data.items() if k not in STATUS_FIELDS})
        return cls(
            title=GRPC_CODE_NAMES.get(code) if isinstance(code, int) else None,
            status=status,
            detail=data.get("message") or None,
            extensions=extensions,
        )

    def to_exception_message(self) -> str:
        """Convert problem details to exception message."""
        lines = []

        if self.title:
            lines.append(self.title)
        elif self.detail:
            lines.append(self.detail)

        if self.title and self.detail and self.title != self.detail:
            lines.append(self.detail)

        if self.type:
            lines.append(f"Problem Type: {self.type}")

        if self.instance:
            lines.append(f"Instance: {self.instance}")

        if self.extensions:
            lines.append("Extension fields:")
            for key, value in self.extensions.items():
                lines.append(f"  - {key}: {value}")

        return "\n".join(lines) if lines else "Unknown API error"
