"""Project template records and references.

The server speaks the protobuf JSON mapping: lowerCamelCase keys, byte
fields as base64 strings. Fields this module does not model are kept in
``extra`` so that a full-record update sends them back unchanged.
"""

import base64
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote


_JSON_KINDS = {str: "a string", dict: "an object", list: "a list"}


def _expect_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object, got {type(data).__name__}")
    return dict(data)


def _pop(data: dict[str, Any], key: str, kind: type) -> Any:
    """Remove ``key`` from ``data``, checking its JSON type. Missing or null is None."""
    value = data.pop(key, None)
    if value is not None and not isinstance(value, kind):
        raise ValueError(f"{key} must be {_JSON_KINDS[kind]}, got {type(value).__name__}")
    return value


def _decode_bytes(value: str | None) -> bytes | None:
    if value is None:
        return None
    return base64.b64decode(value)


def _encode_bytes(value: bytes | None) -> str | None:
    if value is None:
        return None
    return base64.b64encode(value).decode("ascii")


@dataclass(frozen=True)
class ProjectTemplateRef:
    """Reference to a project template, either by id or by name.

    Exactly one of ``id`` and ``name`` is set.
    """

    id: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        if bool(self.id) == bool(self.name):
            raise ValueError("ProjectTemplateRef needs exactly one of id or name")

    @classmethod
    def by_id(cls, template_id: str) -> "ProjectTemplateRef":
        return cls(id=template_id)

    @classmethod
    def by_name(cls, name: str) -> "ProjectTemplateRef":
        return cls(name=name)

    @property
    def value(self) -> str:
        """The identifier or name this reference looks up."""
        return self.id or self.name or ""

    @property
    def path(self) -> str:
        """URL path segment selecting this template."""
        if self.id:
            return f"id/{quote(self.id, safe='')}"
        return f"name/{quote(self.name or '', safe='')}"

    def __str__(self) -> str:
        return f"id={self.id}" if self.id else f"name={self.name}"


@dataclass
class WaypointProject:
    """Embedded waypoint.hcl template for projects created from a template."""

    waypoint_hcl_template: bytes | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WaypointProject":
        data = _expect_object(data, "waypointProject")
        return cls(
            waypoint_hcl_template=_decode_bytes(_pop(data, "waypointHclTemplate", str)),
            extra=data,
        )

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        if self.waypoint_hcl_template is not None:
            data["waypointHclTemplate"] = _encode_bytes(self.waypoint_hcl_template)
        return data


@dataclass
class TerraformNocodeModule:
    """Terraform no-code module used to provision infrastructure."""

    source: str
    version: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TerraformNocodeModule":
        data = _expect_object(data, "terraformNocodeModule")
        return cls(source=_pop(data, "source", str) or "", version=_pop(data, "version", str) or "")

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "version": self.version}


@dataclass
class ProjectTemplate:
    """A project template as stored by the Waypoint server."""

    id: str = ""
    name: str = ""
    summary: str = ""
    expanded_summary: str = ""
    readme_markdown_template: bytes | None = None
    waypoint_project: WaypointProject | None = None
    terraform_nocode_module: TerraformNocodeModule | None = None
    tags: list[str] = field(default_factory=list)

    # Server fields not modeled above, sent back untouched on update
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectTemplate":
        """Build a template from its JSON representation.

        Args:
            data: The ``projectTemplate`` object of a server response.

        Returns:
            Parsed template.

        Raises:
            ValueError: A field has the wrong JSON type or is not valid base64.
        """
        data = _expect_object(data, "projectTemplate")
        waypoint_project = _pop(data, "waypointProject", dict)
        nocode_module = _pop(data, "terraformNocodeModule", dict)
        tags = _pop(data, "tags", list) or []
        if not all(isinstance(tag, str) for tag in tags):
            raise ValueError("tags must be a list of strings")
        return cls(
            id=_pop(data, "id", str) or "",
            name=_pop(data, "name", str) or "",
            summary=_pop(data, "summary", str) or "",
            expanded_summary=_pop(data, "expandedSummary", str) or "",
            readme_markdown_template=_decode_bytes(_pop(data, "readmeMarkdownTemplate", str)),
            waypoint_project=WaypointProject.from_dict(waypoint_project) if waypoint_project else None,
            terraform_nocode_module=TerraformNocodeModule.from_dict(nocode_module) if nocode_module else None,
            tags=list(tags),
            extra=data,
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the template in the server's JSON representation."""
        data = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "name": self.name,
                "summary": self.summary,
                "expandedSummary": self.expanded_summary,
                "tags": list(self.tags),
            }
        )
        if self.readme_markdown_template is not None:
            data["readmeMarkdownTemplate"] = _encode_bytes(self.readme_markdown_template)
        if self.waypoint_project is not None:
            data["waypointProject"] = self.waypoint_project.to_dict()
        if self.terraform_nocode_module is not None:
            data["terraformNocodeModule"] = self.terraform_nocode_module.to_dict()
        return data
