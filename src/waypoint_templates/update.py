"""Fetch-then-replace update of a project template.

The operation runs in a fixed order: resolve the reference, fetch the
current record, apply the requested changes to a copy, and send the whole
copy back. Every local failure (bad options, unreadable files) is raised
before the update call, so a failed run never leaves a partial write.

Example:
    ```python
    options = UpdateOptions(id="tmpl-1", summary="new", tags=("b", "c"))

    async with ProjectTemplateClient.from_settings(settings) as client:
        updated = await update_project_template(client, options)
    ```
"""

import copy
import logging
from dataclasses import dataclass

import httpx

from waypoint_templates.client import ProjectTemplateClient
from waypoint_templates.errors import (
    APIError,
    FileReadError,
    NotFoundError,
    RemoteError,
    ValidationError,
    humanize,
)
from waypoint_templates.models import (
    ProjectTemplate,
    ProjectTemplateRef,
    TerraformNocodeModule,
    WaypointProject,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateOptions:
    """Requested changes for one ``template update`` run.

    Empty strings mean "not supplied". Each field maps to one command flag:

    - ``name`` / ``id`` (``-name`` / ``-id``): template to update; id wins.
      The value used also becomes the template's new name.
    - ``summary`` / ``expanded_summary``: replace the text when non-empty.
      There is no way to clear either field.
    - ``readme_markdown_template_path``: file whose bytes replace the README template.
    - ``waypoint_hcl_template_path``: file whose bytes replace the waypoint.hcl
      template; the embedded waypoint project is recreated around them.
    - ``tfc_nocode_module_source`` / ``tfc_nocode_module_version``: set together
      to replace the Terraform no-code module; neither leaves it as is.
    - ``tags`` (``-tag``, repeatable): always replaces the tag list, so no
      tags clears them.
    """

    name: str = ""
    id: str = ""
    summary: str = ""
    expanded_summary: str = ""
    readme_markdown_template_path: str = ""
    waypoint_hcl_template_path: str = ""
    tfc_nocode_module_source: str = ""
    tfc_nocode_module_version: str = ""
    tags: tuple[str, ...] = ()


def resolve_reference(options: UpdateOptions) -> tuple[ProjectTemplateRef, str]:
    """Pick the template reference and the display name from the options.

    Returns:
        The reference to look up and the name the template will carry afterwards.

    Raises:
        ValidationError: Neither name nor id was given.
    """
    if options.id:
        return ProjectTemplateRef.by_id(options.id), options.id
    if options.name:
        return ProjectTemplateRef.by_name(options.name), options.name
    raise ValidationError("Missing project template name or id.")


async def fetch_template(
    client: ProjectTemplateClient, ref: ProjectTemplateRef, display_name: str
) -> ProjectTemplate:
    """Fetch the current record, mapping failures onto command errors.

    Raises:
        NotFoundError: No template matches ``ref``.
        RemoteError: Any other failure talking to the server.
    """
    try:
        return await client.get_project_template(ref)
    except NotFoundError as e:
        raise NotFoundError(
            f'Project template "{display_name}" does not exist',
            status_code=e.status_code,
            response=e.response,
            problem_detail=e.problem_detail,
        ) from e
    except APIError as e:
        raise RemoteError(humanize(e), status_code=e.status_code) from e
    except httpx.HTTPError as e:
        raise RemoteError(humanize(e)) from e
    except ValueError as e:
        raise RemoteError(f"Invalid response from server: {humanize(e)}") from e


def read_template_file(path: str, label: str, missing_label: str) -> bytes:
    """Read a template file as raw bytes.

    Args:
        path: File to read.
        label: File kind for generic read errors, e.g. ``readme.md``.
        missing_label: File kind for the not-found message, e.g. ``Readme``.

    Raises:
        FileReadError: The file is missing or cannot be read.
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        raise FileReadError(f"{missing_label} template file does not exist: {path}", path) from None
    except OSError as e:
        raise FileReadError(f"Unable to read {label} template file: {humanize(e)}", path) from e


def apply_updates(template: ProjectTemplate, options: UpdateOptions, display_name: str) -> ProjectTemplate:
    """Return a copy of ``template`` with the requested changes applied.

    ``template`` itself is left untouched, including when this raises.

    Raises:
        FileReadError: A template file could not be read.
        ValidationError: Only one of the no-code module source and version was given.
    """
    updated = copy.deepcopy(template)

    updated.name = display_name
    if options.summary:
        updated.summary = options.summary
    if options.expanded_summary:
        updated.expanded_summary = options.expanded_summary

    if options.readme_markdown_template_path:
        updated.readme_markdown_template = read_template_file(
            options.readme_markdown_template_path, "readme.md", "Readme"
        )

    if options.waypoint_hcl_template_path:
        hcl = read_template_file(options.waypoint_hcl_template_path, "waypoint.hcl", "Waypoint.hcl")
        updated.waypoint_project = WaypointProject(waypoint_hcl_template=hcl)

    source, version = options.tfc_nocode_module_source, options.tfc_nocode_module_version
    if source and not version:
        raise ValidationError("Terraform no code module version required.")
    if version and not source:
        raise ValidationError("Terraform no code module source required.")
    if source and version:
        updated.terraform_nocode_module = TerraformNocodeModule(source=source, version=version)

    updated.tags = list(options.tags)

    return updated


async def persist_template(client: ProjectTemplateClient, template: ProjectTemplate) -> None:
    """Send the full record back to the server.

    Raises:
        RemoteError: The update call failed.
    """
    try:
        await client.update_project_template(template)
    except APIError as e:
        raise RemoteError(f"Error updating project template: {humanize(e)}", status_code=e.status_code) from e
    except httpx.HTTPError as e:
        raise RemoteError(f"Error updating project template: {humanize(e)}") from e


async def update_project_template(client: ProjectTemplateClient, options: UpdateOptions) -> ProjectTemplate:
    """Resolve, fetch, modify and replace a project template.

    Returns:
        The record as sent to the server.

    Raises:
        ValidationError, NotFoundError, FileReadError, RemoteError
    """
    ref, display_name = resolve_reference(options)

    current = await fetch_template(client, ref, display_name)
    logger.info(f"Fetched project template {ref} (id={current.id!r})")

    updated = apply_updates(current, options, display_name)

    await persist_template(client, updated)
    logger.info(f"Updated project template {ref}")
    return updated
