"""Command line interface: ``waypoint-template``.

Examples:

    waypoint-template update -name api -summary "HTTP API service" -tag go -tag http

    waypoint-template --address waypoint.example.com:9702 update -id 01H8Z... \\
        -readme-markdown-template-path ./README.tpl.md
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import NoReturn

import click
import httpx

from waypoint_templates import __version__
from waypoint_templates.auth import CredentialResolver
from waypoint_templates.client import ProjectTemplateClient
from waypoint_templates.config import ClientSettings
from waypoint_templates.errors import FileReadError, NotFoundError, RemoteError, SettingsError, ValidationError
from waypoint_templates.update import UpdateOptions, update_project_template

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass
class AppContext:
    """Objects shared by all subcommands of one invocation.

    ``transport`` is None in normal use; tests inject an ``httpx.MockTransport``.
    """

    address: str | None = None
    token: str | None = None
    timeout: float | None = None
    tls_skip_verify: bool | None = None
    transport: httpx.AsyncBaseTransport | None = None
    resolver: CredentialResolver = field(default_factory=CredentialResolver)

    def settings(self) -> ClientSettings:
        return ClientSettings.resolve(
            self.resolver,
            address=self.address,
            token=self.token,
            timeout=self.timeout,
            tls_skip_verify=self.tls_skip_verify,
        )

    def client(self, settings: ClientSettings) -> ProjectTemplateClient:
        return ProjectTemplateClient.from_settings(settings, transport=self.transport)


def fail(ctx: click.Context, message: str) -> NoReturn:
    click.secho(message, fg="red", err=True)
    ctx.exit(1)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--address", default=None, help="Waypoint server address [env: WAYPOINT_SERVER_ADDR].")
@click.option("--token", default=None, help="Waypoint auth token [env: WAYPOINT_SERVER_TOKEN].")
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Request timeout in seconds [env: WAYPOINT_CLIENT_TIMEOUT; default: 30].",
)
@click.option("--tls-skip-verify", is_flag=True, help="Do not verify the server's TLS certificate.")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity (written to stderr).",
)
@click.version_option(__version__, prog_name="waypoint-template")
@click.pass_context
def cli(
    ctx: click.Context,
    address: str | None,
    token: str | None,
    timeout: float | None,
    tls_skip_verify: bool,
    log_level: str,
) -> None:
    """Manage Waypoint project templates."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)

    app = ctx.ensure_object(AppContext)
    app.address = address
    app.token = token
    app.timeout = timeout
    # Unset flag defers to WAYPOINT_SERVER_TLS_SKIP_VERIFY
    app.tls_skip_verify = True if tls_skip_verify else None


@cli.command("update")
@click.option("-name", "--name", "name", default="", help="Name of project template")
@click.option("-id", "--id", "template_id", default="", help="Id of project template")
@click.option("-summary", "--summary", "summary", default="", help="Summary for the project template")
@click.option(
    "-expanded-summary",
    "--expanded-summary",
    "expanded_summary",
    default="",
    help="Expanded Summary for the project template",
)
@click.option(
    "-readme-markdown-template-path",
    "--readme-markdown-template-path",
    "readme_markdown_template_path",
    default="",
    help="Path to a markdown readme template for projects created from a project template",
)
@click.option(
    "-waypoint-hcl-template-path",
    "--waypoint-hcl-template-path",
    "waypoint_hcl_template_path",
    default="",
    help="Path to a templated waypoint.hcl file for projects created from a project template",
)
@click.option(
    "-tfc-nocode-module-source",
    "--tfc-nocode-module-source",
    "tfc_nocode_module_source",
    default="",
    help=(
        "The name of the Terraform no-code module from a Terraform registry that the template "
        "should use to provision infrastructure for Waypoint projects created from the template"
    ),
)
@click.option(
    "-tfc-nocode-module-version",
    "--tfc-nocode-module-version",
    "tfc_nocode_module_version",
    default="",
    help=(
        "The version of the Terraform no-code module from a Terraform registry that the template "
        "should use to provision infrastructure for Waypoint projects created from the template"
    ),
)
@click.option("-tag", "--tag", "tags", multiple=True, help="A tag to add to the project template (repeatable)")
@click.pass_context
def update(
    ctx: click.Context,
    name: str,
    template_id: str,
    summary: str,
    expanded_summary: str,
    readme_markdown_template_path: str,
    waypoint_hcl_template_path: str,
    tfc_nocode_module_source: str,
    tfc_nocode_module_version: str,
    tags: tuple[str, ...],
) -> None:
    """Update a project template.

    This will update an existing project template with the given options.
    Fields whose flags are not given keep their current values, except tags:
    the tag list is always replaced by the -tag values given.
    """
    app = ctx.ensure_object(AppContext)
    options = UpdateOptions(
        name=name,
        id=template_id,
        summary=summary,
        expanded_summary=expanded_summary,
        readme_markdown_template_path=readme_markdown_template_path,
        waypoint_hcl_template_path=waypoint_hcl_template_path,
        tfc_nocode_module_source=tfc_nocode_module_source,
        tfc_nocode_module_version=tfc_nocode_module_version,
        tags=tags,
    )

    try:
        settings = app.settings()
        asyncio.run(_run_update(app.client(settings), options))
    except ValidationError as e:
        fail(ctx, f"{e}\n\n{ctx.get_help()}")
    except (SettingsError, NotFoundError, RemoteError, FileReadError) as e:
        logger.debug("Template update failed", exc_info=True)
        fail(ctx, str(e))

    click.secho("template updated!", fg="green")


async def _run_update(client: ProjectTemplateClient, options: UpdateOptions) -> None:
    async with client:
        await update_project_template(client, options)


def main() -> None:
    cli(obj=AppContext())
