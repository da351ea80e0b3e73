"""Command-line interface for TemplateSync.

This module provides the CLI commands that drive the template lifecycle
(create, read, update, delete, import) from JSON desired-state files.
State is printed to stdout as JSON; logs go to stderr.
"""

import asyncio
import uuid
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, NoReturn, TypeVar

import click
from pydantic import BaseModel, ValidationError

from templatesync.application.services import TemplateReconciler, open_reconciler
from templatesync.core.config import Settings, get_settings
from templatesync.core.exceptions import PartialCreateError, TemplateSyncError
from templatesync.core.logging import bind_correlation_id, configure_logging, get_logger
from templatesync.domain.entities import TemplateSpec
from templatesync.infrastructure.schemas import (
    DeleteResultResponse,
    TemplateDocument,
    TemplateStateResponse,
)

T = TypeVar("T")


def _load_spec(path: Path) -> TemplateSpec:
    try:
        document = TemplateDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise click.ClickException(f"Invalid desired-state file {path}:\n{e}") from e
    return document.to_spec()


def _echo_model(model: BaseModel) -> None:
    click.echo(model.model_dump_json(indent=2))


def _run(
    ctx: click.Context,
    operation: Callable[[TemplateReconciler], Awaitable[T]],
) -> T:
    """Run an operation against a freshly opened reconciler.

    Library errors are turned into ClickException so the CLI exits with
    status 1 and a readable message.
    """
    settings: Settings = ctx.obj["settings"]
    logger = get_logger(__name__)

    async def runner() -> T:
        async with open_reconciler(settings) as reconciler:
            return await operation(reconciler)

    try:
        return asyncio.run(runner())
    except PartialCreateError as e:
        logger.error("Create failed after template was created", template_id=e.template_id)
        raise click.ClickException(
            f"{e}\nThe template exists remotely; delete it with: "
            f"templatesync delete {e.template_id}"
        ) from e
    except (TemplateSyncError, ValueError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version="0.1.0", prog_name="TemplateSync")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides environment)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    default=None,
    help="Set log format (overrides environment)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_format: str | None) -> None:
    """TemplateSync - reconcile SendGrid transactional templates.

    Reads the API key and tuning options from TEMPLATESYNC_* environment
    variables or a .env file.
    """
    overrides: dict[str, Any] = {}
    if log_level:
        overrides["log_level"] = log_level
    if log_format:
        overrides["log_format"] = log_format

    settings = get_settings()
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings)
    bind_correlation_id(f"cid_{uuid.uuid4().hex[:12]}")

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def create(ctx: click.Context, file: Path) -> None:
    """Create a template and its versions from FILE."""
    spec = _load_spec(file)

    def report_id(template_id: str) -> None:
        click.echo(f"Created template {template_id}", err=True)

    state = _run(ctx, lambda reconciler: reconciler.create(spec, on_created=report_id))
    _echo_model(TemplateStateResponse.from_state(state))


@cli.command()
@click.argument("template_id")
@click.pass_context
def read(ctx: click.Context, template_id: str) -> None:
    """Print the remote state of TEMPLATE_ID."""
    state = _run(ctx, lambda reconciler: reconciler.read(template_id))
    if state is None:
        raise click.ClickException(f"Template ({template_id}) not found")
    _echo_model(TemplateStateResponse.from_state(state))


@cli.command()
@click.argument("template_id")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def update(ctx: click.Context, template_id: str, file: Path) -> None:
    """Apply FILE to the existing template TEMPLATE_ID."""
    spec = _load_spec(file)
    state = _run(ctx, lambda reconciler: reconciler.update(template_id, spec))
    _echo_model(TemplateStateResponse.from_state(state))


@cli.command()
@click.argument("template_id")
@click.pass_context
def delete(ctx: click.Context, template_id: str) -> None:
    """Delete TEMPLATE_ID."""
    result = _run(ctx, lambda reconciler: reconciler.delete(template_id))
    if not result.succeeded:
        click.echo(f"Warning: template ({template_id}) may still exist: {result.error}", err=True)
    _echo_model(DeleteResultResponse.from_result(result))


@cli.command(name="import")
@click.argument("identifier")
@click.pass_context
def import_(ctx: click.Context, identifier: str) -> None:
    """Import a template by its IDENTIFIER of the form id:name:versions."""
    state = _run(ctx, lambda reconciler: reconciler.import_template(identifier))
    _echo_model(TemplateStateResponse.from_state(state))


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Display TemplateSync configuration."""
    settings: Settings = ctx.obj["settings"]

    click.echo(f"""
{settings.app_name} v{settings.app_version}
{'=' * 40}

API:
  Base URL:     {settings.api_base_url}
  API Key:      {'set' if settings.api_key else 'not set'}
  Timeout:      {settings.request_timeout_seconds}s

Rate Limits:
  Create:       1 call / {settings.create_rate_interval_seconds}s
  Delete:       1 call / {settings.delete_rate_interval_seconds}s

Reconciliation:
  Poll:         every {settings.poll_interval_seconds}s
  Create Limit: {settings.create_timeout_seconds}s
  Confirm:      {settings.continuous_target_occurrence} consecutive reads
  Strict Del:   {settings.strict_delete}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `templatesync` command is run
    or when using `python -m templatesync`.
    """
    cli()


if __name__ == "__main__":
    main()
