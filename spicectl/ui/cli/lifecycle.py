"""
CLI commands for the lifecycle operations.

Thin wrappers over ``spicectl.core.use_cases.run``: each command
streams narration to stdout, records the run in the ledger, and exits
1 if the operation failed.
"""

from __future__ import annotations

import json
import sys

import click

from spicectl.core.models.operation import OperationKind
from spicectl.ui.cli.helpers import resolve_ledger, resolve_service, resolve_state_dir


def _run(ctx: click.Context, kind: OperationKind, as_json: bool) -> None:
    from spicectl.core.persistence.settings_file import default_settings_path
    from spicectl.core.use_cases.run import run_operation

    service = resolve_service(ctx)
    ledger = resolve_ledger(ctx)
    quiet = ctx.obj.get("quiet", False)

    def _echo(chunk: str) -> None:
        click.echo(chunk, nl=False)

    stream = None if (as_json or quiet) else _echo
    if stream is not None:
        click.secho(f"\n⚡ {kind.label}\n", fg="cyan", bold=True)

    result = run_operation(
        kind,
        service,
        ledger,
        sink=stream,
        settings_path=default_settings_path(resolve_state_dir(ctx)),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
        return

    if not result.ok:
        click.echo()
        click.secho(f"❌ {result.error}", fg="red", err=True)
        if result.recovery_suggestion:
            click.echo(f"   {result.recovery_suggestion}", err=True)
        sys.exit(1)

    for warning in result.warnings:
        click.secho(f"⚠️  {warning}", fg="yellow", err=True)

    if result.status is not None and not quiet:
        click.echo()
        click.secho(f"   Status: {result.status.display_text}", fg="green")
    click.echo()


_json_option = click.option(
    "--json-output", "--json", "as_json", is_flag=True, help="Output result as JSON.",
)


@click.command()
@_json_option
@click.pass_context
def install(ctx: click.Context, as_json: bool) -> None:
    """Install spicetify with the upstream bootstrap script."""
    _run(ctx, OperationKind.INSTALL, as_json)


@click.command()
@_json_option
@click.pass_context
def update(ctx: click.Context, as_json: bool) -> None:
    """Update spicetify to the latest release."""
    _run(ctx, OperationKind.UPDATE, as_json)


@click.command()
@_json_option
@click.pass_context
def apply(ctx: click.Context, as_json: bool) -> None:
    """Back up and apply customizations to the host app."""
    _run(ctx, OperationKind.APPLY, as_json)


@click.command()
@_json_option
@click.pass_context
def restore(ctx: click.Context, as_json: bool) -> None:
    """Restore the host app to its original state."""
    _run(ctx, OperationKind.RESTORE, as_json)


@click.command()
@_json_option
@click.confirmation_option(prompt="Remove spicetify and all of its files?")
@click.pass_context
def remove(ctx: click.Context, as_json: bool) -> None:
    """Restore the host app and delete spicetify's files."""
    _run(ctx, OperationKind.REMOVE, as_json)


COMMANDS = (install, update, apply, restore, remove)
