"""
spicectl — CLI entrypoint.

Usage:
    python -m spicectl.main --help
    spicectl status
    spicectl apply
    spicectl history -n 5
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from spicectl import __version__
from spicectl.core.observability.logging_config import configure_cli_logging
from spicectl.ui.cli.helpers import resolve_ledger, resolve_service


@click.group()
@click.version_option(version=__version__, prog_name="spicectl")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to config.yml (default: $SPICECTL_CONFIG or ~/.config/spicectl/config.yml).",
)
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Where the operation ledger and settings live.",
)
@click.option("--mock", is_flag=True, help="Use the mock runner (no real commands).")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    state_dir: str | None,
    mock: bool,
) -> None:
    """spicectl — install, apply and manage spicetify."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["mock"] = mock
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["state_dir"] = Path(state_dir).expanduser() if state_dir else None

    configure_cli_logging(debug=debug, verbose=verbose, quiet=quiet)


_STATE_COLORS = {
    "not_installed": "red",
    "installed": "yellow",
    "applied": "green",
    "unknown": "white",
}


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show spicetify status."""
    from spicectl.core.use_cases.status import get_status

    result = get_status(resolve_service(ctx), resolve_ledger(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    color = _STATE_COLORS.get(result.status.state.value, "white")
    click.echo()
    click.secho(f"🎵 {result.tool}: ", bold=True, nl=False)
    click.secho(result.status.display_text, fg=color, bold=True)
    click.echo(f"   {result.status.description}")
    click.echo()

    host_mark = "✓" if result.host_installed else "✗ not found"
    click.echo(f"   Host app: {result.host} {host_mark}")
    if result.config_info:
        for key, value in result.config_info.items():
            click.echo(f"   {key.replace('_', ' ').title()}: {value}")

    op = result.last_operation
    if op is not None:
        click.echo()
        op_color = {"success": "green", "failed": "red"}.get(op.status.value, "yellow")
        click.echo(f"   Last operation: {op.kind.value} — ", nl=False)
        click.secho(op.status.value, fg=op_color, nl=False)
        click.echo(f" ({op.formatted_duration})")

    if result.update_check_due:
        click.echo()
        click.secho("   💡 No update check in the last day. Run 'spicectl update'.", fg="cyan")
    click.echo()


@cli.command()
@click.option("-n", "limit", default=10, show_default=True, help="Number of records.")
@click.option("--output", "show_output", is_flag=True, help="Include captured output.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, limit: int, show_output: bool, as_json: bool) -> None:
    """Show recent lifecycle operations, newest first."""
    records = resolve_ledger(ctx).recent(limit)

    if as_json:
        click.echo(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
        return

    if not records:
        click.echo("No operations recorded yet.")
        return

    click.echo()
    for record in records:
        color = {"success": "green", "failed": "red"}.get(record.status.value, "yellow")
        started = record.started_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        click.echo(f"   {started}  {record.kind.value:<8} ", nl=False)
        click.secho(f"{record.status.value:<8}", fg=color, nl=False)
        click.echo(f" {record.formatted_duration}")
        if record.error:
            click.echo(f"     │ {record.error.splitlines()[0]}")
        if show_output and record.output:
            for line in record.output.splitlines():
                click.echo(f"     │ {line}")
    click.echo()


@cli.command("compare-versions")
@click.argument("candidate")
@click.argument("current")
def compare_versions(candidate: str, current: str) -> None:
    """Exit 0 if CANDIDATE is newer than CURRENT, else 1."""
    from spicectl.core.services.versioning import is_newer

    newer = is_newer(candidate, current)
    click.echo(f"{candidate} is {'newer than' if newer else 'not newer than'} {current}")
    sys.exit(0 if newer else 1)


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate config.yml."""
    from spicectl.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid and result.config is not None:
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Tool: {result.config.tool}")
        click.echo(f"   Host: {result.config.host.name}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    click.echo()
    if not result.valid:
        sys.exit(1)


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration as YAML."""
    import yaml

    from spicectl.ui.cli.helpers import resolve_config

    data = resolve_config(ctx).model_dump(mode="json")
    click.echo(yaml.safe_dump(data, sort_keys=False), nl=False)


# ── Register lifecycle commands from spicectl/ui/cli/ ────────────

from spicectl.ui.cli.lifecycle import COMMANDS as _LIFECYCLE_COMMANDS

for _command in _LIFECYCLE_COMMANDS:
    cli.add_command(_command)


if __name__ == "__main__":
    cli()
