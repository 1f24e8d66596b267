"""
Shared CLI plumbing — resolve config, state dir and services from the
click context set up in ``main.cli``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from spicectl.core.config.loader import ConfigError, load_config
from spicectl.core.models.config import ToolConfig
from spicectl.core.persistence.ledger import OperationLedger
from spicectl.core.services.lifecycle import LifecycleService


def resolve_config(ctx: click.Context) -> ToolConfig:
    """Load config once per invocation; exit 1 on a bad file."""
    config = ctx.obj.get("config")
    if config is None:
        try:
            config = load_config(ctx.obj.get("config_path"))
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            sys.exit(1)
        ctx.obj["config"] = config
    return config


def resolve_state_dir(ctx: click.Context) -> Path:
    state_dir: Path | None = ctx.obj.get("state_dir")
    return state_dir if state_dir is not None else resolve_config(ctx).state_path


def resolve_ledger(ctx: click.Context) -> OperationLedger:
    return OperationLedger(state_dir=resolve_state_dir(ctx))


def resolve_service(ctx: click.Context) -> LifecycleService:
    service = ctx.obj.get("service")
    if service is None:
        from spicectl.core.use_cases.run import build_service

        service = build_service(resolve_config(ctx), mock_mode=ctx.obj.get("mock", False))
        ctx.obj["service"] = service
    return service
