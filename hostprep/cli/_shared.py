"""Shared helpers for Typer-based CLI components."""

from __future__ import annotations

import os
from pathlib import Path
from typing import NoReturn

import typer

from hostprep.config import ConfigStore
from hostprep.paths import PREFIX_ENV, Prefix, default_prefix_root

BINDIR_ENV = "BINDIR"


def show_help_if_no_subcommand(ctx: typer.Context) -> None:
    """Emit contextual help when a subcommand is not provided."""

    if ctx.invoked_subcommand or ctx.resilient_parsing:
        return
    typer.echo(ctx.get_help())
    raise typer.Exit()


def fail(message: str, exit_code: int = 1) -> NoReturn:
    """Print ``message`` to stderr and stop with ``exit_code``."""

    typer.echo(message, err=True)
    raise typer.Exit(exit_code)


def resolve_bin_dir(provided: Path | None) -> Path:
    """Pick the install directory from the flag, ``$BINDIR`` or the config file."""

    if provided is not None:
        return provided.expanduser()
    from_env = os.getenv(BINDIR_ENV)
    if from_env:
        return Path(from_env).expanduser()
    configured = ConfigStore().load().bin_dir
    if configured is not None:
        return configured
    fail(
        f"--bin-dir is required if environment `{BINDIR_ENV}` is empty "
        "and no bin_dir is configured",
        exit_code=2,
    )


def resolve_prefix(provided: Path | None) -> Prefix:
    """Pick the prefix root from the flag, ``$HOSTPREP_PREFIX`` or the config file."""

    if provided is not None:
        return Prefix(provided.expanduser())
    if os.getenv(PREFIX_ENV):
        return Prefix(default_prefix_root())
    configured = ConfigStore().load().prefix
    if configured is not None:
        return Prefix(configured)
    return Prefix(default_prefix_root())
