"""Configuration-related CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from hostprep.cli._shared import fail, show_help_if_no_subcommand
from hostprep.config import CONFIG_KEYS, ConfigStore

config_app = typer.Typer(help="Manage application configuration")


@config_app.callback(invoke_without_command=True)
def config_root(ctx: typer.Context) -> None:
    """Display contextual help when no subcommand is provided."""

    show_help_if_no_subcommand(ctx)


@config_app.command("show")
def show_config() -> None:
    """Display the current application configuration."""

    store = ConfigStore()
    config = store.load()
    typer.echo(json.dumps(config.to_payload(), indent=2))


@config_app.command("set-bin-dir")
def set_bin_dir(
    path: Path = typer.Argument(..., metavar="DIR", help="Default install directory."),
) -> None:
    """Persist the directory binaries are installed into by default."""

    store = ConfigStore()
    config = store.load()
    config.bin_dir = path.expanduser().absolute()
    store.save(config)
    typer.echo(f"Default bin dir set to {config.bin_dir}")


@config_app.command("set-prefix")
def set_prefix(
    path: Path = typer.Argument(..., metavar="DIR", help="Default prefix root."),
) -> None:
    """Persist the root that holds ssh/, skm/ and bin/."""

    store = ConfigStore()
    config = store.load()
    config.prefix = path.expanduser().absolute()
    store.save(config)
    typer.echo(f"Default prefix set to {config.prefix}")


@config_app.command("unset")
def unset_value(
    key: str = typer.Argument(
        ...,
        metavar="KEY",
        help=f"Setting to clear, one of: {', '.join(CONFIG_KEYS)}.",
    ),
) -> None:
    """Remove a persisted setting."""

    store = ConfigStore()
    config = store.load()
    try:
        removed = config.unset(key)
    except ValueError as exc:
        fail(str(exc), exit_code=2)
    if not removed:
        fail(f"{key} was not configured.")
    store.save(config)
    typer.echo(f"Cleared {key}")
