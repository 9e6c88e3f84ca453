"""CLI commands for generating SSH host entries."""

from __future__ import annotations

from pathlib import Path

import typer

from hostprep.cli._shared import fail, resolve_prefix, show_help_if_no_subcommand
from hostprep.core.ssh_config import (
    KeyMaterialMissingError,
    SshConfigEntry,
    SshConfigError,
    generate,
    parse_additions,
)

ssh_app = typer.Typer(help="Manage generated SSH host entries")


@ssh_app.callback(invoke_without_command=True)
def ssh_root(ctx: typer.Context) -> None:
    """Display contextual help when no ssh subcommand is chosen."""

    show_help_if_no_subcommand(ctx)


@ssh_app.command("add")
def add_host(
    key: str = typer.Argument(..., metavar="KEY", help="Host alias and key name."),
    hostname: str = typer.Argument(..., metavar="HOSTNAME", help="Host to connect to."),
    comment: str | None = typer.Option(
        None,
        "--comment",
        "-C",
        help="Comment for the generated key, defaults to HOSTNAME.",
    ),
    addition: list[str] | None = typer.Option(
        None,
        "--addition",
        "-a",
        help="Extra ssh option as name=value, e.g. user=git; repeatable.",
    ),
    prefix_root: Path | None = typer.Option(
        None,
        "--prefix",
        help="Root holding ssh/, skm/ and bin/; defaults to $HOSTPREP_PREFIX.",
    ),
) -> None:
    """Create a key for KEY and write its SSH host entry."""

    try:
        additions = parse_additions(addition or [])
        entry = SshConfigEntry(key=key, hostname=hostname, comment=comment, additions=additions)
    except ValueError as exc:
        fail(str(exc), exit_code=2)

    prefix = resolve_prefix(prefix_root)
    try:
        config_path = generate(entry, prefix)
    except KeyMaterialMissingError as exc:
        fail(str(exc), exit_code=3)
    except SshConfigError as exc:
        fail(str(exc))
    except OSError as exc:
        fail(f"Unable to update ssh config: {exc}")
    else:
        typer.echo(f"Wrote {config_path}")
