"""Command-line interface for the hostprep application."""

from __future__ import annotations

import sys
from collections.abc import Sequence

import typer

from hostprep import __version__
from hostprep.cli.config import config_app
from hostprep.cli.install import install_app
from hostprep.cli.ssh import ssh_app
from hostprep.log import configure_logging

app = typer.Typer(help="Install tools and manage SSH host entries")
app.add_typer(install_app, name="install", help="Download and install release binaries")
app.add_typer(ssh_app, name="ssh", help="Manage generated SSH host entries")
app.add_typer(config_app, name="config", help="Inspect and adjust configuration")


@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the application's version and exit.",
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every step to stderr.",
    ),
) -> None:
    """Handle top-level options for the CLI."""
    if version:
        typer.echo(__version__)
        raise typer.Exit()

    configure_logging(verbose)

    if ctx.invoked_subcommand is not None or ctx.resilient_parsing:
        return

    typer.echo(ctx.get_help())
    raise typer.Exit()


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the hostprep CLI."""

    args = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        result = app(args=args, standalone_mode=False)
    except typer.Exit as exc:  # exit path already handled by Typer
        return exc.exit_code
    except typer.Abort:  # pragma: no cover - interactive interruption
        typer.echo("Aborted!", err=True)
        return 1
    except Exception as exc:  # pragma: no cover - unexpected errors bubble to the shell
        typer.echo(str(exc), err=True)
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover - manual execution only
    raise SystemExit(main())
