"""CLI commands for installing release binaries."""

from __future__ import annotations

from pathlib import Path

import typer

from hostprep.cli._shared import fail, resolve_bin_dir, show_help_if_no_subcommand
from hostprep.core import catalog
from hostprep.core.binary import (
    Archive,
    ArchiveKind,
    BinaryDescriptor,
    InstallError,
    install,
)

install_app = typer.Typer(help="Download and install release binaries")

_BIN_DIR_HELP = "Directory to install the binary into, defaults to $BINDIR."


def _run_install(descriptor: BinaryDescriptor, bin_dir: Path | None) -> None:
    destination = resolve_bin_dir(bin_dir)
    try:
        installed = install(descriptor, destination)
    except InstallError as exc:
        fail(str(exc))
    else:
        typer.echo(f"Installed {descriptor.name} to {installed}")


@install_app.callback(invoke_without_command=True)
def install_root(ctx: typer.Context) -> None:
    """Display contextual help when no install subcommand is chosen."""

    show_help_if_no_subcommand(ctx)


@install_app.command("list")
def list_binaries() -> None:
    """List the binaries that can be installed by name."""

    for name in catalog.names():
        typer.echo(name)


@install_app.command("tool")
def install_tool(
    name: str = typer.Argument(..., metavar="NAME", help="Built-in binary to install."),
    bin_dir: Path | None = typer.Option(None, "--bin-dir", "-b", help=_BIN_DIR_HELP),
) -> None:
    """Install a binary from the built-in catalog."""

    try:
        descriptor = catalog.get(name)
    except catalog.UnknownBinaryError as exc:
        fail(str(exc), exit_code=2)
    except InstallError as exc:
        fail(str(exc))
    _run_install(descriptor, bin_dir)


@install_app.command("custom")
def install_custom(
    name: str = typer.Option(..., "--name", "-n", help="Name of the binary."),
    url: str = typer.Option(..., "--url", "-u", help="Url to download the binary from."),
    archive_type: ArchiveKind | None = typer.Option(
        None,
        "--archive-type",
        "-t",
        help="Archive type of the download, if any.",
        case_sensitive=False,
    ),
    archive_paths: list[str] | None = typer.Option(
        None,
        "--archive-path",
        "-p",
        help="Path of a binary inside the archive; repeat for several.",
    ),
    version_arg: str = typer.Option(
        ...,
        "--version-arg",
        "-a",
        help="Arg that prints the version of the binary. Prefix with '^' to "
        "avoid it being parsed as an option.",
    ),
    bin_dir: Path | None = typer.Option(None, "--bin-dir", "-b", help=_BIN_DIR_HELP),
) -> None:
    """Install a binary described entirely on the command line."""

    if archive_paths and archive_type is None:
        fail("--archive-path requires --archive-type", exit_code=2)
    archive = None
    if archive_type is not None:
        archive = Archive(archive_type, tuple(archive_paths) if archive_paths else None)
    descriptor = BinaryDescriptor(name=name, url=url, version_arg=version_arg, archive=archive)
    _run_install(descriptor, bin_dir)
