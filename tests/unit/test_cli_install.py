"""CLI tests for the install command group."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from hostprep.cli import install as install_module
from hostprep.cli.app import app
from hostprep.config import AppConfig, ConfigStore
from hostprep.core import target
from hostprep.core.binary import ArchiveKind, BinaryDescriptor, DownloadError

runner = CliRunner()


@pytest.fixture()
def captured_installs(monkeypatch: pytest.MonkeyPatch) -> list[tuple[BinaryDescriptor, Path]]:
    """Replace the installer with a recorder."""

    calls: list[tuple[BinaryDescriptor, Path]] = []

    def fake_install(descriptor: BinaryDescriptor, destination: Path) -> Path:
        calls.append((descriptor, destination))
        return destination / descriptor.name

    monkeypatch.setattr(install_module, "install", fake_install)
    return calls


def test_install_group_shows_help() -> None:
    result = runner.invoke(app, ["install"])

    assert result.exit_code == 0
    assert "install [OPTIONS] COMMAND" in result.stdout


def test_list_prints_catalog() -> None:
    result = runner.invoke(app, ["install", "list"])

    assert result.exit_code == 0
    assert result.stdout.split() == ["direnv", "starship"]


def test_tool_installs_into_flag_directory(captured_installs, tmp_path: Path) -> None:
    result = runner.invoke(app, ["install", "tool", "direnv", "--bin-dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    descriptor, destination = captured_installs[0]
    assert descriptor.name == "direnv"
    assert destination == tmp_path
    assert f"Installed direnv to {tmp_path / 'direnv'}" in result.stdout


def test_tool_unknown_name_is_usage_error(captured_installs, tmp_path: Path) -> None:
    result = runner.invoke(app, ["install", "tool", "nope", "--bin-dir", str(tmp_path)])

    assert result.exit_code == 2
    assert "Unknown binary 'nope'" in result.output
    assert captured_installs == []


def test_bin_dir_falls_back_to_environment(
    captured_installs, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("BINDIR", str(tmp_path / "env-bin"))

    result = runner.invoke(app, ["install", "tool", "starship"])

    assert result.exit_code == 0, result.output
    assert captured_installs[0][1] == tmp_path / "env-bin"


def test_bin_dir_falls_back_to_config(captured_installs, tmp_path: Path) -> None:
    ConfigStore().save(AppConfig(bin_dir=tmp_path / "configured"))

    result = runner.invoke(app, ["install", "tool", "starship"])

    assert result.exit_code == 0, result.output
    assert captured_installs[0][1] == tmp_path / "configured"


def test_flag_beats_environment(
    captured_installs, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("BINDIR", str(tmp_path / "env-bin"))

    result = runner.invoke(app, ["install", "tool", "starship", "-b", str(tmp_path / "flag")])

    assert result.exit_code == 0, result.output
    assert captured_installs[0][1] == tmp_path / "flag"


def test_missing_bin_dir_is_usage_error(captured_installs) -> None:
    result = runner.invoke(app, ["install", "tool", "starship"])

    assert result.exit_code == 2
    assert "--bin-dir is required" in result.output
    assert captured_installs == []


def test_custom_builds_descriptor(captured_installs, tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "install",
            "custom",
            "--name",
            "rg",
            "--url",
            "https://example.invalid/rg.tar.gz",
            "--archive-type",
            "tar.gz",
            "--archive-path",
            "rg-14/rg",
            "--archive-path",
            "rg-14/complete/rg.bash",
            "--version-arg",
            "^--version",
            "--bin-dir",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    descriptor, destination = captured_installs[0]
    assert destination == tmp_path
    assert descriptor.url == "https://example.invalid/rg.tar.gz"
    assert descriptor.archive is not None
    assert descriptor.archive.kind is ArchiveKind.TAR_GZ
    assert descriptor.members() == ("rg-14/rg", "rg-14/complete/rg.bash")
    assert descriptor.version_flag == "--version"


def test_custom_without_archive(captured_installs, tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "install",
            "custom",
            "-n",
            "tool",
            "-u",
            "https://example.invalid/tool",
            "-a",
            "version",
            "-b",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert captured_installs[0][0].archive is None


def test_custom_archive_path_requires_type(captured_installs, tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "install",
            "custom",
            "-n",
            "tool",
            "-u",
            "https://example.invalid/tool",
            "-p",
            "tool",
            "-a",
            "^--version",
            "-b",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 2
    assert captured_installs == []


def test_install_failure_exits_non_zero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def failing_install(*_: Any) -> Path:
        raise DownloadError("Download of https://example.invalid failed with HTTP 404")

    monkeypatch.setattr(install_module, "install", failing_install)

    result = runner.invoke(app, ["install", "tool", "direnv", "--bin-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "HTTP 404" in result.output


def test_tool_on_unsupported_platform_exits_non_zero(
    captured_installs, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(target.platform, "machine", lambda: "mips")

    result = runner.invoke(app, ["install", "tool", "starship", "--bin-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Unsupported architecture: mips" in result.output
    assert captured_installs == []
