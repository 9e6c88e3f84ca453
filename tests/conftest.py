"""Shared pytest configuration for the test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from hostprep.paths import Prefix


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Tag every test that is not marked as system as a unit test."""

    for item in items:
        if "system" not in item.keywords:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep configuration and environment lookups inside the test directory."""

    data_dir = tmp_path / "data"
    monkeypatch.setenv("HOSTPREP_DATA_DIR", str(data_dir))
    monkeypatch.delenv("HOSTPREP_PREFIX", raising=False)
    monkeypatch.delenv("BINDIR", raising=False)
    return data_dir


@pytest.fixture()
def prefix(tmp_path: Path) -> Prefix:
    """Provide a prefix layout rooted in a temporary directory."""

    layout = Prefix(tmp_path / "prefix")
    layout.create_dir_all()
    return layout


class FakeRunner:
    """Command runner double that records argv and replays exit codes."""

    def __init__(
        self,
        status: int = 0,
        side_effect: Callable[[Sequence[str]], None] | None = None,
    ) -> None:
        self.status = status
        self.side_effect = side_effect
        self.calls: list[list[str]] = []

    def run(self, argv: Sequence[str]) -> int:
        self.calls.append(list(argv))
        if self.side_effect is not None:
            self.side_effect(argv)
        return self.status


@pytest.fixture()
def fake_runner() -> FakeRunner:
    """Runner that succeeds without spawning processes."""

    return FakeRunner()


@pytest.fixture()
def make_runner() -> Callable[..., FakeRunner]:
    """Factory for runners with custom exit codes or side effects."""

    return FakeRunner
