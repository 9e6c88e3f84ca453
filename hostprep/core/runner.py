"""Seam for invoking external programs."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import Protocol

__all__ = ["CommandError", "CommandRunner", "SubprocessRunner", "run_checked"]

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Raised when an external command cannot be spawned or exits non-zero."""

    def __init__(self, argv: Sequence[str], message: str) -> None:
        self.argv = list(argv)
        super().__init__(f"{message}: {' '.join(self.argv)}")


class CommandRunner(Protocol):
    """Protocol for running a command and reporting its exit status."""

    def run(self, argv: Sequence[str]) -> int:
        """Run ``argv`` to completion and return its exit code."""


class SubprocessRunner:
    """Run commands with :mod:`subprocess`, inheriting stdio."""

    def run(self, argv: Sequence[str]) -> int:
        logger.debug("Running %s", list(argv))
        completed = subprocess.run(list(argv), check=False)
        return completed.returncode


def run_checked(runner: CommandRunner, argv: Sequence[str]) -> None:
    """Run a command, raising :class:`CommandError` unless it exits cleanly."""

    try:
        status = runner.run(argv)
    except OSError as exc:
        raise CommandError(argv, f"failed to spawn ({exc})") from exc
    if status != 0:
        raise CommandError(argv, f"exited with status {status}")
