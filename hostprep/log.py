"""Logging setup shared by the CLI entry points."""

from __future__ import annotations

import logging
import sys

__all__ = ["configure_logging"]

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route log records to stderr, at DEBUG when ``verbose`` is set."""

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format=_LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
