"""Utilities for resolving filesystem locations used by hostprep."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_path

__all__ = ["DATA_DIR_ENV", "PREFIX_ENV", "Prefix", "data_dir", "default_prefix_root"]

DATA_DIR_ENV = "HOSTPREP_DATA_DIR"
PREFIX_ENV = "HOSTPREP_PREFIX"


def data_dir() -> Path:
    """Return the base directory for mutable application data.

    The path defaults to the platform-specific user data directory exposed by
    :mod:`platformdirs`. When the ``HOSTPREP_DATA_DIR`` environment variable is
    set the value is treated as an override, allowing tests or alternative
    deployments to isolate their state.
    """

    override = os.getenv(DATA_DIR_ENV)
    path = Path(override).expanduser() if override else user_data_path("hostprep")

    path.mkdir(parents=True, exist_ok=True)
    return path


def default_prefix_root() -> Path:
    """Return the prefix root, honouring ``HOSTPREP_PREFIX`` over :func:`data_dir`."""

    override = os.getenv(PREFIX_ENV)
    return Path(override).expanduser() if override else data_dir()


@dataclass(frozen=True, slots=True)
class Prefix:
    """Directory layout rooted at a single prefix."""

    root: Path

    SSH_DIR_NAME = "ssh"
    SSH_CONFIG_DIR_NAME = "config.d"
    SKM_DIR_NAME = "skm"
    BIN_DIR_NAME = "bin"

    def ssh(self) -> Path:
        return self.root / self.SSH_DIR_NAME

    def ssh_config(self) -> Path:
        """Directory holding one generated config file per host."""
        return self.ssh() / self.SSH_CONFIG_DIR_NAME

    def skm(self) -> Path:
        """Key store root managed by ``skm``."""
        return self.root / self.SKM_DIR_NAME

    def bin(self) -> Path:
        return self.root / self.BIN_DIR_NAME

    def create_dir_all(self) -> None:
        """Create every directory of the layout."""

        for path in (self.ssh_config(), self.skm(), self.bin()):
            path.mkdir(parents=True, exist_ok=True)
