"""Platform tokens used to build release download URLs."""

from __future__ import annotations

import platform
import sys

from hostprep.core.binary import InstallError

__all__ = ["UnsupportedPlatformError", "arch_short", "os_uname", "target_triplet"]

_ARCH_ALIASES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}

_SHORT_ARCH = {
    "x86_64": "amd64",
    "aarch64": "arm64",
}


class UnsupportedPlatformError(InstallError):
    """Raised when no release exists for the running machine or OS."""


def _machine(machine: str | None = None) -> str:
    raw = (machine if machine is not None else platform.machine()).lower()
    try:
        return _ARCH_ALIASES[raw]
    except KeyError:
        msg = f"Unsupported architecture: {raw}"
        raise UnsupportedPlatformError(msg) from None


def os_uname(system: str | None = None) -> str:
    """Lower-case kernel name as printed by ``uname -s``."""

    return (system if system is not None else platform.system()).lower()


def arch_short(machine: str | None = None) -> str:
    """Architecture in Go release naming (``amd64``, ``arm64``)."""

    return _SHORT_ARCH[_machine(machine)]


def target_triplet(machine: str | None = None, system: str | None = None) -> str:
    """Rust target triplet for the running (or given) platform."""

    arch = _machine(machine)
    name = os_uname(system)
    if name == "darwin":
        return f"{arch}-apple-darwin"
    if name == "linux":
        return f"{arch}-unknown-linux-musl"
    if name == "windows":
        return f"{arch}-pc-windows-msvc"
    msg = f"Unsupported operating system: {name or sys.platform}"
    raise UnsupportedPlatformError(msg)
