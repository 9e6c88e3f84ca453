"""Personal machine setup helpers: binary installs and SSH host entries."""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
