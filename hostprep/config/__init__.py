"""Configuration models and persistence helpers for hostprep."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from hostprep.paths import data_dir

__all__ = ["AppConfig", "ConfigStore", "default_config_path", "CONFIG_KEYS"]

_DEFAULT_CONFIG_FILENAME = "config.json"

CONFIG_KEYS = ("bin_dir", "prefix")


def _optional_path(value: Any) -> Path | None:
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if not normalized:
        return None
    return Path(normalized).expanduser()


@dataclass(slots=True)
class AppConfig:
    """Top-level application configuration settings."""

    bin_dir: Path | None = None
    prefix: Path | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize the configuration into a JSON-compatible structure."""

        payload: dict[str, Any] = {}
        if self.bin_dir is not None:
            payload["bin_dir"] = str(self.bin_dir)
        if self.prefix is not None:
            payload["prefix"] = str(self.prefix)
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AppConfig:
        """Create a configuration instance from serialized data."""

        return cls(
            bin_dir=_optional_path(payload.get("bin_dir")),
            prefix=_optional_path(payload.get("prefix")),
        )

    def unset(self, key: str) -> bool:
        """Clear a configured value, returning whether it was set."""

        if key not in CONFIG_KEYS:
            msg = f"Unknown configuration key: {key}"
            raise ValueError(msg)
        if getattr(self, key) is None:
            return False
        setattr(self, key, None)
        return True


def default_config_path() -> Path:
    """Return the default location for the application's configuration file."""

    return data_dir() / _DEFAULT_CONFIG_FILENAME


class ConfigStore:
    """Manage persistence of the application configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else default_config_path()

    @property
    def path(self) -> Path:
        """Expose the backing configuration file path."""

        return self._path

    def load(self) -> AppConfig:
        """Load configuration from disk, returning defaults when absent."""

        if not self._path.exists():
            return AppConfig()
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError:
            return AppConfig()
        if not raw.strip():
            return AppConfig()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            return AppConfig()
        if not isinstance(payload, dict):
            return AppConfig()
        return AppConfig.from_payload(payload)

    def save(self, config: AppConfig) -> None:
        """Persist the provided configuration to disk atomically."""

        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(config.to_payload(), indent=2, sort_keys=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(data, encoding="utf-8")
        tmp_path.replace(self._path)
