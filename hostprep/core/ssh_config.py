"""Generate per-host SSH client configuration backed by ``skm`` keys."""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from hostprep.core.runner import CommandError, CommandRunner, SubprocessRunner, run_checked
from hostprep.paths import Prefix

__all__ = [
    "KeyGenerationError",
    "KeyMaterialMissingError",
    "PLATFORM_EXTRA_DIRECTIVES",
    "SshConfigEntry",
    "SshConfigError",
    "generate",
    "include_line",
    "include_ssh_config_dir",
    "parse_additions",
    "pascal_case",
    "render_config",
]

logger = logging.getLogger(__name__)

HEADER = "# AUTO GENERATED FILE. DO NOT EDIT\n\n"
KEY_TYPE = "ed25519"
PRIVATE_KEY_NAME = "id_ed25519"
PUBLIC_KEY_NAME = "id_ed25519.pub"

PLATFORM_EXTRA_DIRECTIVES: dict[str, tuple[tuple[str, str], ...]] = {
    "darwin": (("UseKeychain", "yes"),),
}

_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")


class SshConfigError(Exception):
    """Base exception type for SSH configuration failures."""


class KeyGenerationError(SshConfigError):
    """Raised when the key manager fails to create a key."""


class KeyMaterialMissingError(SshConfigError):
    """Raised when the key manager reported success but left no key files."""


@dataclass(slots=True)
class SshConfigEntry:
    """A host alias and the options rendered into its config file."""

    key: str
    hostname: str
    comment: str | None = None
    additions: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.key:
            msg = "key must not be empty"
            raise ValueError(msg)
        if not self.hostname:
            msg = "hostname must not be empty"
            raise ValueError(msg)

    @property
    def key_comment(self) -> str:
        return self.comment or self.hostname


def pascal_case(name: str) -> str:
    """Convert an option name in any common casing to ``PascalCase``."""

    words = _WORD_PATTERN.findall(name)
    return "".join(word[:1].upper() + word[1:].lower() for word in words)


def include_line(prefix: Prefix) -> str:
    """The directive that loads every generated host file."""

    return f"Include {prefix.ssh_config()}/*"


def include_ssh_config_dir(prefix: Prefix) -> None:
    """Append the include directive to the master config unless present."""

    directive = include_line(prefix)
    config_path = prefix.ssh() / "config"
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with config_path.open("a+", encoding="utf-8") as handle:
        handle.seek(0)
        existing = handle.read()
        if not any(line.strip() == directive for line in existing.splitlines()):
            logger.info("Appending include line to %s", config_path)
            if existing and not existing.endswith("\n"):
                handle.write("\n")
            handle.write(f"{directive}\n")

    prefix.ssh_config().mkdir(parents=True, exist_ok=True)


def generate_key(
    entry: SshConfigEntry, prefix: Prefix, runner: CommandRunner | None = None
) -> None:
    """Ask ``skm`` to create an Ed25519 key pair named after the entry."""

    argv = [
        str(prefix.bin() / "skm"),
        "--store-path",
        str(prefix.skm()),
        "create",
        entry.key,
        "-C",
        entry.key_comment,
        "-t",
        KEY_TYPE,
    ]
    logger.info("Generating new ssh key: %s", " ".join(argv))
    try:
        run_checked(runner if runner is not None else SubprocessRunner(), argv)
    except CommandError as exc:
        raise KeyGenerationError(str(exc)) from exc


def check_key(entry: SshConfigEntry, prefix: Prefix) -> Path:
    """Return the private key path, failing if either half of the pair is absent."""

    key_dir = prefix.skm() / entry.key
    public_path = key_dir / PUBLIC_KEY_NAME
    private_path = key_dir / PRIVATE_KEY_NAME
    if not public_path.exists():
        msg = f"public key should exist at {public_path}"
        raise KeyMaterialMissingError(msg)
    if not private_path.exists():
        msg = f"private key should exist at {private_path}"
        raise KeyMaterialMissingError(msg)
    logger.debug("Using key public=%s private=%s", public_path, private_path)
    return private_path


def render_config(
    entry: SshConfigEntry,
    key_path: Path,
    *,
    platform: str | None = None,
) -> str:
    """Render the host block; ``platform`` defaults to :data:`sys.platform`."""

    lines = [
        f"Host {entry.key}",
        f"\tHostname {entry.hostname}",
        "\tAddKeysToAgent yes",
        "\tIdentitiesOnly yes",
        f"\tIdentityFile {key_path.absolute()}",
    ]
    lines.extend(f"\t{pascal_case(name)} {value}" for name, value in entry.additions.items())
    extras = PLATFORM_EXTRA_DIRECTIVES.get(platform if platform is not None else sys.platform, ())
    lines.extend(f"\t{name} {value}" for name, value in extras)
    return HEADER + "".join(f"{line}\n" for line in lines)


def write_config(entry: SshConfigEntry, prefix: Prefix, *, platform: str | None = None) -> Path:
    """Render the entry and replace its file under the per-host directory."""

    key_path = check_key(entry, prefix)
    content = render_config(entry, key_path, platform=platform)
    config_path = prefix.ssh_config() / entry.key
    config_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Generating ssh config %s", config_path)
    logger.debug("Generated content:\n%s", content)
    config_path.write_text(content, encoding="utf-8")
    return config_path


def generate(
    entry: SshConfigEntry,
    prefix: Prefix,
    *,
    runner: CommandRunner | None = None,
    platform: str | None = None,
) -> Path:
    """Include the per-host directory, create the key and write the host file.

    There is no rollback: a key created by ``skm`` stays in the key store if
    a later step fails.
    """

    include_ssh_config_dir(prefix)
    generate_key(entry, prefix, runner)
    return write_config(entry, prefix, platform=platform)


def parse_additions(pairs: Iterable[str]) -> dict[str, str]:
    """Turn ``name=value`` strings into an additions mapping."""

    additions: dict[str, str] = {}
    for item in pairs:
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not pascal_case(name):
            msg = f"Addition must look like name=value: {item!r}"
            raise ValueError(msg)
        additions[name] = value.strip()
    return additions
