"""Registry of binaries that can be installed by name."""

from __future__ import annotations

from collections.abc import Callable

from hostprep.core import target
from hostprep.core.binary import Archive, ArchiveKind, BinaryDescriptor, InstallError

__all__ = ["UnknownBinaryError", "get", "names", "register"]

DescriptorFactory = Callable[[], BinaryDescriptor]


class UnknownBinaryError(InstallError):
    """Raised when a name is not present in the catalog."""

    def __init__(self, key: str, known: list[str]) -> None:
        self.key = key
        super().__init__(f"Unknown binary {key!r}; choose from: {', '.join(known)}")


_REGISTRY: dict[str, DescriptorFactory] = {}


def register(key: str, factory: DescriptorFactory) -> None:
    """Add a descriptor factory under ``key``.

    Factories are resolved lazily so URLs are templated for the platform the
    install actually runs on.
    """

    if key in _REGISTRY:
        msg = f"Binary {key!r} is already registered"
        raise ValueError(msg)
    _REGISTRY[key] = factory


def get(key: str) -> BinaryDescriptor:
    """Return the descriptor registered under ``key``."""

    try:
        factory = _REGISTRY[key]
    except KeyError:
        raise UnknownBinaryError(key, names()) from None
    return factory()


def names() -> list[str]:
    """Sorted identifiers of every registered binary."""

    return sorted(_REGISTRY)


def _starship() -> BinaryDescriptor:
    return BinaryDescriptor(
        name="starship",
        url=(
            "https://github.com/starship/starship/releases/latest/download/"
            f"starship-{target.target_triplet()}.tar.gz"
        ),
        archive=Archive(ArchiveKind.TAR_GZ, ("starship",)),
        version_arg="--version",
    )


def _direnv() -> BinaryDescriptor:
    return BinaryDescriptor(
        name="direnv",
        url=(
            "https://github.com/direnv/direnv/releases/latest/download/"
            f"direnv.{target.os_uname()}-{target.arch_short()}"
        ),
        version_arg="--version",
    )


register("starship", _starship)
register("direnv", _direnv)
