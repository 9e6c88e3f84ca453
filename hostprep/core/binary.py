"""Download, extract and install release binaries."""

from __future__ import annotations

import io
import logging
import os
import tarfile
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

import httpx

from hostprep.core.runner import CommandError, CommandRunner, SubprocessRunner, run_checked

__all__ = [
    "Archive",
    "ArchiveError",
    "ArchiveKind",
    "ArchiveMemberNotFoundError",
    "BinaryDescriptor",
    "DownloadError",
    "InstallError",
    "VersionCheckError",
    "download",
    "extract_member",
    "install",
]

logger = logging.getLogger(__name__)

_VERSION_ARG_MARKER = "^"
_EXECUTABLE_MODE = 0o755
_DOWNLOAD_TIMEOUT = 60.0


class InstallError(Exception):
    """Base exception type for binary installation failures."""


class DownloadError(InstallError):
    """Raised when the release payload cannot be fetched."""


class ArchiveError(InstallError):
    """Raised when a downloaded archive cannot be read."""


class ArchiveMemberNotFoundError(ArchiveError):
    """Raised when a requested entry is absent from the archive."""

    def __init__(self, member: str) -> None:
        self.member = member
        super().__init__(f"Archive has no entry named {member!r}")


class VersionCheckError(InstallError):
    """Raised when the installed binary fails to report its version."""


class ArchiveKind(str, Enum):
    """Supported archive container formats."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"


@dataclass(frozen=True, slots=True)
class Archive:
    """How to find the executable inside a downloaded archive."""

    kind: ArchiveKind
    paths: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class BinaryDescriptor:
    """Immutable description of a downloadable binary."""

    name: str
    url: str
    version_arg: str
    archive: Archive | None = None

    def __post_init__(self) -> None:
        if not self.name:
            msg = "name must not be empty"
            raise ValueError(msg)
        if not self.url:
            msg = "url must not be empty"
            raise ValueError(msg)

    @property
    def version_flag(self) -> str:
        """Version argument with the escape marker removed."""

        return self.version_arg.removeprefix(_VERSION_ARG_MARKER)

    def members(self) -> tuple[str, ...]:
        """Archive entries to extract, in request order."""

        if self.archive is None:
            return ()
        if self.archive.paths:
            return self.archive.paths
        return (self.name,)


def _tar_member(data: bytes, member: str) -> bytes:
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
            for info in tar:
                if info.name != member:
                    continue
                if not info.isfile():
                    break
                handle = tar.extractfile(info)
                if handle is None:  # pragma: no cover - isfile() guarantees a handle
                    break
                return handle.read()
    except (tarfile.TarError, OSError, EOFError) as exc:
        msg = f"Unable to read tar.gz archive: {exc}"
        raise ArchiveError(msg) from exc
    raise ArchiveMemberNotFoundError(member)


def _zip_member(data: bytes, member: str) -> bytes:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            for info in archive.infolist():
                if info.filename != member:
                    continue
                if info.is_dir():
                    break
                return archive.read(info)
    except (zipfile.BadZipFile, OSError) as exc:
        msg = f"Unable to read zip archive: {exc}"
        raise ArchiveError(msg) from exc
    raise ArchiveMemberNotFoundError(member)


_EXTRACTORS = {
    ArchiveKind.TAR_GZ: _tar_member,
    ArchiveKind.ZIP: _zip_member,
}


def extract_member(data: bytes, kind: ArchiveKind, member: str) -> bytes:
    """Return the bytes of the entry named exactly ``member``."""

    return _EXTRACTORS[kind](data, member)


def download(url: str, *, client: httpx.Client | None = None) -> bytes:
    """Fetch ``url`` and return the response body."""

    logger.info("Downloading %s", url)
    owned = client is None
    http = client if client is not None else httpx.Client(timeout=_DOWNLOAD_TIMEOUT)
    try:
        response = http.get(url, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        msg = f"Download of {url} failed with HTTP {exc.response.status_code}"
        raise DownloadError(msg) from exc
    except httpx.HTTPError as exc:
        msg = f"Download of {url} failed: {exc}"
        raise DownloadError(msg) from exc
    finally:
        if owned:
            http.close()
    return response.content


def _payloads(descriptor: BinaryDescriptor, data: bytes) -> list[tuple[str, bytes]]:
    """Resolve the (file name, content) pairs to write for a download."""

    if descriptor.archive is None:
        return [(descriptor.name, data)]
    payloads: list[tuple[str, bytes]] = []
    for index, member in enumerate(descriptor.members()):
        content = extract_member(data, descriptor.archive.kind, member)
        # the first member is the executable and always lands under ``name``
        file_name = descriptor.name if index == 0 else PurePosixPath(member).name
        payloads.append((file_name, content))
    return payloads


def _write_executable(path: Path, content: bytes) -> None:
    try:
        path.write_bytes(content)
        if os.name == "posix":
            path.chmod(_EXECUTABLE_MODE)
    except OSError as exc:
        msg = f"Unable to write {path}: {exc}"
        raise InstallError(msg) from exc


def install(
    descriptor: BinaryDescriptor,
    destination_dir: Path,
    *,
    client: httpx.Client | None = None,
    runner: CommandRunner | None = None,
) -> Path:
    """Install ``descriptor`` into ``destination_dir`` and smoke-test it.

    Every step is fatal on failure. Files are only written once the whole
    payload has been downloaded and extracted, so a broken archive never
    leaves a partial install behind. Returns the path of the installed
    executable.
    """

    data = download(descriptor.url, client=client)
    payloads = _payloads(descriptor, data)

    try:
        destination_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"Unable to create {destination_dir}: {exc}"
        raise InstallError(msg) from exc

    for file_name, content in payloads:
        target = destination_dir / file_name
        logger.info("Installing %s", target)
        _write_executable(target, content)

    executable = destination_dir / descriptor.name
    _check_version(executable, descriptor.version_flag, runner)
    return executable


def _check_version(
    executable: Path, version_flag: str, runner: CommandRunner | None
) -> None:
    argv: Sequence[str] = [str(executable), version_flag]
    try:
        run_checked(runner if runner is not None else SubprocessRunner(), argv)
    except CommandError as exc:
        msg = f"Version check failed: {exc}"
        raise VersionCheckError(msg) from exc
