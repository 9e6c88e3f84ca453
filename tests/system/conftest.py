"""Fixtures supporting CLI system tests."""

from __future__ import annotations

import os
import subprocess
import sys
import threading
from collections.abc import Callable, Iterator, Mapping, Sequence
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

RunCli = Callable[
    [Sequence[str] | None, Mapping[str, str] | None],
    subprocess.CompletedProcess[str],
]


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the repository root."""

    return Path(__file__).resolve().parents[2]


@pytest.fixture
def system_environment(tmp_path, project_root: Path) -> tuple[dict[str, str], Path]:
    """Provide an isolated environment for invoking the CLI as a subprocess."""

    data_dir = tmp_path / "data"
    env = os.environ.copy()
    env["HOSTPREP_DATA_DIR"] = str(data_dir)
    env.pop("HOSTPREP_PREFIX", None)
    env.pop("BINDIR", None)

    existing_path = env.get("PYTHONPATH")
    components = [str(project_root)]
    if existing_path:
        components.append(existing_path)
    env["PYTHONPATH"] = os.pathsep.join(components)

    return env, data_dir


@pytest.fixture
def run_cli(
    system_environment: tuple[dict[str, str], Path],
    project_root: Path,
) -> RunCli:
    """Return a helper that executes the CLI via ``python -m hostprep``."""

    base_env, _ = system_environment

    def _run(
        args: Sequence[str] | None,
        extra_env: Mapping[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        command = [sys.executable, "-m", "hostprep"]
        if args:
            command.extend(args)

        env = base_env.copy()
        if extra_env:
            env.update(extra_env)

        return subprocess.run(
            command,
            cwd=project_root,
            env=env,
            text=True,
            capture_output=True,
            check=False,
        )

    return _run


@pytest.fixture
def release_server(tmp_path: Path) -> Iterator[tuple[str, Path]]:
    """Serve a directory over HTTP on localhost, yielding (base url, directory)."""

    root = tmp_path / "releases"
    root.mkdir()
    handler = partial(SimpleHTTPRequestHandler, directory=str(root))
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        host, port = server.server_address[:2]
        yield f"http://{host}:{port}", root
    finally:
        server.shutdown()
        server.server_close()
        thread.join()
