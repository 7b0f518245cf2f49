"""
Shared test fixtures and configuration.
"""

import json
import logging
import shutil
from pathlib import Path

import pytest

from hypersoc.adapters.command import CommandResult
from hypersoc.core.models.platform import PlatformContext


class FakeRunner:
    """Records commands instead of running them.

    Any command containing a token from ``fail_on`` exits non-zero.
    """

    def __init__(self):
        self.calls: list[list[str]] = []
        self.kwargs: list[dict] = []
        self.fail_on: set[str] = set()
        self.returncode = 100
        self.stderr = "E: Unable to locate package"

    def __call__(self, cmd, **kwargs) -> CommandResult:
        self.calls.append(list(cmd))
        self.kwargs.append(kwargs)
        if any(token in self.fail_on for token in cmd):
            return CommandResult(cmd=list(cmd), returncode=self.returncode, stderr=self.stderr)
        return CommandResult(cmd=list(cmd), returncode=0, stdout="ok")


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A command runner that never spawns a process."""
    return FakeRunner()


@pytest.fixture
def write_manifest(tmp_path: Path):
    """Write a manifest dict (or raw text) and return its path."""

    def _write(content, name: str = "tools.json") -> Path:
        path = tmp_path / name
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def nothing_installed(monkeypatch):
    monkeypatch.setattr(shutil, "which", lambda name: None)


@pytest.fixture
def everything_installed(monkeypatch):
    monkeypatch.setattr(shutil, "which", lambda name: f"/usr/bin/{name}")


@pytest.fixture
def ubuntu() -> PlatformContext:
    return PlatformContext(os="linux", distro="ubuntu", is_elevated=True, family="apt")


@pytest.fixture
def windows() -> PlatformContext:
    return PlatformContext(os="windows", is_elevated=True)


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """setup_logging() replaces root handlers; drop the ones it added."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
