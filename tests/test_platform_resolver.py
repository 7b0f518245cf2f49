"""
Tests for the platform resolver — os-release parsing, distro families,
elevation, dry-run degradation.
"""

import os
import shutil
import textwrap
from pathlib import Path

import pytest

from hypersoc.core.errors import UnsupportedPlatformError
from hypersoc.core.services.platform_resolver import (
    check_elevation,
    detect_distro,
    family_for,
    read_os_release,
    resolve,
)


def _os_release(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "os-release"
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


@pytest.fixture
def no_package_managers(monkeypatch):
    monkeypatch.setattr(shutil, "which", lambda name: None)


# ── os-release parsing ───────────────────────────────────────────────


class TestOsRelease:
    def test_parse_quoted_values(self, tmp_path: Path):
        path = _os_release(tmp_path, """\
            # comment
            NAME="Ubuntu"
            ID=ubuntu
            PRETTY_NAME="Ubuntu 22.04.4 LTS"
        """)
        info = read_os_release(path)
        assert info["ID"] == "ubuntu"
        assert info["PRETTY_NAME"] == "Ubuntu 22.04.4 LTS"

    def test_missing_file(self, tmp_path: Path):
        assert read_os_release(tmp_path / "nope") == {}

    def test_detect_direct_id(self, tmp_path: Path):
        assert detect_distro(_os_release(tmp_path, "ID=kali\n")) == "kali"

    def test_detect_via_id_like(self, tmp_path: Path):
        path = _os_release(tmp_path, 'ID=linuxmint\nID_LIKE="ubuntu debian"\n')
        assert detect_distro(path) == "ubuntu"

    def test_detect_unrecognized_returns_raw_id(self, tmp_path: Path):
        assert detect_distro(_os_release(tmp_path, "ID=gentoo\n")) == "gentoo"

    @pytest.mark.parametrize(
        "distro,family",
        [
            ("debian", "apt"),
            ("ubuntu", "apt"),
            ("kali", "apt"),
            ("fedora", "dnf"),
            ("centos", "dnf"),
            ("rhel", "dnf"),
            ("arch", "pacman"),
            ("gentoo", None),
            (None, None),
        ],
    )
    def test_family_for(self, distro, family):
        assert family_for(distro) == family


# ── resolve() ────────────────────────────────────────────────────────


class TestResolve:
    def test_ubuntu(self, tmp_path: Path):
        path = _os_release(tmp_path, "ID=ubuntu\n")
        ctx = resolve(os_release=path, system="Linux", is_elevated=True)
        assert ctx.os == "linux"
        assert ctx.distro == "ubuntu"
        assert ctx.family == "apt"
        assert ctx.is_elevated

    def test_arch(self, tmp_path: Path):
        ctx = resolve(os_release=_os_release(tmp_path, "ID=arch\n"), system="Linux", is_elevated=False)
        assert ctx.family == "pacman"

    def test_windows(self):
        ctx = resolve(system="Windows", is_elevated=True)
        assert ctx.is_windows
        assert ctx.distro is None

    def test_unsupported_os(self):
        with pytest.raises(UnsupportedPlatformError, match="darwin"):
            resolve(system="Darwin", is_elevated=True)

    def test_unsupported_os_even_in_dry_run(self):
        with pytest.raises(UnsupportedPlatformError):
            resolve(dry_run=True, system="Darwin", is_elevated=True)

    def test_unknown_distro_fatal(self, tmp_path: Path):
        path = _os_release(tmp_path, "ID=gentoo\n")
        with pytest.raises(UnsupportedPlatformError, match="gentoo"):
            resolve(os_release=path, system="Linux", is_elevated=True)

    def test_missing_os_release_fatal(self, tmp_path: Path):
        with pytest.raises(UnsupportedPlatformError, match="Cannot detect"):
            resolve(os_release=tmp_path / "nope", system="Linux", is_elevated=True)

    def test_unknown_distro_dry_run_degrades(self, tmp_path: Path, no_package_managers):
        ctx = resolve(dry_run=True, os_release=tmp_path / "nope", system="Linux", is_elevated=False)
        assert ctx.os == "linux"
        assert ctx.distro is None
        assert ctx.family is None

    def test_unknown_distro_dry_run_guesses_family(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/dnf" if name == "dnf" else None)
        path = _os_release(tmp_path, "ID=gentoo\n")
        ctx = resolve(dry_run=True, os_release=path, system="Linux", is_elevated=False)
        assert ctx.family == "dnf"


# ── Elevation ────────────────────────────────────────────────────────


class TestElevation:
    def test_root(self, monkeypatch):
        monkeypatch.setattr(os, "geteuid", lambda: 0, raising=False)
        assert check_elevation("Linux") is True

    def test_regular_user(self, monkeypatch):
        monkeypatch.setattr(os, "geteuid", lambda: 1000, raising=False)
        assert check_elevation("Linux") is False

    def test_undeterminable(self, monkeypatch):
        monkeypatch.delattr(os, "geteuid", raising=False)
        with pytest.raises(UnsupportedPlatformError):
            check_elevation("Linux")
