"""
Linux backends — apt, dnf, pacman, snap and pip.

Each class only knows its manager's unattended flags; presence,
dry-run and error capture come from ``Backend``.
"""

from __future__ import annotations

import shutil
import sys

from hypersoc.adapters.base import Backend


class AptBackend(Backend):
    """Debian, Ubuntu and Kali."""

    name = "apt"
    binary = "apt-get"
    platforms = ("linux",)
    env = {"DEBIAN_FRONTEND": "noninteractive"}

    def install_command(self, identifier: str) -> list[str]:
        return ["apt-get", "install", "-y", identifier]

    def refresh_commands(self, upgrade: bool = False) -> list[list[str]]:
        commands = [["apt-get", "update"]]
        if upgrade:
            commands.append(["apt-get", "upgrade", "-y"])
        return commands


class DnfBackend(Backend):
    """Fedora, CentOS and RHEL."""

    name = "dnf"
    binary = "dnf"
    platforms = ("linux",)

    def install_command(self, identifier: str) -> list[str]:
        return ["dnf", "install", "-y", identifier]

    def refresh_commands(self, upgrade: bool = False) -> list[list[str]]:
        if upgrade:
            return [["dnf", "upgrade", "-y"]]
        return [["dnf", "makecache"]]


class PacmanBackend(Backend):
    """Arch Linux."""

    name = "pacman"
    binary = "pacman"
    platforms = ("linux",)

    def install_command(self, identifier: str) -> list[str]:
        return ["pacman", "-S", "--noconfirm", "--needed", identifier]

    def refresh_commands(self, upgrade: bool = False) -> list[list[str]]:
        # Arch does not support partial upgrades, so no bare -Sy
        if upgrade:
            return [["pacman", "-Syu", "--noconfirm"]]
        return []


class SnapBackend(Backend):
    """Snap packages (e.g. Ghidra), installed after the distro packages."""

    name = "snap"
    binary = "snap"
    platforms = ("linux",)

    def install_command(self, identifier: str) -> list[str]:
        return ["snap", "install", identifier]

    def bootstrap_hint(self) -> str:
        return "Snap not found. Skipping automatic install; please install snapd manually"


class PipBackend(Backend):
    """Python security tools, installed with the system interpreter."""

    name = "pip"
    binary = "pip3"
    platforms = ("linux",)

    def python(self) -> str:
        """Interpreter that owns the pip installs."""
        return shutil.which("python3") or sys.executable

    def is_present(self) -> bool:
        return shutil.which("pip3") is not None or shutil.which("pip") is not None

    def install_command(self, identifier: str) -> list[str]:
        return [self.python(), "-m", "pip", "install", identifier]

    def bootstrap_command(self) -> list[str] | None:
        return [self.python(), "-m", "ensurepip", "--upgrade"]

    def refresh_commands(self, upgrade: bool = False) -> list[list[str]]:
        return [[self.python(), "-m", "pip", "install", "--upgrade", "pip"]]
