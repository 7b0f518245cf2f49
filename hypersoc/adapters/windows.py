"""
Windows backends — winget and Chocolatey.

Manifest entries name their backend in ``source``; both managers are
driven fully unattended (silent, agreements accepted).
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from hypersoc.adapters.base import Backend

# Official bootstrap, as documented on chocolatey.org/install
_CHOCO_INSTALL_SCRIPT = (
    "Set-ExecutionPolicy Bypass -Scope Process -Force; "
    "[System.Net.ServicePointManager]::SecurityProtocol = "
    "[System.Net.ServicePointManager]::SecurityProtocol -bor 3072; "
    "iex ((New-Object System.Net.WebClient).DownloadString("
    "'https://community.chocolatey.org/install.ps1'))"
)


class WingetBackend(Backend):
    """Windows Package Manager."""

    name = "winget"
    binary = "winget"
    platforms = ("windows",)

    def install_command(self, identifier: str) -> list[str]:
        return [
            "winget", "install",
            "--id", identifier,
            "-e",
            "--silent",
            "--accept-package-agreements",
            "--accept-source-agreements",
        ]

    def bootstrap_hint(self) -> str:
        return "winget not found; install 'App Installer' from the Microsoft Store"

    def refresh_commands(self, upgrade: bool = False) -> list[list[str]]:
        return [["winget", "source", "update"]]


class ChocolateyBackend(Backend):
    """Chocolatey, bootstrapped through its PowerShell installer."""

    name = "chocolatey"
    binary = "choco"
    aliases = ("choco",)
    platforms = ("windows",)

    def executable(self) -> str:
        """choco on PATH, or the default location right after bootstrap."""
        found = shutil.which(self.binary)
        if found:
            return found
        root = os.environ.get("ChocolateyInstall", r"C:\ProgramData\chocolatey")
        candidate = Path(root) / "bin" / "choco.exe"
        return str(candidate) if candidate.is_file() else self.binary

    def is_present(self) -> bool:
        return self.executable() != self.binary

    def install_command(self, identifier: str) -> list[str]:
        return [self.executable(), "install", identifier, "-y", "--no-progress"]

    def bootstrap_command(self) -> list[str] | None:
        return [
            "powershell", "-NoProfile", "-ExecutionPolicy", "Bypass",
            "-Command", _CHOCO_INSTALL_SCRIPT,
        ]
