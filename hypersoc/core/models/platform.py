"""
PlatformContext — what machine we are installing onto.

Resolved once at startup by the platform resolver, then read-only.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class PlatformContext(BaseModel):
    """Resolved host platform."""

    model_config = ConfigDict(frozen=True)

    os: Literal["windows", "linux"]
    distro: str | None = None       # debian, ubuntu, kali, fedora, centos, rhel, arch
    is_elevated: bool = False
    family: str | None = None       # apt, dnf, pacman (Linux only)

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def label(self) -> str:
        """Human-readable platform label for banners and logs."""
        if self.is_windows:
            return "Windows"
        return f"Linux ({self.distro or 'unknown distro'})"
