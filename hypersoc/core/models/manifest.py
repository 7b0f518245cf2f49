"""
Manifest model — the declarative list of tools to install.

Loaded from tools.json, this is the canonical truth about what a
workstation should end up with. Sections and package families that
the file leaves out (or sets to null) normalize to empty lists, so
callers can always iterate without checking.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Linux package families, in the order they are documented in tools.json
LINUX_FAMILIES = ("apt", "dnf", "pacman", "pip", "snap")


class ToolEntry(BaseModel):
    """A Windows tool declaration.

    ``source`` is kept as a free string here; whether it maps to a
    known backend is decided at install time, where an unknown source
    is skipped rather than rejected.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    id: str
    source: str


class LinuxManifest(BaseModel):
    """Package identifiers per Linux backend family."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    apt_packages: list[str] = Field(default_factory=list)
    dnf_packages: list[str] = Field(default_factory=list)
    pacman_packages: list[str] = Field(default_factory=list)
    pip_packages: list[str] = Field(default_factory=list)
    snap_packages: list[str] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def packages_for(self, family: str) -> list[str]:
        """Packages declared for a family name (``apt``, ``pip``, ...)."""
        if family not in LINUX_FAMILIES:
            return []
        return list(getattr(self, f"{family}_packages"))

    @property
    def total(self) -> int:
        return sum(len(self.packages_for(f)) for f in LINUX_FAMILIES)


class Manifest(BaseModel):
    """Root manifest, keyed by platform."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    linux: LinuxManifest = Field(default_factory=LinuxManifest)
    windows: list[ToolEntry] = Field(default_factory=list)

    @field_validator("linux", mode="before")
    @classmethod
    def _null_linux(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("windows", mode="before")
    @classmethod
    def _null_windows(cls, value: Any) -> Any:
        return [] if value is None else value
