"""
Detect use case — report the platform and which backends are present.

Purely read-only; safe to run unprivileged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from hypersoc.adapters.registry import BackendRegistry, default_registry
from hypersoc.core.errors import InstallerError
from hypersoc.core.models.platform import PlatformContext
from hypersoc.core.services.platform_resolver import OS_RELEASE, resolve


@dataclass
class DetectResult:
    """Result of environment detection."""

    platform: PlatformContext | None = None
    backends: dict[str, dict[str, Any]] = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "platform": self.platform.model_dump(mode="json") if self.platform else None,
            "backends": self.backends,
        }


def detect_environment(
    registry: BackendRegistry | None = None,
    os_release: Path = OS_RELEASE,
    system: str | None = None,
) -> DetectResult:
    """Resolve the platform leniently and probe the backends for it."""
    result = DetectResult()
    try:
        # Lenient: an unknown distro is reported, not fatal
        result.platform = resolve(dry_run=True, os_release=os_release, system=system)
    except InstallerError as e:
        result.error = str(e)
        return result

    registry = registry or default_registry()
    result.backends = registry.status(platform=result.platform.os)
    return result
