"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from hypersoc.core.models import Manifest, RunConfig, InstallOutcome
"""

from hypersoc.core.models.manifest import LINUX_FAMILIES, LinuxManifest, Manifest, ToolEntry
from hypersoc.core.models.outcome import InstallOutcome, OutcomeStatus, Summary
from hypersoc.core.models.platform import PlatformContext
from hypersoc.core.models.run_config import RunConfig

__all__ = [
    "LINUX_FAMILIES",
    # outcome.py
    "InstallOutcome",
    # manifest.py
    "LinuxManifest",
    "Manifest",
    "OutcomeStatus",
    # platform.py
    "PlatformContext",
    # run_config.py
    "RunConfig",
    "Summary",
    "ToolEntry",
]
