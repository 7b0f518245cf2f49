"""
RunConfig — the options of a single installer run.

Built once from CLI arguments and defaults, then passed explicitly to
every component. Dry-run is a field here, never a global.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from hypersoc.core.reliability.retry import RetryPolicy

DEFAULT_CONFIG_PATH = Path("tools.json")
DEFAULT_CONFIG_URL = "https://raw.githubusercontent.com/PrototypePrime/Hyper-SOC/main/tools.json"
DEFAULT_LOG_PATH = Path("install.log")


class RunConfig(BaseModel):
    """Immutable options for one run."""

    model_config = ConfigDict(frozen=True)

    dry_run: bool = False
    config_path: Path = DEFAULT_CONFIG_PATH
    config_url: str = DEFAULT_CONFIG_URL
    log_path: Path = DEFAULT_LOG_PATH
    upgrade_system: bool = True
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
