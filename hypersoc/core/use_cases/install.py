"""
Install use case — the full vertical slice of one installer run.

elevation check → resolve platform → load manifest → install tools →
post-install configuration → summary.

Fatal errors (InstallerError) are raised by the layers below and
caught here exactly once; the result carries the error and the exit
code, and the CLI decides what to do with it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from hypersoc.adapters.command import Runner, run_command
from hypersoc.adapters.registry import BackendRegistry, default_registry
from hypersoc.core.config.loader import load_manifest
from hypersoc.core.engine.orchestrator import InstallOrchestrator
from hypersoc.core.errors import ElevationRequiredError, InstallerError
from hypersoc.core.models.outcome import Summary
from hypersoc.core.models.platform import PlatformContext
from hypersoc.core.models.run_config import RunConfig
from hypersoc.core.observability.logging_config import DRYRUN, SUCCESS
from hypersoc.core.services.platform_resolver import check_elevation, resolve
from hypersoc.core.services.post_install import PostInstallConfigurator

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of one installer run."""

    platform: PlatformContext | None = None
    summary: Summary = field(default_factory=Summary)
    post_install: Summary = field(default_factory=Summary)
    error: str | None = None
    error_type: str | None = None
    dry_run: bool = False

    @property
    def exit_code(self) -> int:
        """0 unless a fatal error stopped the run; tool failures don't count."""
        return 1 if self.error else 0

    def to_dict(self) -> dict:
        result: dict = {"exit_code": self.exit_code, "dry_run": self.dry_run}
        if self.error:
            result["error"] = self.error
            result["error_type"] = self.error_type
        if self.platform:
            result["platform"] = self.platform.model_dump(mode="json")
        result["summary"] = self.summary.to_dict()
        result["post_install"] = self.post_install.to_dict()
        return result


def run_install(
    config: RunConfig,
    registry: BackendRegistry | None = None,
    platform: PlatformContext | None = None,
    runner: Runner = run_command,
    post_install: bool = True,
) -> InstallResult:
    """Provision this machine according to the manifest.

    Args:
        config: Run options (dry-run, manifest location, log path...).
        registry: Optional pre-configured backend registry.
        platform: Optional pre-resolved platform (skips detection).
        runner: Command runner shared by backends and post-install.
        post_install: Whether to run the fixed post-install tasks.

    Returns:
        InstallResult; ``exit_code`` is 1 only for fatal errors.
    """
    result = InstallResult(dry_run=config.dry_run)

    if config.dry_run:
        logger.log(DRYRUN, "=== DRY RUN MODE ACTIVE ===")

    try:
        # ── Preconditions ────────────────────────────────────────
        is_elevated = platform.is_elevated if platform else check_elevation()
        if not config.dry_run and not is_elevated:
            raise ElevationRequiredError("Please run as root (Linux) or as Administrator (Windows)")

        if platform is None:
            platform = resolve(dry_run=config.dry_run, is_elevated=is_elevated)
        result.platform = platform
        logger.info("[*] Detected platform: %s", platform.label)

        # ── Manifest ─────────────────────────────────────────────
        manifest = load_manifest(config)

    except InstallerError as e:
        logger.critical("[!] %s", e)
        result.error = str(e)
        result.error_type = type(e).__name__
        return result

    # ── Main pass ────────────────────────────────────────────────
    if registry is None:
        registry = default_registry(runner=runner)
    result.summary = InstallOrchestrator(registry).run(manifest, platform, config)

    # ── Post-install ─────────────────────────────────────────────
    if post_install:
        result.post_install = PostInstallConfigurator(config, platform, runner=runner).run()

    summary = result.summary
    logger.log(
        SUCCESS,
        "[+] Installation Complete! %d succeeded, %d failed, %d skipped, %d simulated",
        summary.success,
        summary.failed,
        summary.skipped,
        summary.simulated,
    )
    return result
