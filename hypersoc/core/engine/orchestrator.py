"""
Install orchestrator — the central installation loop.

Takes the manifest and the resolved platform, selects the tools for
this machine, makes sure each backend they need is bootstrapped,
installs them one at a time in manifest order, and counts outcomes.

Flow:
    select work items → bootstrap/refresh backends → install each → summary

A failed tool is logged and counted; the loop always goes on to the
next one. Installs are strictly sequential: package managers hold
their own locks and earlier entries may be prerequisites of later
ones (a JDK before Ghidra).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from hypersoc.adapters.registry import BackendRegistry
from hypersoc.core.models.manifest import Manifest
from hypersoc.core.models.outcome import InstallOutcome, Summary
from hypersoc.core.models.platform import PlatformContext
from hypersoc.core.models.run_config import RunConfig
from hypersoc.core.observability.logging_config import DRYRUN, SUCCESS

logger = logging.getLogger(__name__)

# Linux sections installed after the distro family, in this order
_LINUX_EXTRA_FAMILIES = ("snap", "pip")


@dataclass(frozen=True)
class WorkItem:
    """One tool to install through one backend."""

    backend: str
    identifier: str
    label: str = ""

    @property
    def display(self) -> str:
        return self.label or self.identifier


def log_outcome(outcome: InstallOutcome, label: str | None = None) -> None:
    """Mirror one outcome to the console and the log file."""
    name = label or outcome.tool
    if outcome.status == "success":
        logger.log(SUCCESS, "[+] %s installed via %s", name, outcome.backend)
    elif outcome.status == "simulated":
        logger.log(DRYRUN, "[DRY RUN] Would install %s via %s", name, outcome.backend)
    elif outcome.status == "skipped":
        logger.warning("[!] Skipped %s: %s", name, outcome.detail or "no reason given")
    else:
        logger.error("[!] Failed to install %s: %s", name, outcome.detail or "unknown error")


class InstallOrchestrator:
    """Drives the main installation pass through a BackendRegistry."""

    def __init__(self, registry: BackendRegistry):
        self._registry = registry

    def select(self, manifest: Manifest, platform: PlatformContext) -> list[WorkItem]:
        """Ordered work items for this platform."""
        if platform.is_windows:
            return [
                WorkItem(backend=entry.source, identifier=entry.id, label=entry.name)
                for entry in manifest.windows
            ]

        families: list[str] = []
        if platform.family:
            families.append(platform.family)
        families.extend(_LINUX_EXTRA_FAMILIES)

        return [
            WorkItem(backend=family, identifier=pkg)
            for family in families
            for pkg in manifest.linux.packages_for(family)
        ]

    def run(self, manifest: Manifest, platform: PlatformContext, config: RunConfig) -> Summary:
        """Install every selected tool and return the aggregate counts."""
        summary = Summary()
        items = self.select(manifest, platform)

        if not items:
            logger.info("[*] Nothing to install for %s", platform.label)
            return summary

        logger.info("[+] Installing %d tool(s) for %s", len(items), platform.label)
        unavailable = self._prepare_backends(items, platform, config)

        for item in items:
            canonical = self._supported_backend(item.backend, platform)
            if canonical is None:
                outcome = InstallOutcome.skip(
                    item.identifier,
                    item.backend,
                    detail=f"Unknown source '{item.backend}' for {platform.os}",
                )
            elif canonical in unavailable:
                outcome = InstallOutcome.skip(
                    item.identifier,
                    canonical,
                    detail=f"backend unavailable: {unavailable[canonical]}",
                )
            else:
                if not config.dry_run:
                    logger.info("[->] Installing %s...", item.display)
                outcome = self._registry.install_package(canonical, item.identifier, config)

            log_outcome(outcome, label=item.display)
            summary.record(outcome)

        return summary

    # ── Internals ───────────────────────────────────────────────

    def _supported_backend(self, name: str, platform: PlatformContext) -> str | None:
        """Canonical backend name if it exists and serves this OS."""
        backend = self._registry.get(name)
        if backend is None or platform.os not in backend.platforms:
            return None
        return backend.name

    def _prepare_backends(
        self,
        items: list[WorkItem],
        platform: PlatformContext,
        config: RunConfig,
    ) -> dict[str, str]:
        """Bootstrap and refresh each backend once, in first-use order.

        Returns:
            Backends that could not be bootstrapped, with the reason.
        """
        unavailable: dict[str, str] = {}
        seen: list[str] = []
        for item in items:
            canonical = self._supported_backend(item.backend, platform)
            if canonical is not None and canonical not in seen:
                seen.append(canonical)

        for name in seen:
            boot = self._registry.ensure_backend(name, config)
            if boot.failed:
                logger.error("[!] Cannot use %s: %s", name, boot.detail)
                unavailable[name] = boot.detail or "bootstrap failed"
                continue

            upgrade = config.upgrade_system and name == platform.family
            refreshed = self._registry.refresh_backend(name, config, upgrade=upgrade)
            if refreshed.failed:
                # Stale indexes are not fatal; installs may still work
                logger.warning("[!] Refreshing %s failed: %s", name, refreshed.detail)

        return unavailable
