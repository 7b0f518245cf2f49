"""
Backend base — the contract between the orchestrator and package managers.

The orchestrator only talks to package managers through this
interface, never by building command strings itself. Each subclass
knows the exact unattended invocation for one manager.
"""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod

from hypersoc.adapters.command import Runner, run_command
from hypersoc.core.models.outcome import InstallOutcome
from hypersoc.core.observability.logging_config import DRYRUN

logger = logging.getLogger(__name__)


class Backend(ABC):
    """Abstract base class for all package-manager backends.

    Backends return outcomes. They NEVER raise for a failed command;
    the failure is captured in the InstallOutcome.

    To add a backend:
        1. Subclass Backend
        2. Set name/binary/platforms, implement install_command
        3. Override bootstrap_command / refresh_commands if the
           manager supports them
        4. Register it in ``default_registry()``
    """

    name: str = ""
    binary: str = ""
    platforms: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    env: dict[str, str] = {}

    def __init__(self, runner: Runner = run_command):
        self._runner = runner

    # ── Detection ───────────────────────────────────────────────

    def is_present(self) -> bool:
        """Whether the manager's executable is on PATH. Never raises."""
        return shutil.which(self.binary) is not None

    # ── Commands ────────────────────────────────────────────────

    @abstractmethod
    def install_command(self, identifier: str) -> list[str]:
        """Exact unattended invocation that installs ``identifier``."""

    def bootstrap_command(self) -> list[str] | None:
        """Command that installs the manager itself, if it can be automated."""
        return None

    def bootstrap_hint(self) -> str:
        """What the operator should do when bootstrap isn't automated."""
        return f"{self.binary} not found; install it manually"

    def refresh_commands(self, upgrade: bool = False) -> list[list[str]]:
        """Commands that refresh package indexes (and upgrade, if asked)."""
        return []

    # ── Operations ──────────────────────────────────────────────

    def bootstrap(self, dry_run: bool = False) -> InstallOutcome:
        """Make sure the manager is installed. No-op when already present."""
        if self.is_present():
            return InstallOutcome.success(self.name, self.name, detail="already present")

        cmd = self.bootstrap_command()
        if dry_run:
            intent = " ".join(cmd) if cmd else self.bootstrap_hint()
            logger.log(DRYRUN, "[DRY RUN] Would bootstrap %s: %s", self.name, intent)
            return InstallOutcome.simulate(self.name, self.name, detail=intent)

        if cmd is None:
            return InstallOutcome.failure(self.name, self.name, detail=self.bootstrap_hint())

        logger.info("[+] Bootstrapping %s...", self.name)
        result = self._runner(cmd, env_overrides=self.env or None)
        if not result.ok:
            return InstallOutcome.failure(
                self.name, self.name, detail=result.detail, duration_ms=result.elapsed_ms,
            )
        return InstallOutcome.success(self.name, self.name, duration_ms=result.elapsed_ms)

    def refresh(self, dry_run: bool = False, upgrade: bool = False) -> InstallOutcome:
        """Refresh indexes before the first install through this manager."""
        commands = self.refresh_commands(upgrade=upgrade)
        if not commands:
            return InstallOutcome.skip(self.name, self.name, detail="nothing to refresh")

        if dry_run:
            intent = " && ".join(" ".join(c) for c in commands)
            logger.log(DRYRUN, "[DRY RUN] Would run: %s", intent)
            return InstallOutcome.simulate(self.name, self.name, detail=intent)

        elapsed = 0
        for cmd in commands:
            result = self._runner(cmd, env_overrides=self.env or None)
            elapsed += result.elapsed_ms
            if not result.ok:
                return InstallOutcome.failure(
                    self.name, self.name, detail=result.detail, duration_ms=elapsed,
                )
        return InstallOutcome.success(self.name, self.name, duration_ms=elapsed)

    def install(self, identifier: str, dry_run: bool = False) -> InstallOutcome:
        """Install one package. Dry-run returns a simulated outcome."""
        cmd = self.install_command(identifier)
        if dry_run:
            return InstallOutcome.simulate(
                identifier, self.name, detail=f"Would run: {' '.join(cmd)}",
            )

        result = self._runner(cmd, env_overrides=self.env or None)
        if not result.ok:
            return InstallOutcome.failure(
                identifier, self.name, detail=result.detail, duration_ms=result.elapsed_ms,
            )
        return InstallOutcome.success(identifier, self.name, duration_ms=result.elapsed_ms)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
