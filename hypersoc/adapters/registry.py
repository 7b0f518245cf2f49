"""
Backend registry — central dispatch for all package-manager operations.

The orchestrator never talks to backends directly — always through
the registry. The registry resolves names and aliases, applies the
run's dry-run flag and retry policy, remembers which backends have
already been bootstrapped, and turns unexpected exceptions into
failed outcomes.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from hypersoc.adapters.base import Backend
from hypersoc.adapters.command import Runner, run_command
from hypersoc.core.models.outcome import InstallOutcome
from hypersoc.core.models.run_config import RunConfig
from hypersoc.core.reliability.retry import call_with_retry

logger = logging.getLogger(__name__)


class BackendRegistry:
    """Central registry and dispatcher for backends.

    Features:
        - Register backends by name (aliases resolve too)
        - Bootstrap each backend at most once per registry
        - Install packages with dry-run and retry applied
        - Query backend presence
    """

    def __init__(self) -> None:
        self._backends: dict[str, Backend] = {}
        self._aliases: dict[str, str] = {}
        self._ready: dict[str, InstallOutcome] = {}

    def register(self, backend: Backend) -> None:
        """Register a backend under its name and aliases."""
        name = backend.name
        if name in self._backends:
            logger.warning("Overwriting existing backend: %s", name)
        self._backends[name] = backend
        for alias in backend.aliases:
            self._aliases[alias] = name
        logger.debug("Registered backend: %s", name)

    def resolve_name(self, name: str) -> str | None:
        """Canonical backend name for a name or alias, if known."""
        key = name.strip().lower()
        if key in self._backends:
            return key
        return self._aliases.get(key)

    def get(self, name: str) -> Backend | None:
        """Look up a backend by name or alias."""
        canonical = self.resolve_name(name)
        return self._backends.get(canonical) if canonical else None

    def names(self) -> list[str]:
        """List all registered backend names."""
        return list(self._backends.keys())

    def status(self, platform: str | None = None) -> dict[str, dict[str, Any]]:
        """Presence of every registered backend (optionally per platform)."""
        result = {}
        for name, backend in self._backends.items():
            if platform and platform not in backend.platforms:
                continue
            try:
                present = backend.is_present()
            except Exception:
                present = False
            result[name] = {
                "name": name,
                "present": present,
                "binary": backend.binary,
                "type": backend.__class__.__name__,
            }
        return result

    # ── Dispatch ────────────────────────────────────────────────

    def ensure_backend(self, name: str, config: RunConfig) -> InstallOutcome:
        """Bootstrap a backend once; later calls return the first outcome."""
        canonical = self.resolve_name(name) or name
        if canonical in self._ready:
            return self._ready[canonical]

        backend = self._backends.get(canonical)
        if backend is None:
            return InstallOutcome.skip(name, name, detail=f"Unknown backend '{name}'")

        try:
            outcome = backend.bootstrap(dry_run=config.dry_run)
        except Exception as e:
            logger.error("Backend %s raised during bootstrap: %s", canonical, e)
            outcome = InstallOutcome.failure(canonical, canonical, detail=f"Unexpected error: {e}")

        self._ready[canonical] = outcome
        return outcome

    def refresh_backend(self, name: str, config: RunConfig, upgrade: bool = False) -> InstallOutcome:
        """Refresh a backend's package index, never raising."""
        backend = self.get(name)
        if backend is None:
            return InstallOutcome.skip(name, name, detail=f"Unknown backend '{name}'")
        try:
            return backend.refresh(dry_run=config.dry_run, upgrade=upgrade)
        except Exception as e:
            logger.error("Backend %s raised during refresh: %s", backend.name, e)
            return InstallOutcome.failure(backend.name, backend.name, detail=f"Unexpected error: {e}")

    def install_package(self, name: str, identifier: str, config: RunConfig) -> InstallOutcome:
        """Install one package through the named backend.

        This is the main dispatch method. It:
        1. Resolves the backend (unknown → skipped, never fatal)
        2. Simulates under dry-run
        3. Executes with the run's retry policy
        4. Returns an InstallOutcome (never raises)
        """
        backend = self.get(name)
        if backend is None:
            return InstallOutcome.skip(identifier, name, detail=f"Unknown backend '{name}'")

        if config.dry_run:
            return backend.install(identifier, dry_run=True)

        def attempt() -> InstallOutcome:
            try:
                return backend.install(identifier)
            except Exception as e:
                # Backends should never raise, but one bad tool must not stop the batch
                logger.error("Backend %s raised installing %s: %s", backend.name, identifier, e)
                return InstallOutcome.failure(identifier, backend.name, detail=f"Unexpected error: {e}")

        start = time.monotonic()
        outcome = call_with_retry(attempt, config.retry)
        elapsed_ms = int((time.monotonic() - start) * 1000)
        return outcome.model_copy(update={"duration_ms": elapsed_ms})


def default_registry(runner: Runner = run_command) -> BackendRegistry:
    """Registry with every supported backend, sharing one command runner."""
    from hypersoc.adapters.linux import (
        AptBackend,
        DnfBackend,
        PacmanBackend,
        PipBackend,
        SnapBackend,
    )
    from hypersoc.adapters.windows import ChocolateyBackend, WingetBackend

    registry = BackendRegistry()
    for backend_cls in (
        WingetBackend,
        ChocolateyBackend,
        AptBackend,
        DnfBackend,
        PacmanBackend,
        PipBackend,
        SnapBackend,
    ):
        registry.register(backend_cls(runner=runner))
    return registry
