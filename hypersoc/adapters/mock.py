"""
Mock backend — test double for package-manager operations.

Simulates a manager without touching the system. By default every
install succeeds; individual identifiers can be configured to fail.
"""

from __future__ import annotations

from hypersoc.adapters.base import Backend
from hypersoc.core.models.outcome import InstallOutcome


class MockBackend(Backend):
    """Configurable in-memory backend."""

    def __init__(
        self,
        backend_name: str = "mock",
        present: bool = True,
        bootstrap_ok: bool = True,
        platforms: tuple[str, ...] = ("linux", "windows"),
    ):
        super().__init__()
        self.name = backend_name
        self.binary = backend_name
        self.platforms = platforms
        self._present = present
        self._bootstrap_ok = bootstrap_ok
        self._failures: dict[str, list] = {}
        self._install_log: list[str] = []
        self._bootstrap_count = 0
        self._refresh_count = 0

    @property
    def install_log(self) -> list[str]:
        """Identifiers this mock actually installed (dry runs excluded)."""
        return self._install_log

    @property
    def bootstrap_count(self) -> int:
        """Number of real (mutating) bootstrap runs."""
        return self._bootstrap_count

    @property
    def refresh_count(self) -> int:
        return self._refresh_count

    def is_present(self) -> bool:
        return self._present

    def set_failure(self, identifier: str, detail: str = "Mock failure", times: int = -1) -> None:
        """Make ``identifier`` fail; ``times`` > 0 fails only that many attempts."""
        self._failures[identifier] = [detail, times]

    def install_command(self, identifier: str) -> list[str]:
        return [self.binary, "install", identifier]

    def bootstrap(self, dry_run: bool = False) -> InstallOutcome:
        if self._present:
            return InstallOutcome.success(self.name, self.name, detail="already present")
        if dry_run:
            return InstallOutcome.simulate(self.name, self.name, detail="would bootstrap")
        self._bootstrap_count += 1
        if not self._bootstrap_ok:
            return InstallOutcome.failure(self.name, self.name, detail=self.bootstrap_hint())
        self._present = True
        return InstallOutcome.success(self.name, self.name)

    def refresh(self, dry_run: bool = False, upgrade: bool = False) -> InstallOutcome:
        if dry_run:
            return InstallOutcome.simulate(self.name, self.name, detail="would refresh")
        self._refresh_count += 1
        return InstallOutcome.success(self.name, self.name)

    def install(self, identifier: str, dry_run: bool = False) -> InstallOutcome:
        if dry_run:
            return InstallOutcome.simulate(identifier, self.name, detail="would install")

        self._install_log.append(identifier)
        pending = self._failures.get(identifier)
        if pending and pending[1] != 0:
            if pending[1] > 0:
                pending[1] -= 1
            return InstallOutcome.failure(identifier, self.name, detail=pending[0])
        return InstallOutcome.success(identifier, self.name)
