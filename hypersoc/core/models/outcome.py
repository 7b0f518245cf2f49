"""
InstallOutcome and Summary — the result contract.

Backends never raise for a failed install; they return an outcome.
The orchestrator folds outcomes into a Summary as they arrive and
then drops them, so nothing per-tool outlives the run except the log.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel

OutcomeStatus = Literal["success", "failed", "skipped", "simulated"]


class InstallOutcome(BaseModel):
    """Result of one install (or bootstrap) attempt."""

    tool: str
    backend: str
    status: OutcomeStatus = "success"
    detail: str | None = None
    attempts: int = 1
    duration_ms: int = 0

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, tool: str, backend: str, detail: str | None = None, **kwargs: Any) -> InstallOutcome:
        """Create a success outcome."""
        return cls(tool=tool, backend=backend, status="success", detail=detail, **kwargs)

    @classmethod
    def failure(cls, tool: str, backend: str, detail: str, **kwargs: Any) -> InstallOutcome:
        """Create a failure outcome."""
        return cls(tool=tool, backend=backend, status="failed", detail=detail, **kwargs)

    @classmethod
    def skip(cls, tool: str, backend: str, detail: str = "", **kwargs: Any) -> InstallOutcome:
        """Create a skip outcome."""
        return cls(tool=tool, backend=backend, status="skipped", detail=detail, **kwargs)

    @classmethod
    def simulate(cls, tool: str, backend: str, detail: str = "", **kwargs: Any) -> InstallOutcome:
        """Create a dry-run outcome."""
        return cls(
            tool=tool, backend=backend, status="simulated", detail=detail, attempts=0, **kwargs,
        )


@dataclass
class Summary:
    """Aggregated counts of a pass over a tool list."""

    success: int = 0
    failed: int = 0
    skipped: int = 0
    simulated: int = 0

    def record(self, outcome: InstallOutcome) -> None:
        """Count one outcome."""
        setattr(self, outcome.status, getattr(self, outcome.status) + 1)

    @property
    def total(self) -> int:
        return self.success + self.failed + self.skipped + self.simulated

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.success or self.simulated:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "total": self.total,
            "success": self.success,
            "failed": self.failed,
            "skipped": self.skipped,
            "simulated": self.simulated,
        }
