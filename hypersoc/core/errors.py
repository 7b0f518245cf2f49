"""
Installer errors — the fatal half of the error taxonomy.

Anything raised from this hierarchy ends the run with exit code 1.
Per-tool failures are never raised; they are captured in an
``InstallOutcome`` instead.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for all fatal installer errors."""


class UnsupportedPlatformError(InstallerError):
    """Raised when the host OS or distribution cannot be handled."""


class ElevationRequiredError(InstallerError):
    """Raised when a real (non dry-run) install is started unprivileged."""
