"""Adapters — package-manager bindings.

Public re-exports for convenient access.
"""

from hypersoc.adapters.base import Backend
from hypersoc.adapters.command import CommandResult, run_command
from hypersoc.adapters.mock import MockBackend
from hypersoc.adapters.registry import BackendRegistry, default_registry

__all__ = [
    "Backend",
    "BackendRegistry",
    "CommandResult",
    "MockBackend",
    "default_registry",
    "run_command",
]
