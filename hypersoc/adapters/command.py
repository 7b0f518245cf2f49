"""
Command runner — the single place where install subprocesses start.

Every backend goes through ``run_command`` so that timeouts, output
capture and error reporting behave the same for apt as for winget.
It never raises: failures come back in the ``CommandResult``.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Keep the tail of long package-manager output
_OUTPUT_TAIL = 2000

DEFAULT_TIMEOUT = 1800


@dataclass
class CommandResult:
    """Outcome of one external command."""

    cmd: list[str]
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0

    @property
    def detail(self) -> str:
        """Failure description suitable for an outcome's ``detail``."""
        if self.error:
            return self.error
        stderr = self.stderr.strip()
        message = f"Command failed (exit {self.returncode})"
        return f"{message}: {stderr}" if stderr else message


Runner = Callable[..., CommandResult]


def run_command(
    cmd: list[str],
    *,
    timeout: int = DEFAULT_TIMEOUT,
    env_overrides: dict[str, str] | None = None,
    input_text: str | None = None,
) -> CommandResult:
    """Run a command and capture its output.

    Args:
        cmd: Command list for ``subprocess.run()``.
        timeout: Seconds before ``TimeoutExpired``.
        env_overrides: Extra env vars (e.g. ``DEBIAN_FRONTEND``).
        input_text: Text piped to the command's stdin.

    Returns:
        CommandResult; ``ok`` is True only for exit status 0.
    """
    env = os.environ.copy()
    if env_overrides:
        env.update(env_overrides)

    logger.debug("Executing: %s", " ".join(cmd))
    start = time.monotonic()
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            input=input_text,
            env=env,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(cmd=cmd, error=f"Command timed out ({timeout}s)")
    except OSError as e:
        return CommandResult(cmd=cmd, error=f"Command execution error: {e}")

    elapsed_ms = int((time.monotonic() - start) * 1000)
    return CommandResult(
        cmd=cmd,
        returncode=proc.returncode,
        stdout=proc.stdout[-_OUTPUT_TAIL:] if proc.stdout else "",
        stderr=proc.stderr[-_OUTPUT_TAIL:] if proc.stderr else "",
        elapsed_ms=elapsed_ms,
    )
