"""
Retry policy — how often a failed package install is re-attempted.

Package managers fail transiently (mirror hiccups, a held lock), but
the installer does not guess: the default is a single attempt and the
operator opts into retries with ``--retries``. Delays use exponential
backoff with jitter.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from hypersoc.core.models.outcome import InstallOutcome

logger = logging.getLogger(__name__)


class RetryPolicy(BaseModel):
    """Retry settings for per-package installs."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=1, ge=1)
    base_delay: float = Field(default=2.0, ge=0)
    max_delay: float = Field(default=30.0, ge=0)

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        delay = min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)
        jitter = random.uniform(0, delay * 0.3)
        return delay + jitter


def call_with_retry(
    attempt_fn: Callable[[], InstallOutcome],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> InstallOutcome:
    """Run ``attempt_fn`` until it stops failing or the policy is exhausted.

    Only ``failed`` outcomes are retried. The returned outcome carries
    the number of attempts made.
    """
    attempt = 1
    while True:
        outcome = attempt_fn()
        if not outcome.failed or attempt >= policy.max_attempts:
            return outcome.model_copy(update={"attempts": attempt})

        delay = policy.delay_for(attempt)
        logger.warning(
            "Attempt %d/%d for '%s' failed, retrying in %.1fs",
            attempt,
            policy.max_attempts,
            outcome.tool,
            delay,
        )
        sleep(delay)
        attempt += 1
