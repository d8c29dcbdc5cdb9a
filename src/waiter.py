"""Bounded polling for eventually consistent provider writes."""

import logging
import os
import time
from collections.abc import Callable

from metrics import CONVERGENCE_TICKS
from models import WaitResult

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0
DEFAULT_MAX_ATTEMPTS = 30


def wait_settings() -> tuple[float, int]:
    """Get the poll interval and attempt bound.

    Configuration via environment variables:
        CONVERGENCE_WAIT_INTERVAL: Seconds between ticks (default: 1.0)
        CONVERGENCE_WAIT_ATTEMPTS: Maximum number of ticks (default: 30)
    """
    interval = float(os.environ.get("CONVERGENCE_WAIT_INTERVAL", str(DEFAULT_INTERVAL)))
    attempts = int(os.environ.get("CONVERGENCE_WAIT_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS)))
    return interval, attempts


def wait_for_condition(
    condition: Callable[[], bool],
    interval: float = DEFAULT_INTERVAL,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    sleep: Callable[[float], None] = time.sleep,
) -> WaitResult:
    """Poll a condition until it holds or the attempts run out.

    Each tick first waits `interval` seconds and then evaluates the
    condition exactly once. Exceptions raised by the condition are not
    caught: a failed provider read ends the wait.

    Args:
        condition: Provider read returning True once converged
        interval: Seconds to wait before each evaluation
        max_attempts: Maximum number of evaluations
        sleep: Sleep function, replaceable in tests

    Returns:
        WaitResult.CONVERGED or WaitResult.TIMED_OUT
    """
    for attempt in range(1, max_attempts + 1):
        sleep(interval)
        if condition():
            logger.info("Condition converged after %d/%d ticks", attempt, max_attempts)
            CONVERGENCE_TICKS.labels(result=WaitResult.CONVERGED.value).observe(attempt)
            return WaitResult.CONVERGED
        logger.debug("Condition not met on tick %d/%d", attempt, max_attempts)

    logger.warning("Condition did not converge after %d ticks", max_attempts)
    CONVERGENCE_TICKS.labels(result=WaitResult.TIMED_OUT.value).observe(max_attempts)
    return WaitResult.TIMED_OUT
