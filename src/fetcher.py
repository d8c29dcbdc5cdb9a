"""Concurrent candidate enrichment.

Provider list endpoints often omit fields needed for scoring (tags, VPC
associations, member cluster details). These helpers issue one detail call
per item concurrently and wait for all of them; the first failure aborts
the whole fetch.
"""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Any, TypeVar

from models import Candidate
from ratelimit import FanOutLimits, RateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def fan_out(
    items: Sequence[T],
    call: Callable[[T], R],
    limits: FanOutLimits | None = None,
) -> list[R]:
    """Run call(item) for every item concurrently.

    Results are returned in the order of items. If any call raises, pending
    calls are cancelled and the first exception is re-raised; no partial
    result is returned.
    """
    if not items:
        return []

    limits = limits or FanOutLimits.from_env()
    limiter = RateLimiter(limits.requests_per_second)

    def limited(item: T) -> R:
        limiter.wait()
        return call(item)

    workers = min(len(items), limits.max_concurrent)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures: list[Future[R]] = [executor.submit(limited, item) for item in items]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)

        for future in futures:
            error = future.exception() if future in done else None
            if error is not None:
                for other in pending:
                    other.cancel()
                logger.error(
                    "Detail call failed, aborting fetch of %d items: %s",
                    len(items),
                    error,
                )
                raise error

        return [future.result() for future in futures]


def enrich(
    candidates: Sequence[Candidate],
    detail_call: Callable[[Candidate], Any],
    merge: Callable[[Candidate, Any], Candidate],
    limits: FanOutLimits | None = None,
) -> list[Candidate]:
    """Fetch details for every candidate and merge them into new snapshots.

    Args:
        candidates: Candidates returned by the list call
        detail_call: Provider read for one candidate
        merge: Builds the enriched candidate from a candidate and its details
        limits: Optional bounds for the concurrent calls

    Returns:
        New candidates in the original order
    """
    details = fan_out(candidates, detail_call, limits)
    logger.debug("Enriched %d candidates", len(details))
    return [merge(candidate, detail) for candidate, detail in zip(candidates, details)]
