"""Scored matching of provider candidates against criteria."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from metrics import MATCH_OUTCOMES
from models import Candidate, Criterion, MatchResult

logger = logging.getLogger(__name__)


def structurally_equal(x: Any, y: Any) -> bool:
    """Compare two values recursively with mapping semantics.

    Mappings are equal when they have the same number of keys and every
    key's value is recursively equal, regardless of key order.
    """
    if isinstance(x, Mapping) and isinstance(y, Mapping):
        if len(x) != len(y):
            return False
        return all(key in y and structurally_equal(value, y[key]) for key, value in x.items())
    return x == y


def tags_to_mapping(tags: Iterable[Mapping[str, Any]] | Mapping[str, Any] | None) -> dict[str, Any]:
    """Convert a provider Key/Value tag list to a mapping."""
    if tags is None:
        return {}
    if isinstance(tags, Mapping):
        return dict(tags)
    return {tag["Key"]: tag.get("Value") for tag in tags}


def tags_equal(expected: Any, actual: Any) -> bool:
    """Check two tag sets for order-independent equality."""
    return structurally_equal(tags_to_mapping(expected), tags_to_mapping(actual))


def score_candidate(
    candidate: Candidate,
    mandatory: Criterion,
    optional: Sequence[Criterion] = (),
) -> int:
    """Score a candidate.

    The mandatory criterion gates eligibility: when it fails the score is 0.
    Otherwise it is worth one point plus one point per satisfied optional
    criterion.
    """
    if not mandatory(candidate):
        return 0
    return 1 + sum(1 for criterion in optional if criterion(candidate))


def match(
    candidates: Iterable[Candidate],
    mandatory: Criterion,
    optional: Sequence[Criterion] = (),
    label: str = "resource",
) -> MatchResult:
    """Select the single best candidate.

    Candidates scoring 0 never enter the ranking. Among the rest, the group
    with the highest score wins: one member is a unique match, more than one
    is ambiguous.

    Args:
        candidates: Provider records to evaluate
        mandatory: Criterion every eligible candidate must satisfy
        optional: Criteria each worth one extra point
        label: Resource label used for logging and metrics

    Returns:
        The match result
    """
    groups: dict[int, list[Candidate]] = defaultdict(list)

    for candidate in candidates:
        score = score_candidate(candidate, mandatory, optional)
        logger.debug("%s %s has scored %d", label, candidate.id, score)
        if score:
            groups[score].append(candidate)

    if not groups:
        result = MatchResult.no_match()
    else:
        best = max(groups)
        winners = groups[best]
        if len(winners) == 1:
            result = MatchResult.unique(winners[0], best)
        else:
            result = MatchResult.ambiguous(winners, best)

    logger.info(
        "Matched %s: %s (%s)",
        label,
        result.outcome.value,
        ", ".join(c.id for c in result.candidates) or "-",
    )
    MATCH_OUTCOMES.labels(resource=label, outcome=result.outcome.value).inc()
    return result
