"""Domain models for the custom resource handlers.

This module defines typed data structures shared by every handler:
request/response enums, candidate snapshots, match results and the
exception hierarchy.
"""

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


# =============================================================================
# Enums for constrained values
# =============================================================================


class RequestType(Enum):
    """Custom resource request type sent by CloudFormation."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class ResponseStatus(Enum):
    """Status reported back to CloudFormation."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class Operation(Enum):
    """Reconciliation operation."""

    APPLY = "apply"
    REMOVE = "remove"


class MatchOutcome(Enum):
    """Outcome of matching candidates against criteria."""

    NO_MATCH = "NoMatch"
    UNIQUE = "Unique"
    AMBIGUOUS = "Ambiguous"


class WaitResult(Enum):
    """Outcome of a convergence wait."""

    CONVERGED = "Converged"
    TIMED_OUT = "TimedOut"


# =============================================================================
# Dataclasses for candidates and matching
# =============================================================================


@dataclass(frozen=True)
class Candidate:
    """Read-only snapshot of a provider record under evaluation."""

    id: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    status: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def get(self, key: str, default: Any = None) -> Any:
        """Return an attribute value."""
        return self.attributes.get(key, default)

    def with_attributes(self, **extra: Any) -> "Candidate":
        """Return a new snapshot with extra attributes merged in."""
        return Candidate(
            id=self.id,
            attributes={**self.attributes, **extra},
            status=self.status,
        )


@dataclass(frozen=True)
class Criterion:
    """A named predicate evaluated against a candidate."""

    name: str
    predicate: Callable[[Candidate], bool]

    def __call__(self, candidate: Candidate) -> bool:
        return bool(self.predicate(candidate))


@dataclass(frozen=True)
class MatchResult:
    """Result of matching: no match, a unique winner, or an ambiguous tie."""

    outcome: MatchOutcome
    candidates: tuple[Candidate, ...] = ()
    score: int = 0

    @classmethod
    def no_match(cls) -> "MatchResult":
        return cls(MatchOutcome.NO_MATCH)

    @classmethod
    def unique(cls, candidate: Candidate, score: int = 1) -> "MatchResult":
        return cls(MatchOutcome.UNIQUE, (candidate,), score)

    @classmethod
    def ambiguous(cls, candidates: list[Candidate], score: int) -> "MatchResult":
        return cls(
            MatchOutcome.AMBIGUOUS,
            tuple(sorted(candidates, key=lambda c: c.id)),
            score,
        )

    @property
    def is_unique(self) -> bool:
        return self.outcome is MatchOutcome.UNIQUE

    @property
    def winner(self) -> Candidate | None:
        """The matched candidate, or None unless the outcome is unique."""
        return self.candidates[0] if self.is_unique else None

    def require_unique(
        self,
        label: str,
        accepted_statuses: Collection[str] | None = None,
    ) -> Candidate:
        """Return the unique candidate or raise the matching error.

        Args:
            label: Human readable resource label used in error messages
            accepted_statuses: Lifecycle statuses the winner may be in

        Raises:
            NotFoundError: No candidate matched
            AmbiguousError: More than one candidate tied at the top score
            NotAvailableError: The winner is in a disallowed status
        """
        if self.outcome is MatchOutcome.NO_MATCH:
            raise NotFoundError(f"Matching {label} could not be found.")
        if self.outcome is MatchOutcome.AMBIGUOUS:
            ids = ", ".join(c.id for c in self.candidates)
            raise AmbiguousError(f"More than one matching {label} was found: {ids}")

        candidate = self.candidates[0]
        if accepted_statuses is not None and candidate.status not in accepted_statuses:
            raise NotAvailableError(
                f"Matching {label} {candidate.id} is not available "
                f"(status: {candidate.status})."
            )
        return candidate


# =============================================================================
# Exceptions
# =============================================================================


class CustomResourceError(Exception):
    """Base exception for custom resource errors."""

    pass


class ValidationError(CustomResourceError):
    """Malformed or missing input property."""

    pass


class ProviderError(CustomResourceError):
    """The provider API reported a failure."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class NotFoundError(CustomResourceError):
    """No candidate matched the criteria."""

    pass


class AmbiguousError(CustomResourceError):
    """More than one candidate tied at the top score."""

    pass


class NotAvailableError(CustomResourceError):
    """The matched resource exists but is in a disallowed lifecycle state."""

    pass


class ConvergenceTimeoutError(CustomResourceError):
    """A convergence wait exhausted its attempts."""

    pass


class CallbackError(CustomResourceError):
    """The response could not be delivered to the orchestrator."""

    pass
