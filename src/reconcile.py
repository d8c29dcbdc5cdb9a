"""Reconciliation of live provider state toward a desired state."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from models import Candidate, MatchOutcome, MatchResult, Operation, ProviderError

logger = logging.getLogger(__name__)


class Reconciler(ABC):
    """Create/update/delete decision for a single resource.

    Subclasses describe how to resolve the current match and how to mutate
    it. apply() and remove() are idempotent: when the live state already
    matches, no mutating call is made.
    """

    label: str = "resource"
    # Provider error codes that mean there is nothing left to delete
    benign_delete_errors: frozenset[str] = frozenset()

    @abstractmethod
    def resolve(self) -> MatchResult:
        """Query the provider and match the current resource."""

    def is_desired(self, current: Candidate) -> bool:
        """Check whether the current resource already has the desired state.

        Defaults to True for resources whose presence alone is the desired
        state; those never reach update().
        """
        return True

    @abstractmethod
    def create(self) -> Any:
        """Issue the create call. May return a token for converge()."""

    def update(self, current: Candidate) -> Any:
        """Issue the update call. May return a token for converge().

        Subclasses whose is_desired() can return False must override this.
        """
        raise NotImplementedError(f"{type(self).__name__} cannot update a {self.label} in place")

    @abstractmethod
    def delete(self, current: Candidate) -> None:
        """Issue the delete call."""

    @abstractmethod
    def describe(self, current: Candidate) -> dict[str, Any]:
        """Build the output attributes of a resource."""

    def converge(self, token: Any) -> None:
        """Wait for a mutation to become visible. No-op by default."""

    def apply(self) -> dict[str, Any]:
        """Bring the resource to the desired state and return its attributes."""
        result = self.resolve()
        if result.outcome is MatchOutcome.NO_MATCH:
            logger.info("No %s found, creating it", self.label)
            token = self.create()
        else:
            current = result.require_unique(self.label)
            if self.is_desired(current):
                logger.info("%s %s is already in the desired state", self.label, current.id)
                return self.describe(current)
            logger.info("%s %s differs from the desired state, updating it", self.label, current.id)
            token = self.update(current)

        self.converge(token)
        return self.describe(self._reresolve())

    def remove(self) -> dict[str, Any]:
        """Delete the resource if present; deleting nothing is success."""
        result = self.resolve()
        if result.outcome is MatchOutcome.NO_MATCH:
            logger.info("No %s found, nothing to delete", self.label)
            return {}

        current = result.require_unique(self.label)
        try:
            self.delete(current)
        except ProviderError as e:
            if e.code not in self.benign_delete_errors:
                raise
            logger.info("Ignoring %s while deleting %s %s", e.code, self.label, current.id)
        return self.describe(current)

    def _reresolve(self) -> Candidate:
        """Resolve the authoritative state after a mutation."""
        result = self.resolve()
        if result.outcome is MatchOutcome.NO_MATCH:
            raise ProviderError(f"The {self.label} is not visible after the change was accepted.")
        return result.require_unique(self.label)


def reconcile(reconciler: Reconciler, operation: Operation) -> dict[str, Any]:
    """Run a reconciliation operation."""
    if operation is Operation.APPLY:
        return reconciler.apply()
    return reconciler.remove()
