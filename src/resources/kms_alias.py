"""KMS key alias reconciliation."""

import logging
from typing import Any

from aws_client import AwsClient
from criteria import non_empty_string
from matching import match
from models import Candidate, Criterion, MatchResult
from reconcile import Reconciler

logger = logging.getLogger(__name__)


class KmsAliasReconciler(Reconciler):
    """Keeps an alias pointing at the desired key."""

    label = "KMS alias"
    benign_delete_errors = frozenset({"NotFoundException"})

    def __init__(
        self, client: AwsClient, alias_name: str, target_key_id: str | None = None
    ) -> None:
        self.client = client
        self.alias_name = alias_name
        self.target_key_id = target_key_id

    def resolve(self) -> MatchResult:
        candidates = [
            Candidate(id=alias["AliasName"], attributes=alias)
            for alias in self.client.list_aliases()
        ]
        mandatory = Criterion("AliasName", lambda c: c.id == self.alias_name)
        return match(candidates, mandatory, label=self.label)

    def is_desired(self, current: Candidate) -> bool:
        return current.get("TargetKeyId") == self.target_key_id

    def create(self) -> None:
        self.client.create_alias(self.alias_name, self.target_key_id)

    def update(self, current: Candidate) -> None:
        logger.info(
            "Alias %s points at %s, retargeting to %s",
            current.id,
            current.get("TargetKeyId"),
            self.target_key_id,
        )
        self.client.update_alias(self.alias_name, self.target_key_id)

    def delete(self, current: Candidate) -> None:
        self.client.delete_alias(current.id)

    def describe(self, current: Candidate) -> dict[str, Any]:
        return {
            "AliasName": current.id,
            "AliasArn": current.get("AliasArn"),
            "TargetKeyId": current.get("TargetKeyId"),
        }


def ensure_alias(properties: dict[str, Any], client: AwsClient) -> dict[str, Any]:
    """Ensure an alias exists and points at TargetKeyId.

    Returns:
        Dict with AliasName, AliasArn and TargetKeyId
    """
    reconciler = KmsAliasReconciler(
        client,
        non_empty_string(properties, "AliasName"),
        non_empty_string(properties, "TargetKeyId"),
    )
    return reconciler.apply()


def delete_alias(properties: dict[str, Any], client: AwsClient) -> dict[str, Any]:
    """Delete an alias if it exists.

    Returns:
        The attributes of the deleted alias, or an empty dict if none existed
    """
    reconciler = KmsAliasReconciler(client, non_empty_string(properties, "AliasName"))
    return reconciler.remove()
