"""Route 53 private hosted zone to VPC association."""

import logging
from typing import Any

from aws_client import AwsClient
from constants import CHANGE_INSYNC
from criteria import boolean_property, non_empty_string, optional_string
from matching import match
from models import (
    Candidate,
    ConvergenceTimeoutError,
    Criterion,
    MatchResult,
    ProviderError,
    WaitResult,
)
from reconcile import Reconciler
from utils import normalize_zone_id
from waiter import wait_for_condition, wait_settings

logger = logging.getLogger(__name__)


class ZoneAssociationReconciler(Reconciler):
    """Keeps a VPC associated with a private hosted zone.

    The candidates are the zone's current VPC associations. An association
    is either present or absent, so the default is_desired() applies and it
    is never updated in place.
    """

    label = "VPC association"
    benign_delete_errors = frozenset(
        {"NoSuchHostedZone", "VPCAssociationNotFound", "LastVPCAssociation"}
    )

    def __init__(
        self,
        client: AwsClient,
        zone_id: str,
        vpc_id: str,
        region: str | None,
        comment: str | None = None,
        wait: bool = False,
    ) -> None:
        self.client = client
        self.zone_id = zone_id
        self.vpc_id = vpc_id
        self.region = region
        self.comment = comment
        self.wait = wait

    def resolve(self) -> MatchResult:
        vpcs = self.client.get_hosted_zone(self.zone_id)["VPCs"]
        candidates = [
            Candidate(id=vpc["VPCId"], attributes=vpc)
            for vpc in vpcs
        ]
        mandatory = Criterion("VpcId", lambda c: c.id == self.vpc_id)
        optional = [Criterion("Region", lambda c: c.get("VPCRegion") == self.region)]
        return match(candidates, mandatory, optional, label=self.label)

    def remove(self) -> dict[str, Any]:
        # A missing zone means there is nothing to disassociate
        try:
            return super().remove()
        except ProviderError as e:
            if e.code != "NoSuchHostedZone":
                raise
            logger.info(
                "The Hosted Zone %s does not exist, nothing to do.", self.zone_id
            )
            return {}

    def create(self) -> str:
        return self.client.associate_vpc_with_hosted_zone(
            self.zone_id, self.vpc_id, self.region, self.comment
        )

    def delete(self, current: Candidate) -> None:
        self.client.disassociate_vpc_from_hosted_zone(self.zone_id, self.vpc_id, self.region)

    def converge(self, token: Any) -> None:
        if not self.wait:
            return

        interval, attempts = wait_settings()
        result = wait_for_condition(
            lambda: self.client.get_change_status(token) == CHANGE_INSYNC,
            interval=interval,
            max_attempts=attempts,
        )
        if result is WaitResult.TIMED_OUT:
            raise ConvergenceTimeoutError(
                f'Timed out waiting for VPC "{self.vpc_id}" association to the '
                f'Hosted Zone "{self.zone_id}", aborting.'
            )

    def describe(self, current: Candidate) -> dict[str, Any]:
        return self.outputs()

    def outputs(self) -> dict[str, Any]:
        return {
            "Region": self.region,
            "HostedZoneId": self.zone_id,
            "VpcId": self.vpc_id,
        }


def _reconciler(properties: dict[str, Any], client: AwsClient) -> ZoneAssociationReconciler:
    return ZoneAssociationReconciler(
        client,
        zone_id=normalize_zone_id(non_empty_string(properties, "HostedZoneId")),
        vpc_id=non_empty_string(properties, "VpcId"),
        region=optional_string(properties, "Region") or client.region,
        comment=properties.get("Comment"),
        wait=bool(boolean_property(properties, "Wait")),
    )


def ensure_zone_association(properties: dict[str, Any], client: AwsClient) -> dict[str, Any]:
    """Ensure a VPC is associated with a hosted zone.

    Returns:
        Dict with Region, HostedZoneId and VpcId
    """
    return _reconciler(properties, client).apply()


def delete_zone_association(properties: dict[str, Any], client: AwsClient) -> dict[str, Any]:
    """Disassociate a VPC from a hosted zone if associated.

    Returns:
        Dict with Region, HostedZoneId and VpcId, or an empty dict if the
        VPC was not associated
    """
    return _reconciler(properties, client).remove()
