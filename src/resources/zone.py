"""Route 53 hosted zone lookup."""

import logging
from dataclasses import dataclass
from typing import Any

from aws_client import AwsClient
from criteria import boolean_property, non_empty_string, optional_string, tags_property
from fetcher import enrich
from matching import match, tags_equal
from models import Candidate, Criterion, MatchResult
from utils import normalize_zone_id, normalize_zone_name

logger = logging.getLogger(__name__)

LABEL = "Hosted Zone"


@dataclass(frozen=True)
class ZoneCriteria:
    """Criteria identifying a hosted zone."""

    domain_name: str
    vpc_id: str | None = None
    comment: str | None = None
    tags: dict[str, Any] | None = None
    private_zone: bool | None = None

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> "ZoneCriteria":
        """Create from custom resource properties."""
        return cls(
            domain_name=normalize_zone_name(non_empty_string(properties, "DomainName")),
            vpc_id=optional_string(properties, "VpcId"),
            comment=properties.get("Comment"),
            tags=tags_property(properties, "Tags"),
            private_zone=boolean_property(properties, "PrivateZone", default=None),
        )


def zone_candidate(zone: dict[str, Any]) -> Candidate:
    """Build a candidate from a ListHostedZones record."""
    config = zone.get("Config", {})
    return Candidate(
        id=normalize_zone_id(zone["Id"]),
        attributes={
            "Name": normalize_zone_name(zone["Name"]),
            "Comment": config.get("Comment"),
            "PrivateZone": config.get("PrivateZone", False),
        },
    )


def fetch_zones(client: AwsClient, criteria: ZoneCriteria) -> list[Candidate]:
    """List hosted zones, enriched with VPCs and tags when the criteria need them."""
    candidates = [zone_candidate(zone) for zone in client.list_hosted_zones()]
    logger.info("Found %d hosted zones", len(candidates))

    if criteria.vpc_id:
        candidates = enrich(
            candidates,
            lambda c: client.get_hosted_zone(c.id)["VPCs"],
            lambda c, vpcs: c.with_attributes(VPCs=[vpc["VPCId"] for vpc in vpcs]),
        )

    if criteria.tags is not None:
        candidates = enrich(
            candidates,
            lambda c: client.list_hosted_zone_tags(c.id),
            lambda c, tags: c.with_attributes(Tags=tags),
        )

    return candidates


def match_zone(candidates: list[Candidate], criteria: ZoneCriteria) -> MatchResult:
    """Score hosted zones against the criteria.

    The name must match. Comment, tags, VPC association and (only when
    requested) the private flag each add one point.
    """
    mandatory = Criterion("Name", lambda c: c.get("Name") == criteria.domain_name)
    optional: list[Criterion] = []

    if criteria.comment is not None:
        optional.append(Criterion("Comment", lambda c: c.get("Comment") == criteria.comment))
    if criteria.tags is not None:
        optional.append(Criterion("Tags", lambda c: tags_equal(criteria.tags, c.get("Tags"))))
    if criteria.vpc_id:
        optional.append(Criterion("VpcId", lambda c: criteria.vpc_id in c.get("VPCs", [])))
    if criteria.private_zone is not None:
        optional.append(
            Criterion("PrivateZone", lambda c: c.get("PrivateZone") == criteria.private_zone)
        )

    return match(candidates, mandatory, optional, label=LABEL)


def find_zone(properties: dict[str, Any], client: AwsClient) -> dict[str, Any]:
    """Find the hosted zone best matching the properties.

    Returns:
        Dict with Id and Name of the zone
    """
    criteria = ZoneCriteria.from_properties(properties)
    zone = match_zone(fetch_zones(client, criteria), criteria).require_unique(LABEL)
    return {"Id": zone.id, "Name": zone.get("Name")}
