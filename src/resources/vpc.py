"""VPC lookup by name tag."""

import logging
from typing import Any

from aws_client import AwsClient
from constants import DEFAULT_VPC_NAME, VPC_OMITTED_FIELDS
from criteria import boolean_property, non_empty_string
from matching import match, tags_to_mapping
from models import Candidate, Criterion, ValidationError

logger = logging.getLogger(__name__)

LABEL = "VPC"


def vpc_candidate(vpc: dict[str, Any]) -> Candidate:
    """Build a candidate from a DescribeVpcs record."""
    return Candidate(
        id=vpc["VpcId"],
        attributes={**vpc, "Tags": tags_to_mapping(vpc.get("Tags"))},
        status=vpc.get("State"),
    )


def _vpc_criterion(vpc_name: str) -> Criterion:
    if vpc_name == DEFAULT_VPC_NAME:
        return Criterion("IsDefault", lambda c: bool(c.get("IsDefault")))
    return Criterion("Name", lambda c: c.get("Tags", {}).get("Name") == vpc_name)


def subnet_filters(
    vpc_id: str,
    only_default: bool = False,
    only_public: bool = False,
    only_private: bool = False,
) -> list[dict[str, Any]]:
    """Build the DescribeSubnets filters for a VPC."""
    filters: list[dict[str, Any]] = [
        {"Name": "state", "Values": ["available"]},
        {"Name": "vpc-id", "Values": [vpc_id]},
    ]
    if only_default:
        filters.append({"Name": "default-for-az", "Values": ["true"]})
    if only_public:
        filters.append({"Name": "tag:Type", "Values": ["Public"]})
    if only_private:
        filters.append({"Name": "tag:Type", "Values": ["Private"]})
    return filters


def find_vpc(properties: dict[str, Any], client: AwsClient) -> dict[str, Any]:
    """Find a VPC by its Name tag ("default" selects the default VPC).

    Returns:
        The VPC record without its tags, state, tenancy and default flag,
        plus its (optionally filtered) subnets
    """
    vpc_name = non_empty_string(properties, "VpcName")
    only_default = boolean_property(properties, "OnlyDefaultSubnets")
    only_public = boolean_property(properties, "OnlyPublicSubnets")
    only_private = boolean_property(properties, "OnlyPrivateSubnets")

    if only_public and only_private:
        raise ValidationError(
            "The OnlyPublicSubnets and OnlyPrivateSubnets properties are mutually exclusive."
        )

    vpcs = client.list_vpcs([{"Name": "state", "Values": ["available"]}])
    candidates = [vpc_candidate(vpc) for vpc in vpcs]
    vpc = match(candidates, _vpc_criterion(vpc_name), label=LABEL).require_unique(LABEL)

    subnets = client.list_subnets(
        subnet_filters(vpc.id, only_default, only_public, only_private)
    )
    subnet_ids = [subnet["SubnetId"] for subnet in subnets]
    logger.info("VPC %s has %d matching subnets", vpc.id, len(subnet_ids))

    result = {
        key: value
        for key, value in vpc.attributes.items()
        if key not in VPC_OMITTED_FIELDS
    }
    result.update(
        Subnets=subnet_ids,
        SubnetIds=",".join(subnet_ids),
        CidrBlocks=[subnet["CidrBlock"] for subnet in subnets],
    )
    return result
