"""Utility functions for the custom resource handlers."""

import re
from collections.abc import Hashable, Iterable
from typing import TypeVar

H = TypeVar("H", bound=Hashable)

_LAMBDA_ARN_REGION = re.compile(r"lambda:([^:]+):\d+")


def normalize_zone_name(name: str) -> str:
    """Strip the trailing dot from a DNS zone name.

    Example: 'example.com.' -> 'example.com'
    """
    return name[:-1] if name.endswith(".") else name


def normalize_zone_id(zone_id: str) -> str:
    """Strip the resource type prefix from a hosted zone identifier.

    Example: '/hostedzone/Z1D633PJN98FT9' -> 'Z1D633PJN98FT9'
    """
    return zone_id.rsplit("/", 1)[-1]


def region_from_arn(arn: str | None) -> str | None:
    """Extract the region from a Lambda function ARN.

    Returns None when the ARN is missing or not a Lambda ARN.
    """
    if not arn:
        return None
    match = _LAMBDA_ARN_REGION.search(arn)
    return match.group(1) if match else None


def unique(items: Iterable[H]) -> list[H]:
    """De-duplicate items while keeping first-seen order."""
    return list(dict.fromkeys(items))

