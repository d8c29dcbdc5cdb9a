"""Amazon Machine Image lookup."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from aws_client import AwsClient
from constants import IMAGE_OMITTED_FIELDS
from criteria import (
    boolean_property,
    list_property,
    mapping_list_property,
    non_empty_string,
    regex_property,
    require_identity,
)
from matching import match
from models import AmbiguousError, Candidate, Criterion, MatchOutcome, NotFoundError

logger = logging.getLogger(__name__)

LABEL = "image"


@dataclass(frozen=True)
class ImageCriteria:
    """Criteria identifying a machine image."""

    name: str | None = None
    regex: re.Pattern[str] | None = None
    owners: list[str] = field(default_factory=lambda: ["self"])
    executable_users: list[str] = field(default_factory=lambda: ["all"])
    filters: list[dict[str, Any]] = field(default_factory=list)
    latest: bool = False

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> "ImageCriteria":
        """Create from custom resource properties."""
        require_identity(properties, "Name", "Regex")
        name = non_empty_string(properties, "Name") if "Name" in properties else None
        return cls(
            name=name,
            regex=regex_property(properties, "Regex"),
            owners=list_property(properties, "Owners", ["self"]),
            executable_users=list_property(properties, "ExecutableUsers", ["all"]),
            filters=mapping_list_property(properties, "Filters"),
            latest=bool(boolean_property(properties, "Latest")),
        )

    def provider_filters(self) -> list[dict[str, Any]]:
        """Build the DescribeImages filters."""
        filters: list[dict[str, Any]] = [{"Name": "state", "Values": ["available"]}]
        if self.name:
            filters.append({"Name": "name", "Values": [self.name]})
        filters.extend(self.filters)
        return filters


def image_candidate(image: dict[str, Any]) -> Candidate:
    """Build a candidate from a DescribeImages record."""
    return Candidate(id=image["ImageId"], attributes=image, status=image.get("State"))


def _name_criterion(criteria: ImageCriteria) -> Criterion:
    def matches(candidate: Candidate) -> bool:
        name = candidate.get("Name")
        if not name:
            logger.info(
                "Unable to find image name to match against for image %s owned by %s",
                candidate.id,
                candidate.get("OwnerId"),
            )
            return False
        if criteria.name and name != criteria.name:
            return False
        return criteria.regex is None or criteria.regex.search(name) is not None

    return Criterion("Name", matches)


def find_image(properties: dict[str, Any], client: AwsClient) -> dict[str, Any]:
    """Find a machine image by name and/or name regex.

    When several images match and Latest is set, the most recently created
    one is returned; otherwise several matches are an error.

    Returns:
        The image record without its descriptive fields
    """
    criteria = ImageCriteria.from_properties(properties)

    images = client.describe_images(
        criteria.owners, criteria.executable_users, criteria.provider_filters()
    )
    result = match(
        [image_candidate(image) for image in images], _name_criterion(criteria), label=LABEL
    )

    if result.outcome is MatchOutcome.AMBIGUOUS:
        logger.info(
            "More than one image found, and the Latest property is set to %s", criteria.latest
        )
        if not criteria.latest:
            raise AmbiguousError("More than one image was found.")
        image = max(result.candidates, key=lambda c: c.get("CreationDate") or "")
    elif result.outcome is MatchOutcome.NO_MATCH:
        raise NotFoundError("No images could be found.")
    else:
        image = result.candidates[0]

    return {
        key: value
        for key, value in image.attributes.items()
        if key not in IMAGE_OMITTED_FIELDS
    }
