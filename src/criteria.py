"""Normalization of raw custom resource properties into typed criteria.

Every helper raises ValidationError naming the offending property, before
any provider call is made.
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from models import ValidationError

_MISSING = object()


def to_boolean(value: Any) -> Any:
    """Coerce "true"/"false" strings (any case) to booleans.

    Any other value is returned unchanged; callers that strictly need a
    boolean use boolean_property() which rejects what is left over.
    """
    if not isinstance(value, str):
        return value
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return value


def require_property(properties: Mapping[str, Any], name: str) -> Any:
    """Return a property value, raising if it was not specified."""
    value = properties.get(name, _MISSING)
    if value is _MISSING or value is None:
        raise ValidationError(f"The {name} property was not specified.")
    return value


def optional_string(
    properties: Mapping[str, Any], name: str, default: str | None = None
) -> str | None:
    """Return an optional string property, trimmed of surrounding whitespace."""
    value = properties.get(name)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(f"The {name} property must be a string.")
    return value.strip()


def non_empty_string(properties: Mapping[str, Any], name: str) -> str:
    """Return a required string property that must not be blank."""
    value = require_property(properties, name)
    if not isinstance(value, str):
        raise ValidationError(f"The {name} property must be a string.")
    if not value.strip():
        raise ValidationError(f"The {name} property cannot be empty.")
    return value.strip()


def boolean_property(
    properties: Mapping[str, Any], name: str, default: bool | None = False
) -> bool | None:
    """Return a boolean property, accepting "true"/"false" strings."""
    if properties.get(name) is None:
        return default
    value = to_boolean(properties[name])
    if not isinstance(value, bool):
        raise ValidationError(f"The {name} property must be a boolean type.")
    return value


def regex_property(properties: Mapping[str, Any], name: str) -> re.Pattern[str] | None:
    """Compile a regular expression property."""
    value = properties.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"The {name} property must be a string.")
    try:
        return re.compile(value)
    except re.error as e:
        raise ValidationError(
            f"The {name} property contains an invalid regular expression: {e}"
        ) from e


def list_property(
    properties: Mapping[str, Any], name: str, default: Sequence[Any] = ()
) -> list[Any]:
    """Return a list property, rejecting strings and other scalars."""
    value = properties.get(name)
    if value is None:
        return list(default)
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValidationError(f"The {name} property must be an array.")
    return list(value)


def mapping_list_property(
    properties: Mapping[str, Any], name: str
) -> list[dict[str, Any]]:
    """Return a list property whose items must all be key-value mappings."""
    items = list_property(properties, name)
    for item in items:
        if not isinstance(item, Mapping):
            raise ValidationError(
                f"The {name} property must include key-value pairs only."
            )
    return [dict(item) for item in items]


def tags_property(properties: Mapping[str, Any], name: str = "Tags") -> dict[str, Any] | None:
    """Return a Key/Value tag list property as a mapping.

    Returns None when the property is absent or an empty list; either way
    there is no tag criterion.
    """
    items = mapping_list_property(properties, name)
    if not items:
        return None
    tags: dict[str, Any] = {}
    for item in items:
        if "Key" not in item:
            raise ValidationError(f"Every entry of the {name} property needs a Key.")
        tags[item["Key"]] = item.get("Value")
    return tags


def require_identity(criteria: Mapping[str, Any], *names: str) -> None:
    """Ensure at least one identity-establishing criterion is present."""
    if not any(criteria.get(n) is not None for n in names):
        if len(names) == 1:
            raise ValidationError(f"The {names[0]} property was not specified.")
        joined = " or ".join(names)
        raise ValidationError(f"Either {joined} property has to be set.")
