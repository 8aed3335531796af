"""Validation of untrusted preset data parsed from JSON."""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union
from urllib.parse import urlsplit

from .models import DAV_NAMESPACE, PropertyDefinition, PropertyPreset

MAX_PROPERTIES_PER_PRESET = 100

PRESET_NAME_PATTERN = re.compile(r"[-_a-zA-Z0-9]+")
PROPERTY_NAME_PATTERN = re.compile(r"[-_a-zA-Z0-9:.]+")
_WHITESPACE = re.compile(r"\s")

@dataclass(frozen=True)
class Valid:
    """Validation succeeded."""
    preset: PropertyPreset

@dataclass(frozen=True)
class Rejected:
    """Validation failed; ``reason`` is meant for diagnostics."""
    reason: str

ValidationOutcome = Union[Valid, Rejected]

def is_valid_namespace(namespace: str) -> bool:
    """Check that a namespace is ``DAV:`` or an absolute URI with a scheme."""
    if namespace == DAV_NAMESPACE:
        return True
    if not namespace or _WHITESPACE.search(namespace):
        return False
    try:
        scheme = urlsplit(namespace).scheme
    except ValueError:
        return False
    return bool(scheme)

def validate_property(raw: Any) -> Optional[PropertyDefinition]:
    """Validate a single property entry.

    Returns:
        The property, or None if the entry has to be dropped.
    """
    if not isinstance(raw, dict):
        return None
    namespace = raw.get("namespace")
    name = raw.get("name")
    if not isinstance(namespace, str) or not isinstance(name, str):
        return None
    if not namespace or not name:
        return None
    if not is_valid_namespace(namespace):
        return None
    if not PROPERTY_NAME_PATTERN.fullmatch(name):
        return None
    return PropertyDefinition(namespace=namespace, name=name)

def validate_properties(raw_properties: List[Any]) -> List[PropertyDefinition]:
    """Filter a list of raw property entries, dropping the invalid ones."""
    properties = []
    for raw in raw_properties:
        prop = validate_property(raw)
        if prop is not None:
            properties.append(prop)
    return properties

def validate_preset(raw: Any) -> ValidationOutcome:
    """Turn an arbitrary parsed JSON value into a preset.

    Invalid properties are dropped individually; the preset as a whole is
    rejected only when its name or property list is unusable. A ``builtin``
    flag in the input is ignored. Never raises.

    Args:
        raw: Value produced by ``json.load``

    Returns:
        Valid with the preset, or Rejected with a reason
    """
    if not isinstance(raw, dict):
        return Rejected(f"expected an object, got {type(raw).__name__}")

    raw_name = raw.get("name")
    if not isinstance(raw_name, str):
        return Rejected("missing or non-string 'name'")
    name = raw_name.strip()
    if not name:
        return Rejected("empty 'name'")
    if not PRESET_NAME_PATTERN.fullmatch(name):
        return Rejected(f"invalid name {name!r}")

    raw_properties = raw.get("properties")
    if not isinstance(raw_properties, list):
        return Rejected(f"preset {name!r}: 'properties' must be a list")

    properties = validate_properties(raw_properties)
    if not properties:
        return Rejected(f"preset {name!r}: no valid properties")
    if len(properties) > MAX_PROPERTIES_PER_PRESET:
        return Rejected(
            f"preset {name!r}: {len(properties)} properties exceeds the limit of {MAX_PROPERTIES_PER_PRESET}"
        )

    description = raw.get("description")
    return Valid(PropertyPreset(
        name=name,
        properties=tuple(properties),
        description=description if isinstance(description, str) else None,
        builtin=False,
    ))
