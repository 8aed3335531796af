from typing import Tuple

from .models import DAV_NAMESPACE, PropertyDefinition, PropertyPreset

def _dav(*names: str) -> Tuple[PropertyDefinition, ...]:
    return tuple(PropertyDefinition(DAV_NAMESPACE, name) for name in names)

_BASIC = (
    "displayname",
    "getcontentlength",
    "getlastmodified",
    "resourcetype",
    "getcontenttype",
)

BUILTIN_PRESETS: Tuple[PropertyPreset, ...] = (
    PropertyPreset(
        name="basic",
        description="Essential file properties",
        properties=_dav(*_BASIC),
        builtin=True,
    ),
    PropertyPreset(
        name="detailed",
        description="Detailed resource properties",
        properties=_dav(*_BASIC, "creationdate", "getetag", "supportedlock", "lockdiscovery"),
        builtin=True,
    ),
    PropertyPreset(
        name="minimal",
        description="Minimal properties (resourcetype only)",
        properties=_dav("resourcetype"),
        builtin=True,
    ),
)
