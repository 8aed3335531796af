"""Turn property lists into PROPFIND request bodies."""

from typing import Dict, Iterable, List, Optional
from xml.sax.saxutils import escape

from .models import DAV_NAMESPACE, PropertyDefinition

DAV_ALIAS = "D"
_ATTRIBUTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}

def merge_properties(base: Iterable[PropertyDefinition],
                     extra: Optional[Iterable[PropertyDefinition]] = None) -> List[PropertyDefinition]:
    """Concatenate ``base`` and ``extra``, keeping the first of any duplicates.

    Duplicates are detected by ``namespace::name``.
    """
    merged = []
    seen = set()
    for prop in list(base) + list(extra or []):
        if prop.key in seen:
            continue
        seen.add(prop.key)
        merged.append(prop)
    return merged

def escape_xml_attribute(value: str) -> str:
    """Escape ``& < > " '`` for use inside a double-quoted attribute."""
    return escape(value, _ATTRIBUTE_ENTITIES)

def namespace_aliases(properties: Iterable[PropertyDefinition]) -> Dict[str, str]:
    """Assign ``D`` to DAV: and N0, N1, ... to other namespaces in first-seen order."""
    aliases = {DAV_NAMESPACE: DAV_ALIAS}
    counter = 0
    for prop in properties:
        if prop.namespace not in aliases:
            aliases[prop.namespace] = f"N{counter}"
            counter += 1
    return aliases

def to_request_body(properties: List[PropertyDefinition]) -> str:
    """Build a PROPFIND body requesting the given properties.

    The root element lives in DAV:, so ``xmlns:D`` is always declared.
    Namespace values are escaped; property names are emitted as-is since
    validation restricts them to ``[-_a-zA-Z0-9:.]``.

    Args:
        properties: Non-empty, ordered property list

    Returns:
        XML document as a string

    Raises:
        ValueError: If ``properties`` is empty
    """
    if not properties:
        raise ValueError("At least one property is required to build a PROPFIND body.")

    aliases = namespace_aliases(properties)
    declarations = " ".join(
        f'xmlns:{alias}="{escape_xml_attribute(namespace)}"'
        for namespace, alias in aliases.items()
    )
    prop_lines = "\n    ".join(f"<{aliases[p.namespace]}:{p.name}/>" for p in properties)
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f"<D:propfind {declarations}>\n"
        "  <D:prop>\n"
        f"    {prop_lines}\n"
        "  </D:prop>\n"
        "</D:propfind>"
    )
