from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

DAV_NAMESPACE = "DAV:"

@dataclass(frozen=True)
class PropertyDefinition:
    """A single WebDAV property identified by namespace and local name."""
    namespace: str
    name: str

    @property
    def key(self) -> str:
        """Identity key used for deduplication."""
        return f"{self.namespace}::{self.name}"

    def to_dict(self) -> Dict[str, str]:
        return {"namespace": self.namespace, "name": self.name}

@dataclass(frozen=True)
class PropertyPreset:
    """Named, reusable list of properties for a PROPFIND request."""
    name: str
    properties: Tuple[PropertyDefinition, ...]
    description: Optional[str] = None
    builtin: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Full JSON-ready representation, as returned by a single preset lookup."""
        data: Dict[str, Any] = {"name": self.name}
        if self.description is not None:
            data["description"] = self.description
        data["properties"] = [p.to_dict() for p in self.properties]
        data["builtin"] = self.builtin
        return data

    def describe(self) -> 'PresetDescriptor':
        return PresetDescriptor(
            name=self.name,
            description=self.description,
            property_count=len(self.properties),
            builtin=self.builtin,
        )

@dataclass(frozen=True)
class PresetDescriptor:
    """Summary of a preset used for listing."""
    name: str
    description: Optional[str]
    property_count: int
    builtin: bool

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.description is not None:
            data["description"] = self.description
        data["propertyCount"] = self.property_count
        data["builtin"] = self.builtin
        return data

@dataclass(frozen=True)
class PresetLookup:
    """Result of looking a preset up by name.

    ``preset`` is None when the name is unknown; ``available`` then lists
    the names the caller can pick from instead.
    """
    name: str
    preset: Optional[PropertyPreset]
    available: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.preset is not None
