"""Property presets: built-in and user-defined PROPFIND property sets."""

from .models import PropertyDefinition, PropertyPreset, PresetDescriptor, PresetLookup
from .validator import Valid, Rejected, validate_preset, validate_property
from .builtins import BUILTIN_PRESETS
from .loader import load_presets, LoadResult
from .cache import PresetCache, CacheEntry
from .registry import PresetRegistry
from .compiler import merge_properties, to_request_body

__all__ = [
    'PropertyDefinition', 'PropertyPreset', 'PresetDescriptor', 'PresetLookup',
    'Valid', 'Rejected', 'validate_preset', 'validate_property',
    'BUILTIN_PRESETS', 'load_presets', 'LoadResult',
    'PresetCache', 'CacheEntry', 'PresetRegistry',
    'merge_properties', 'to_request_body',
]
