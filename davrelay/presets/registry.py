import time
from pathlib import Path
from typing import Callable, List, Optional, Union

from .cache import DEFAULT_TTL_MS, PresetCache
from .models import PresetDescriptor, PresetLookup, PropertyPreset

class PresetRegistry:
    """Entry point for preset access: built-ins merged with user files."""

    def __init__(self, directory: Union[str, Path], ttl_ms: int = DEFAULT_TTL_MS,
                 clock: Callable[[], float] = time.monotonic):
        self._cache = PresetCache(directory, ttl_ms=ttl_ms, clock=clock)

    @classmethod
    def from_settings(cls, settings) -> 'PresetRegistry':
        """Create a registry from a ``davrelay.config.Settings`` instance."""
        return cls(settings.presets_dir, ttl_ms=settings.presets_ttl_ms)

    @property
    def directory(self) -> Path:
        return self._cache.directory

    def get_all_presets(self) -> List[PropertyPreset]:
        """Return every preset in the current merged view."""
        return list(self._cache.get().presets)

    def get_preset(self, name: str) -> Optional[PropertyPreset]:
        """Return the preset with the given name, or None."""
        for preset in self._cache.get().presets:
            if preset.name == name:
                return preset
        return None

    def lookup(self, name: str) -> PresetLookup:
        """Look a preset up, reporting the known names when it is missing.

        Both answers come from the same cache snapshot.
        """
        presets = self._cache.get().presets
        for preset in presets:
            if preset.name == name:
                return PresetLookup(name=name, preset=preset)
        return PresetLookup(name=name, preset=None, available=[p.name for p in presets])

    def names(self) -> List[str]:
        return [p.name for p in self._cache.get().presets]

    def list_descriptors(self) -> List[PresetDescriptor]:
        return [p.describe() for p in self._cache.get().presets]

    def clear_cache(self) -> None:
        """Force the next access to reload from disk."""
        self._cache.invalidate()
