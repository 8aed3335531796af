import logging
import os
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple, Union

from .loader import LoadResult, load_presets
from .models import PropertyPreset

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 5000

@dataclass(frozen=True)
class CacheEntry:
    """Snapshot of a merged preset view. Replaced wholesale, never mutated."""
    loaded_at: float  # seconds, from the cache clock
    presets: Tuple[PropertyPreset, ...]
    mtimes: Dict[str, int] = field(default_factory=dict)

class PresetCache:
    """Holds the last loaded preset view and decides when to reload it.

    An entry is reused while it is younger than the TTL and every tracked
    path still has the mtime recorded at load time. A TTL of 0 turns off
    age-based expiry, leaving only the mtime check.
    """

    def __init__(self, directory: Union[str, Path], ttl_ms: int = DEFAULT_TTL_MS,
                 clock: Callable[[], float] = time.monotonic,
                 loader: Callable[[Path], LoadResult] = load_presets):
        """Initialize the cache.

        Args:
            directory: Preset directory handed to the loader
            ttl_ms: Maximum entry age in milliseconds (0 = mtime checks only)
            clock: Monotonic time source in seconds
            loader: Function producing a LoadResult for the directory
        """
        if ttl_ms < 0:
            raise ValueError(f"TTL must be non-negative, got {ttl_ms}")
        self.directory = Path(directory)
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._loader = loader
        self._entry: Optional[CacheEntry] = None
        self._lock = threading.Lock()

    @property
    def populated(self) -> bool:
        return self._entry is not None

    def get(self) -> CacheEntry:
        """Return a fresh entry, reloading if the current one is stale."""
        entry = self._entry
        if entry is not None and self.is_fresh(entry):
            return entry

        with self._lock:
            # Another thread may have reloaded while we waited
            entry = self._entry
            if entry is not None and self.is_fresh(entry):
                return entry
            entry = self._reload()
            self._entry = entry
            return entry

    def invalidate(self) -> None:
        """Drop the current entry; the next access reloads unconditionally."""
        with self._lock:
            self._entry = None
        logger.debug("Preset cache cleared")

    def is_fresh(self, entry: CacheEntry) -> bool:
        """Check whether an entry can still be served."""
        if self.ttl_ms > 0:
            elapsed_ms = (self._clock() - entry.loaded_at) * 1000
            if elapsed_ms > self.ttl_ms:
                logger.debug(f"Preset cache expired after {elapsed_ms:.0f}ms")
                return False

        if not entry.mtimes:
            # Loaded without a directory; stale once it shows up
            return not self.directory.is_dir()

        for path, mtime in entry.mtimes.items():
            try:
                current = os.stat(path).st_mtime_ns
            except OSError:
                logger.debug(f"Tracked preset path vanished: {path}")
                return False
            if current != mtime:
                logger.debug(f"Tracked preset path changed: {path}")
                return False
        return True

    def _reload(self) -> CacheEntry:
        result = self._loader(self.directory)
        entry = CacheEntry(
            loaded_at=self._clock(),
            presets=tuple(result.presets),
            mtimes=dict(result.mtimes),
        )
        logger.debug(f"Preset cache loaded {len(entry.presets)} presets from {self.directory}")
        return entry
