import json
import logging
from pathlib import Path
from typing import Dict, List, NamedTuple, Union

from .builtins import BUILTIN_PRESETS
from .models import PropertyPreset
from .validator import Rejected, validate_preset

logger = logging.getLogger(__name__)

MAX_PRESETS_TOTAL = 200
PRESET_FILE_PATTERN = "*.json"

class LoadResult(NamedTuple):
    """Merged presets plus the modification times observed while loading."""
    presets: List[PropertyPreset]
    mtimes: Dict[str, int]  # absolute path -> st_mtime_ns

def _read_preset_file(file_path: Path) -> List[PropertyPreset]:
    """Parse one preset file, skipping invalid entries.

    Returns:
        Valid presets in file order (empty if the file could not be parsed)
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            parsed = json.load(f)
    except (OSError, ValueError, RecursionError) as e:
        logger.warning(f"Failed to load preset file {file_path.name}: {e}")
        return []

    candidates = parsed if isinstance(parsed, list) else [parsed]
    presets = []
    for index, candidate in enumerate(candidates):
        outcome = validate_preset(candidate)
        if isinstance(outcome, Rejected):
            where = f"entry {index}" if isinstance(parsed, list) else "object"
            logger.warning(f"Invalid preset {where} in {file_path.name} skipped: {outcome.reason}")
            continue
        presets.append(outcome.preset)
    return presets

def merge_with_builtins(user_presets: List[PropertyPreset]) -> List[PropertyPreset]:
    """Merge user presets over the built-in catalogue.

    Built-ins come first and are never truncated; a user preset with a
    built-in's name replaces it in place. Among user presets the last one
    with a given name wins. Distinct user presets are appended until the
    total cap is reached.
    """
    merged: Dict[str, PropertyPreset] = {preset.name: preset for preset in BUILTIN_PRESETS}

    user_by_name: Dict[str, PropertyPreset] = {}
    for preset in user_presets:
        user_by_name[preset.name] = preset

    dropped = 0
    for name, preset in user_by_name.items():
        if name in merged or len(merged) < MAX_PRESETS_TOTAL:
            merged[name] = preset
        else:
            dropped += 1

    if dropped:
        logger.warning(
            f"Too many presets loaded ({len(merged) + dropped}), truncating to {MAX_PRESETS_TOTAL}"
        )
    return list(merged.values())

def load_presets(directory: Union[str, Path]) -> LoadResult:
    """Load user presets from a directory and merge them with the built-ins.

    A missing directory is not an error: the result holds the built-ins
    only and no tracked paths. Otherwise the directory itself and every
    ``*.json`` file in it are tracked by mtime, including files that fail
    to parse, so that fixing them triggers a reload.

    Args:
        directory: Directory holding preset files (not searched recursively)

    Returns:
        LoadResult with the merged presets and tracked mtimes
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.debug(f"Preset directory {directory} not found, using built-in presets only")
        return LoadResult(presets=list(BUILTIN_PRESETS), mtimes={})

    directory = directory.resolve()
    mtimes: Dict[str, int] = {}
    try:
        mtimes[str(directory)] = directory.stat().st_mtime_ns
    except OSError as e:
        logger.warning(f"Could not stat preset directory {directory}: {e}")

    user_presets: List[PropertyPreset] = []
    for file_path in sorted(directory.glob(PRESET_FILE_PATTERN)):
        if not file_path.is_file():
            continue
        try:
            mtimes[str(file_path)] = file_path.stat().st_mtime_ns
        except OSError as e:
            logger.warning(f"Could not stat preset file {file_path.name}: {e}")
            continue
        user_presets.extend(_read_preset_file(file_path))

    presets = merge_with_builtins(user_presets)
    logger.debug(f"Loaded {len(user_presets)} user presets from {directory} ({len(presets)} total)")
    return LoadResult(presets=presets, mtimes=mtimes)
