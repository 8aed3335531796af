import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from .presets.cache import DEFAULT_TTL_MS

DEFAULT_PRESETS_DIRNAME = "property-presets"

class ConfigError(Exception):
    """Invalid or missing configuration."""
    pass

@dataclass(frozen=True)
class Settings:
    """Runtime configuration, normally read from the environment."""
    server_url: str = ""
    username: str = ""
    password: str = ""
    presets_dir: Path = Path(DEFAULT_PRESETS_DIRNAME)
    presets_ttl_ms: int = DEFAULT_TTL_MS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Raises:
            ConfigError: If DAV_PROPERTY_PRESETS_TTL_MS is not a non-negative integer
        """
        env = os.environ if environ is None else environ
        presets_dir = env.get("DAV_PROPERTY_PRESETS_DIR") or str(Path.cwd() / DEFAULT_PRESETS_DIRNAME)
        return cls(
            server_url=env.get("DAV_SERVER_URL", ""),
            username=env.get("DAV_USERNAME", ""),
            password=env.get("DAV_PASSWORD", ""),
            presets_dir=Path(presets_dir),
            presets_ttl_ms=parse_ttl(env.get("DAV_PROPERTY_PRESETS_TTL_MS")),
        )

    def with_overrides(self, **overrides) -> 'Settings':
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if "presets_dir" in values:
            values["presets_dir"] = Path(values["presets_dir"])
        if "presets_ttl_ms" in values:
            values["presets_ttl_ms"] = parse_ttl(values["presets_ttl_ms"])
        return replace(self, **values)

    def require_server_url(self) -> str:
        if not self.server_url:
            raise ConfigError("DAV_SERVER_URL environment variable is not set")
        return self.server_url

def parse_ttl(value) -> int:
    """Parse a TTL in milliseconds; None or empty means the default."""
    if value is None or value == "":
        return DEFAULT_TTL_MS
    try:
        ttl = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid preset cache TTL {value!r}: expected an integer number of milliseconds") from e
    if ttl < 0:
        raise ConfigError(f"Invalid preset cache TTL {ttl}: must not be negative")
    return ttl
