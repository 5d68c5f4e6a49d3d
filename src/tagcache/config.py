"""Cache configuration management."""

import os
from dataclasses import dataclass
from pathlib import Path

from tagcache.duration import parse_duration
from tagcache.types import Duration

DEFAULT_DATA_ROOT = Path("resources/.cache")
DEFAULT_TAG_ROOT = Path("resources/.cache-tags")
DEFAULT_TTL = 3600  # 1 hour


@dataclass
class CacheConfig:
    """Configuration for a tagged file cache.

    Attributes:
        data_root: Directory holding the data records
        tag_root: Directory holding the tag records, parallel to data_root
        default_ttl: TTL used when a call passes 0 or None, in seconds or
            duration syntax ("1h")
        coalesce: Share one computation between concurrent misses on the
            same key
    """

    data_root: Path = DEFAULT_DATA_ROOT
    tag_root: Path = DEFAULT_TAG_ROOT
    default_ttl: Duration = DEFAULT_TTL
    coalesce: bool = True

    def __post_init__(self) -> None:
        """Normalize paths and the default TTL."""
        self.data_root = Path(self.data_root).expanduser()
        self.tag_root = Path(self.tag_root).expanduser()
        self.default_ttl = parse_duration(self.default_ttl)
        if self.default_ttl <= 0:
            raise ValueError("default_ttl must be positive")

    @classmethod
    def from_env(cls) -> "CacheConfig":
        """Create configuration from environment variables.

        Environment variables:
            TAGCACHE_DATA_ROOT: Data record directory
            TAGCACHE_TAG_ROOT: Tag record directory
            TAGCACHE_DEFAULT_TTL: Default TTL ("3600", "30m", "1h")
            TAGCACHE_COALESCE: Coalesce concurrent misses (true/false)

        Returns:
            CacheConfig instance
        """
        kwargs: dict[str, object] = {}

        if os.getenv("TAGCACHE_DATA_ROOT"):
            kwargs["data_root"] = Path(os.environ["TAGCACHE_DATA_ROOT"])

        if os.getenv("TAGCACHE_TAG_ROOT"):
            kwargs["tag_root"] = Path(os.environ["TAGCACHE_TAG_ROOT"])

        ttl = os.getenv("TAGCACHE_DEFAULT_TTL")
        if ttl:
            kwargs["default_ttl"] = ttl

        if os.getenv("TAGCACHE_COALESCE"):
            kwargs["coalesce"] = os.environ["TAGCACHE_COALESCE"].lower() == "true"

        return cls(**kwargs)  # type: ignore[arg-type]
