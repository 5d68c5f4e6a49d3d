"""tagcache - Tag-validated file cache with TTL and HTTP revalidation."""

# Core cache
from tagcache.cache import TaggedFileCache, create_cache

# Command table
from tagcache.commands import COMMANDS, CacheCommands
from tagcache.config import CacheConfig

# Duration parsing
from tagcache.duration import parse_duration
from tagcache.exceptions import CodecError, CommandError, TagCacheError

# HTTP negotiation
from tagcache.http import Validators, is_not_modified, wsgi_response

# Storage
from tagcache.storage import FileStorage, MemoryStorage, RedisStorage, Storage

# Core types
from tagcache.types import CacheResult, Duration, NotModified, Value

__version__ = "0.1.0"

__all__ = [
    "COMMANDS",
    "CacheCommands",
    "CacheConfig",
    "CacheResult",
    "CodecError",
    "CommandError",
    "Duration",
    "FileStorage",
    "MemoryStorage",
    "NotModified",
    "RedisStorage",
    "Storage",
    "TagCacheError",
    "TaggedFileCache",
    "Validators",
    "Value",
    "create_cache",
    "is_not_modified",
    "parse_duration",
    "wsgi_response",
]
