"""Storage backends for tagcache."""

from tagcache.storage.base import Storage
from tagcache.storage.filesystem import FileStorage
from tagcache.storage.memory import MemoryStorage
from tagcache.storage.redis import RedisStorage

__all__ = [
    "FileStorage",
    "MemoryStorage",
    "RedisStorage",
    "Storage",
]
