"""Redis storage."""

from __future__ import annotations

import time
from typing import Any


class RedisStorage:
    """Storage area kept in Redis.

    Each record uses two keys: ``{prefix}:{area}:{key}`` for the payload and
    ``{prefix}:{area}:{key}:mtime`` for its last-modified time.
    """

    def __init__(
        self,
        client: Any,  # redis.Redis
        *,
        prefix: str = "tagcache",
        area: str = "data",
    ) -> None:
        self._client = client
        self._prefix = prefix
        self._area = area

    def _record_key(self, key: str) -> str:
        """Generate full Redis key for a record payload."""
        return f"{self._prefix}:{self._area}:{key}"

    def _mtime_key(self, key: str) -> str:
        """Generate full Redis key for a record mtime."""
        return f"{self._record_key(key)}:mtime"

    def ensure_root(self) -> None:
        """Nothing to create for Redis (no-op)."""
        pass

    def exists(self, key: str) -> bool:
        """Check whether a record exists."""
        return bool(self._client.exists(self._record_key(key)))

    def read(self, key: str) -> bytes:
        """Read a record payload."""
        data = self._client.get(self._record_key(key))
        if data is None:
            raise FileNotFoundError(self.location(key))
        if isinstance(data, str):
            return data.encode("utf-8")
        return bytes(data)

    def write(self, key: str, data: bytes) -> None:
        """Store a record payload and stamp its mtime."""
        pipe = self._client.pipeline()
        pipe.set(self._record_key(key), data)
        pipe.set(self._mtime_key(key), repr(time.time()))
        pipe.execute()

    def set_mtime(self, key: str, when: float) -> None:
        """Set the mtime of an existing record."""
        if not self.exists(key):
            raise FileNotFoundError(self.location(key))
        self._client.set(self._mtime_key(key), repr(float(when)))

    def mtime(self, key: str) -> float:
        """Get the mtime of a record."""
        data = self._client.get(self._mtime_key(key))
        if data is None:
            raise FileNotFoundError(self.location(key))
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return float(data)

    def location(self, key: str) -> str:
        """Redis key of the record payload."""
        return self._record_key(key)

    def disconnect(self) -> None:
        """Close the Redis connection."""
        self._client.close()
