"""In-memory storage."""

import threading
import time


class MemoryStorage:
    """Dict-backed storage area, useful for tests and embedding."""

    def __init__(self, name: str = "memory") -> None:
        self._name = name
        self._records: dict[str, tuple[bytes, float]] = {}
        self._lock = threading.Lock()

    def ensure_root(self) -> None:
        """Nothing to create for memory (no-op)."""
        pass

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._records

    def read(self, key: str) -> bytes:
        with self._lock:
            try:
                return self._records[key][0]
            except KeyError:
                raise FileNotFoundError(self.location(key)) from None

    def write(self, key: str, data: bytes) -> None:
        with self._lock:
            self._records[key] = (bytes(data), time.time())

    def set_mtime(self, key: str, when: float) -> None:
        with self._lock:
            try:
                data, _ = self._records[key]
            except KeyError:
                raise FileNotFoundError(self.location(key)) from None
            self._records[key] = (data, when)

    def mtime(self, key: str) -> float:
        with self._lock:
            try:
                return self._records[key][1]
            except KeyError:
                raise FileNotFoundError(self.location(key)) from None

    def location(self, key: str) -> str:
        return f"{self._name}://{key}"
