"""Storage capability protocol for the two cache areas."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Storage(Protocol):
    """One storage area (data or tags), addressed by entry id.

    ``read`` and ``mtime`` raise ``FileNotFoundError`` for missing keys.
    """

    def ensure_root(self) -> None:
        """Create the area if it does not exist."""
        ...

    def exists(self, key: str) -> bool:
        """Check whether a record exists."""
        ...

    def read(self, key: str) -> bytes:
        """Read a record."""
        ...

    def write(self, key: str, data: bytes) -> None:
        """Create or replace a record."""
        ...

    def set_mtime(self, key: str, when: float) -> None:
        """Set the last-modified time of a record."""
        ...

    def mtime(self, key: str) -> float:
        """Get the last-modified time of a record."""
        ...

    def location(self, key: str) -> str:
        """Where the record for ``key`` lives. Performs no I/O."""
        ...
