"""Local filesystem storage."""

from __future__ import annotations

import os
import tempfile
from contextlib import suppress
from pathlib import Path


def _current_umask() -> int:
    """Read the process umask, which can only be read by setting it."""
    mask = os.umask(0o022)
    os.umask(mask)
    return mask


class FileStorage:
    """Storage area rooted at a local directory.

    Each record is a file at ``root / key``; its mtime is the record's
    last-modified time.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root = Path(root)
        # Records get the mode a plain open() would give them
        self._mode = 0o666 & ~_current_umask()

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        return self._root.joinpath(*key.split("/"))

    def ensure_root(self) -> None:
        """Create the root directory and its parents."""
        self._root.mkdir(parents=True, exist_ok=True)

    def exists(self, key: str) -> bool:
        """Check whether a record file exists."""
        return self._path(key).is_file()

    def read(self, key: str) -> bytes:
        """Read a record file."""
        return self._path(key).read_bytes()

    def write(self, key: str, data: bytes) -> None:
        """Replace a record file atomically."""
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                os.chmod(tmp, self._mode)
                f.write(data)
            os.replace(tmp, path)
        except BaseException:
            # Leave no temp file behind on a failed write
            with suppress(FileNotFoundError):
                os.unlink(tmp)
            raise

    def set_mtime(self, key: str, when: float) -> None:
        """Set access and modification time of a record file."""
        os.utime(self._path(key), (when, when))

    def mtime(self, key: str) -> float:
        """Get the modification time of a record file."""
        return self._path(key).stat().st_mtime

    def location(self, key: str) -> str:
        """Filesystem path of the record file."""
        return str(self._path(key))
