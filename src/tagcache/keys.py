"""Entry id validation."""

from pathlib import PurePosixPath


def check_id(id: str) -> str:
    """Validate an entry id and return it unchanged.

    Ids are relative, ``/``-separated paths. Anything that could resolve
    outside a storage root is rejected.

    Example:
        check_id("pages/home")   # "pages/home"
        check_id("../etc")       # ValueError
    """
    if not isinstance(id, str) or not id:
        raise ValueError("Cache id must be a non-empty string")
    if "\x00" in id or "\\" in id:
        raise ValueError(f"Invalid cache id: {id!r}")
    path = PurePosixPath(id)
    if path.is_absolute():
        raise ValueError(f"Cache id must be relative: {id!r}")
    if any(part in (".", "..") for part in id.split("/")) or "" in id.split("/"):
        raise ValueError(f"Invalid cache id: {id!r}")
    return id
