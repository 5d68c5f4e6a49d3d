"""Tagged file cache - the get-or-compute core.

Each entry is a pair of records stored under the same id in two areas:
- data: the payload, serialized by :mod:`tagcache.codec` or raw bytes
- tags: the invalidation tag the payload was stored with

An entry is valid while its stored tag equals the caller's tag and its data
record is no older than the TTL.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from tagcache import codec
from tagcache.config import CacheConfig
from tagcache.duration import parse_duration
from tagcache.exceptions import CodecError
from tagcache.http import HeadersLike, Validators, etag_for, is_not_modified
from tagcache.keys import check_id
from tagcache.storage.base import Storage
from tagcache.storage.filesystem import FileStorage
from tagcache.types import CacheResult, Clock, Compute, Duration, NotModified, Value

logger = logging.getLogger(__name__)

R = TypeVar("R")


class _Flight:
    """One in-progress computation and its outcome."""

    __slots__ = ("error", "event", "owner", "result")

    def __init__(self) -> None:
        self.owner = threading.get_ident()
        self.event = threading.Event()
        self.result: Any = None
        self.error: BaseException | None = None


class TaggedFileCache:
    """Filesystem-backed cache validated by tag and TTL."""

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        data: Storage | None = None,
        tags: Storage | None = None,
        clock: Clock = time.time,
    ) -> None:
        self._config = config or CacheConfig()
        self._data = data if data is not None else FileStorage(self._config.data_root)
        self._tags = tags if tags is not None else FileStorage(self._config.tag_root)
        self._clock = clock
        self._in_flight: dict[str, _Flight] = {}
        self._lock = threading.Lock()

        self._data.ensure_root()
        self._tags.ensure_root()

    @property
    def config(self) -> CacheConfig:
        return self._config

    def _resolve_ttl(self, ttl: Duration | None) -> int:
        """Map 0/None to the configured default."""
        if ttl is None:
            return cast(int, self._config.default_ttl)
        seconds = parse_duration(ttl)
        if seconds < 0:
            raise ValueError(f"TTL must not be negative: {ttl!r}")
        if seconds == 0:
            return cast(int, self._config.default_ttl)
        return seconds

    def valid(self, id: str, tag: str, ttl: Duration | None = None) -> bool:
        """Check that an entry exists, carries ``tag`` and is within ``ttl``."""
        check_id(id)
        max_age = self._resolve_ttl(ttl)

        if not self._data.exists(id) or not self._tags.exists(id):
            return False

        if self._read_tag(id) != tag:
            return False

        age = int(self._clock()) - int(self._data.mtime(id))
        return age <= max_age

    def touch(self, id: str, tag: str) -> None:
        """Restart an entry's TTL window, updating its tag if it changed.

        Entries that do not exist are left alone.
        """
        check_id(id)
        if not self._data.exists(id) or not self._tags.exists(id):
            return

        if self._read_tag(id) != tag:
            self._tags.write(id, tag.encode("utf-8"))

        self._data.set_mtime(id, self._clock())
        logger.debug("Touched %s", id)

    def put(
        self,
        id: str,
        tag: str,
        compute: Compute[Any],
        *,
        ttl: Duration | None = None,
        raw: bool = False,
    ) -> None:
        """Make sure an entry is populated, computing it only if needed.

        A valid entry whose stored value is ``None`` or ``False`` counts as
        empty and is recomputed.
        """
        check_id(id)
        if self.valid(id, tag, ttl):
            value = self._load(id, raw)
            if value is not None and value is not False:
                logger.debug("Put skipped for %s, entry is current", id)
                return

        self._recompute(id, tag, compute, raw)

    def get(
        self,
        id: str,
        tag: str,
        compute: Compute[Any],
        *,
        ttl: Duration | None = None,
        raw: bool = False,
        headers: HeadersLike | None = None,
    ) -> CacheResult[Any]:
        """Return the stored value, or compute and store it.

        In raw mode a valid entry carries its HTTP validators, and when the
        request ``headers`` show the client already has it the result is
        :class:`NotModified` instead of the payload.
        """
        check_id(id)
        if self.valid(id, tag, ttl):
            if raw:
                validators = Validators(
                    last_modified=self._data.mtime(id),
                    etag=etag_for(self._tags.read(id)),
                )
                if is_not_modified(headers, validators):
                    logger.debug("Not modified: %s", id)
                    return NotModified(validators)
                logger.debug("Hit: %s", id)
                return Value(self._data.read(id), validators)

            value = self._load(id, raw)
            if value is not None and value is not False:
                logger.debug("Hit: %s", id)
                return Value(value)

        return Value(self._recompute(id, tag, compute, raw))

    def path(self, id: str) -> str:
        """Location of the data record for ``id``. Performs no I/O."""
        return self._data.location(check_id(id))

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _read_tag(self, id: str) -> str:
        return self._tags.read(id).decode("utf-8", errors="replace")

    def _load(self, id: str, raw: bool) -> Any:
        """Read a data record; undecodable records read as ``None``."""
        data = self._data.read(id)
        if raw:
            return data
        try:
            return codec.decode(data)
        except CodecError as e:
            logger.warning("Discarding unreadable cache record %s: %s", id, e)
            return None

    def _store(self, id: str, tag: str, compute: Compute[Any], raw: bool) -> Any:
        """Compute a value and write data, tag, then mtime."""
        logger.debug("Miss: %s, computing", id)
        value = compute()
        if raw:
            value = codec.to_raw(value)
            payload = value
        else:
            payload = codec.encode(value)

        self._data.write(id, payload)
        self._tags.write(id, tag.encode("utf-8"))
        self._data.set_mtime(id, self._clock())
        return value

    def _recompute(self, id: str, tag: str, compute: Compute[Any], raw: bool) -> Any:
        if not self._config.coalesce:
            return self._store(id, tag, compute, raw)
        key = f"{id}\x00{tag}\x00{'raw' if raw else 'codec'}"
        return self._coalesce(key, lambda: self._store(id, tag, compute, raw))

    def _coalesce(self, key: str, fetch: Callable[[], R]) -> R:
        """Coalesce concurrent computations for the same key.

        A compute callback that asks for its own key from the same thread
        would wait on itself, so that raises ``RuntimeError`` instead.
        """
        with self._lock:
            flight = self._in_flight.get(key)
            leader = flight is None
            if flight is None:
                flight = _Flight()
                self._in_flight[key] = flight
            elif flight.owner == threading.get_ident():
                raise RuntimeError("Re-entrant computation of a cache entry")

        if not leader:
            flight.event.wait()
            if flight.error is not None:
                raise flight.error
            return cast(R, flight.result)

        try:
            flight.result = fetch()
            return cast(R, flight.result)
        except BaseException as e:
            flight.error = e
            raise
        finally:
            with self._lock:
                del self._in_flight[key]
            flight.event.set()


def create_cache(
    *,
    data_root: str | os.PathLike[str] | None = None,
    tag_root: str | os.PathLike[str] | None = None,
    default_ttl: Duration | None = None,
    coalesce: bool = True,
    clock: Clock = time.time,
) -> TaggedFileCache:
    """Create a filesystem cache, creating both roots if needed.

    Args:
        data_root: Directory for data records
        tag_root: Directory for tag records
        default_ttl: TTL used when calls pass 0 or None
        coalesce: Share one computation between concurrent misses
        clock: Time source in seconds

    Returns:
        TaggedFileCache with valid, touch, put, get and path
    """
    kwargs: dict[str, Any] = {"coalesce": coalesce}
    if data_root is not None:
        kwargs["data_root"] = data_root
    if tag_root is not None:
        kwargs["tag_root"] = tag_root
    if default_ttl is not None:
        kwargs["default_ttl"] = default_ttl
    return TaggedFileCache(CacheConfig(**kwargs), clock=clock)


__all__ = ["TaggedFileCache", "create_cache"]
