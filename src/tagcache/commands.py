"""Command table for template and expression layers.

Callers pass arguments that are already evaluated, except the trailing value
expression of get/put/pass commands, which is a zero-argument callable so it
is only evaluated on a miss.

Example:
    commands = CacheCommands(cache)
    commands.invoke("cache.get", "menu", "v3", "10m", lambda: build_menu())
    commands.invoke("cache.valid", "menu", "v3")
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, cast

from tagcache.cache import TaggedFileCache
from tagcache.duration import parse_duration
from tagcache.exceptions import CommandError
from tagcache.http import HeadersLike
from tagcache.types import CacheResult, Compute, Value

logger = logging.getLogger(__name__)

COMMANDS = (
    "cache.valid",
    "cache.touch",
    "cache.get",
    "cache.get_raw",
    "cache.put",
    "cache.put_raw",
    "cache.path",
    "cache.pass",
)


def _value_args(name: str, args: tuple[Any, ...]) -> tuple[str, str, int | None, Compute[Any]]:
    """Split ``id, tag [, ttl], valueExpr`` arguments."""
    if len(args) == 3:
        id, tag, compute = args
        ttl = None
    elif len(args) == 4:
        id, tag, ttl, compute = args
        ttl = parse_duration(ttl)
    else:
        raise CommandError(f"{name} expects 3 or 4 arguments, got {len(args)}")
    if not callable(compute):
        raise CommandError(f"{name} expects a callable value expression")
    return str(id), str(tag), ttl, compute


class CacheCommands:
    """Dispatches ``cache.*`` commands to a :class:`TaggedFileCache`."""

    def __init__(
        self,
        cache: TaggedFileCache,
        *,
        request_headers: Callable[[], HeadersLike | None] | None = None,
    ) -> None:
        self._cache = cache
        self._request_headers = request_headers
        self._handlers: dict[str, Callable[..., Any]] = {
            "cache.valid": self._valid,
            "cache.touch": self._touch,
            "cache.get": self._get,
            "cache.get_raw": self._get_raw,
            "cache.put": self._put,
            "cache.put_raw": self._put_raw,
            "cache.path": self._path,
            "cache.pass": self._pass,
        }

    def invoke(self, name: str, *args: Any) -> Any:
        """Run a command by name."""
        handler = self._handlers.get(name)
        if handler is None:
            raise CommandError(f"Unknown command: {name}")
        return handler(*args)

    def _valid(self, *args: Any) -> bool:
        if len(args) == 1:
            id, tag, ttl = args[0], "", None
        elif len(args) == 2:
            # A lone int is a TTL, anything else a tag
            if isinstance(args[1], int) and not isinstance(args[1], bool):
                id, tag, ttl = args[0], "", args[1]
            else:
                id, tag, ttl = args[0], args[1], None
        elif len(args) == 3:
            id, tag, ttl = args[0], args[1], parse_duration(args[2])
        else:
            raise CommandError(f"cache.valid expects 1 to 3 arguments, got {len(args)}")
        return self._cache.valid(str(id), str(tag), ttl)

    def _touch(self, *args: Any) -> None:
        if len(args) != 2:
            raise CommandError(f"cache.touch expects 2 arguments, got {len(args)}")
        self._cache.touch(str(args[0]), str(args[1]))

    def _get(self, *args: Any) -> Any:
        id, tag, ttl, compute = _value_args("cache.get", args)
        result = self._cache.get(id, tag, compute, ttl=ttl)
        # Serialized mode never negotiates
        return cast(Value[Any], result).value

    def _get_raw(self, *args: Any) -> CacheResult[bytes]:
        id, tag, ttl, compute = _value_args("cache.get_raw", args)
        headers = self._request_headers() if self._request_headers else None
        return self._cache.get(id, tag, compute, ttl=ttl, raw=True, headers=headers)

    def _put(self, *args: Any) -> None:
        id, tag, ttl, compute = _value_args("cache.put", args)
        self._cache.put(id, tag, compute, ttl=ttl)

    def _put_raw(self, *args: Any) -> None:
        id, tag, ttl, compute = _value_args("cache.put_raw", args)
        self._cache.put(id, tag, compute, ttl=ttl, raw=True)

    def _path(self, *args: Any) -> str:
        if len(args) != 1:
            raise CommandError(f"cache.path expects 1 argument, got {len(args)}")
        return self._cache.path(str(args[0]))

    def _pass(self, *args: Any) -> Any:
        _, _, _, compute = _value_args("cache.pass", args)
        logger.debug("Bypassing cache")
        return compute()


__all__ = ["COMMANDS", "CacheCommands"]
