"""HTTP conditional-request negotiation for raw cache entries."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from email.utils import formatdate, parsedate_to_datetime
from typing import Any

import httpx

from tagcache.types import CacheResult, NotModified

logger = logging.getLogger(__name__)

HeadersLike = httpx.Headers | Mapping[str, str] | Iterable[tuple[str, str]]


def http_date(timestamp: float) -> str:
    """Format a POSIX timestamp as an RFC 1123 date."""
    return formatdate(int(timestamp), usegmt=True)


def etag_for(tag_record: bytes) -> str:
    """Strong validator derived from the content of a tag record."""
    return '"' + hashlib.md5(tag_record).hexdigest() + '"'


@dataclass(frozen=True, slots=True)
class Validators:
    """Freshness validators of a raw cache entry."""

    last_modified: float
    etag: str

    @property
    def headers(self) -> httpx.Headers:
        """Response headers advertising the validators."""
        return httpx.Headers(
            {
                "Last-Modified": http_date(self.last_modified),
                "ETag": self.etag,
                "Cache-Control": "public",
            }
        )


def _opaque(etag: str) -> str:
    """Strip the weak prefix for weak comparison."""
    etag = etag.strip()
    if etag.startswith("W/"):
        etag = etag[2:]
    return etag


def _etag_matches(if_none_match: str, etag: str) -> bool:
    if if_none_match.strip() == "*":
        return True
    wanted = _opaque(etag)
    return any(_opaque(candidate) == wanted for candidate in if_none_match.split(","))


def _not_modified_since(if_modified_since: str, last_modified: float) -> bool:
    try:
        since = parsedate_to_datetime(if_modified_since)
    except (TypeError, ValueError, IndexError):
        # Unparseable dates are ignored
        return False
    if since is None:
        return False
    return int(last_modified) <= int(since.timestamp())


def is_not_modified(request_headers: HeadersLike | None, validators: Validators) -> bool:
    """Check whether the client's cached copy is still current.

    Either a matching ``If-None-Match`` or an ``If-Modified-Since`` at or
    after the entry's last-modified time is enough.
    """
    if request_headers is None:
        return False
    headers = httpx.Headers(request_headers)

    if_none_match = headers.get("If-None-Match")
    if if_none_match and _etag_matches(if_none_match, validators.etag):
        return True

    if_modified_since = headers.get("If-Modified-Since")
    if if_modified_since and _not_modified_since(if_modified_since, validators.last_modified):
        return True

    return False


def wsgi_response(
    result: CacheResult[bytes],
    start_response: Callable[..., Any],
) -> list[bytes]:
    """Turn a raw cache result into a WSGI response."""
    if isinstance(result, NotModified):
        logger.debug("Answering 304 for %s", result.validators.etag)
        start_response("304 Not Modified", list(result.validators.headers.items()))
        return []

    body = result.value
    headers = [("Content-Length", str(len(body)))]
    if result.validators is not None:
        headers.extend(result.validators.headers.items())
    start_response("200 OK", headers)
    return [body]
