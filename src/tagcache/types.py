"""Core types for tagcache."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar, Union

if TYPE_CHECKING:
    from tagcache.http import Validators

T = TypeVar("T")

# Zero-argument producer, called lazily on a miss
Compute = Callable[[], T]

# Clock returning seconds since the epoch
Clock = Callable[[], float]

# Duration type alias
Duration = str | int  # "30s", "5m", "1h", "1d" or seconds


@dataclass(frozen=True, slots=True)
class Value(Generic[T]):
    """A resolved cache value.

    ``validators`` is only set for raw-mode hits, where the entry can be
    offered to an HTTP client for conditional revalidation.
    """

    value: T
    validators: Validators | None = None


@dataclass(frozen=True, slots=True)
class NotModified:
    """The client already holds the current raw entry."""

    validators: Validators


CacheResult = Union[Value[T], NotModified]
