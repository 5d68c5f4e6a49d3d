"""Shared pytest fixtures."""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from tagcache import CacheConfig, TaggedFileCache

START = 1_700_000_000.0


class FakeClock:
    """Controllable time source."""

    def __init__(self, now: float = START) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Create a clock frozen at a fixed instant."""
    return FakeClock()


@pytest.fixture
def config(tmp_path: Path) -> CacheConfig:
    """Create a config rooted in a temporary directory."""
    return CacheConfig(
        data_root=tmp_path / "data",
        tag_root=tmp_path / "tags",
        default_ttl=60,
    )


@pytest.fixture
def cache(config: CacheConfig, clock: FakeClock) -> TaggedFileCache:
    """Create a fresh filesystem cache for each test."""
    return TaggedFileCache(config, clock=clock)


@pytest.fixture
def umask_022() -> Iterator[None]:
    """Run a test under umask 022."""
    previous = os.umask(0o022)
    yield
    os.umask(previous)
