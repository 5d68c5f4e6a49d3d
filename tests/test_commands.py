"""Tests for the cache command table."""

from pathlib import Path
from typing import Any

import pytest

from conftest import FakeClock
from tagcache import COMMANDS, CacheCommands, CommandError, NotModified, TaggedFileCache, Value


@pytest.fixture
def request_headers() -> dict[str, str]:
    return {}


@pytest.fixture
def commands(cache: TaggedFileCache, request_headers: dict[str, str]) -> CacheCommands:
    return CacheCommands(cache, request_headers=lambda: request_headers)


class Expr:
    """Lazy value expression that records evaluation."""

    def __init__(self, value: Any) -> None:
        self.value = value
        self.evaluated = 0

    def __call__(self) -> Any:
        self.evaluated += 1
        return self.value


class TestDispatch:
    """Tests for command lookup and arity."""

    def test_every_command_is_dispatchable(self, commands: CacheCommands) -> None:
        for name in COMMANDS:
            with pytest.raises(CommandError, match="expects"):
                commands.invoke(name)

    def test_unknown_command(self, commands: CacheCommands) -> None:
        with pytest.raises(CommandError, match="Unknown command"):
            commands.invoke("cache.delete", "x")

    def test_value_expression_must_be_callable(self, commands: CacheCommands) -> None:
        with pytest.raises(CommandError, match="callable"):
            commands.invoke("cache.get", "menu", "v1", "not lazy")


class TestCommands:
    """Tests for each command's effect."""

    def test_get_with_and_without_ttl(self, commands: CacheCommands, clock: FakeClock) -> None:
        assert commands.invoke("cache.get", "menu", "v1", Expr(["home"])) == ["home"]

        clock.advance(120)
        second = Expr(["about"])
        # Default TTL (60s) has passed, an explicit longer TTL has not
        assert commands.invoke("cache.get", "menu", "v1", "5m", second) == ["home"]
        assert second.evaluated == 0

    def test_valid_forms(self, commands: CacheCommands, clock: FakeClock) -> None:
        commands.invoke("cache.get", "menu", "v1", Expr("x"))
        clock.advance(90)
        assert commands.invoke("cache.valid", "menu", "v1") is False
        assert commands.invoke("cache.valid", "menu", "v1", 120) is True
        assert commands.invoke("cache.valid", "menu", "v1", "2m") is True
        # Omitted tag compares against the empty tag
        assert commands.invoke("cache.valid", "menu") is False
        assert commands.invoke("cache.valid", "menu", 120) is False

    def test_numeric_string_ttl(self, commands: CacheCommands, clock: FakeClock) -> None:
        """Test that a TTL evaluated to a string of digits is read as seconds."""
        assert commands.invoke("cache.get", "menu", "v1", "60", Expr(["x"])) == ["x"]
        clock.advance(90)
        assert commands.invoke("cache.valid", "menu", "v1", "120") is True
        assert commands.invoke("cache.valid", "menu", "v1", "60") is False

    def test_valid_with_empty_tag(self, commands: CacheCommands) -> None:
        commands.invoke("cache.put", "plain", "", Expr(1))
        assert commands.invoke("cache.valid", "plain") is True
        assert commands.invoke("cache.valid", "plain", 30) is True

    def test_touch(self, commands: CacheCommands, clock: FakeClock) -> None:
        commands.invoke("cache.get", "menu", "v1", Expr("x"))
        clock.advance(90)
        assert commands.invoke("cache.touch", "menu", "v1") is None
        assert commands.invoke("cache.valid", "menu", "v1") is True

    def test_put_and_put_raw(self, commands: CacheCommands, cache: TaggedFileCache) -> None:
        expr = Expr({"warm": True})
        assert commands.invoke("cache.put", "feed", "v1", expr) is None
        assert commands.invoke("cache.put", "feed", "v1", expr) is None
        assert expr.evaluated == 1

        commands.invoke("cache.put_raw", "page", "v1", "10m", Expr("<p>warm</p>"))
        assert Path(cache.path("page")).read_bytes() == b"<p>warm</p>"

    def test_get_raw_negotiates_with_request_headers(
        self, commands: CacheCommands, request_headers: dict[str, str]
    ) -> None:
        first = commands.invoke("cache.get_raw", "page", "v1", Expr("<p>hi</p>"))
        assert first == Value(b"<p>hi</p>")

        hit = commands.invoke("cache.get_raw", "page", "v1", Expr("<p>x</p>"))
        assert isinstance(hit, Value)
        assert hit.validators is not None

        request_headers["If-None-Match"] = hit.validators.etag
        result = commands.invoke("cache.get_raw", "page", "v1", Expr("<p>x</p>"))
        assert isinstance(result, NotModified)

    def test_get_raw_without_header_source(self, cache: TaggedFileCache) -> None:
        commands = CacheCommands(cache)
        commands.invoke("cache.get_raw", "page", "v1", Expr("a"))
        assert commands.invoke("cache.get_raw", "page", "v1", Expr("b")).value == b"a"

    def test_path(self, commands: CacheCommands, cache: TaggedFileCache) -> None:
        assert commands.invoke("cache.path", "pages/home") == cache.path("pages/home")

    def test_pass_bypasses_storage(self, commands: CacheCommands, cache: TaggedFileCache) -> None:
        """Test that pass always evaluates and never stores."""
        first, second = Expr("a"), Expr("b")
        assert commands.invoke("cache.pass", "menu", "v1", first) == "a"
        assert commands.invoke("cache.pass", "menu", "v1", "1h", second) == "b"
        assert first.evaluated == 1
        assert second.evaluated == 1
        assert not Path(cache.path("menu")).exists()
