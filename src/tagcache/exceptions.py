"""Exceptions raised by tagcache."""


class TagCacheError(Exception):
    """Base exception for tagcache errors."""

    pass


class CodecError(TagCacheError):
    """Raised when a value cannot be encoded or a record cannot be decoded."""

    pass


class CommandError(TagCacheError):
    """Raised for unknown commands or wrong argument counts."""

    pass
