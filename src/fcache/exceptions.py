"""
Exception hierarchy for the file cache.

All exceptions inherit from FCacheError, which carries optional structured
context for logging. Only setup errors and route-table serialization errors
are meant to reach callers; read and write failures are reported through
return values.
"""

from __future__ import annotations

from typing import Any


class FCacheError(Exception):
    """Base exception for all cache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class DirectoryCreateError(FCacheError):
    """Raised when the cache root directory cannot be created.

    Context should include:
        - dir: The directory that could not be created
    """

    pass


class NotWritableError(FCacheError):
    """Raised when the resolved cache root is not writable.

    Context should include:
        - dir: The resolved directory
    """

    pass


class CacheEncodeError(FCacheError):
    """Raised when a value cannot be serialized for storage.

    Examples:
        - A function or lambda somewhere inside the value
        - A mapping with non-string keys
    """

    pass


class CacheDecodeError(FCacheError):
    """Raised when stored bytes cannot be decoded back into a value."""

    pass


class RouteCacheError(FCacheError):
    """Raised when the route table cannot be cached.

    The original CacheEncodeError is chained as __cause__.
    """

    pass
