"""
Base classes for caching.

CacheProtocol is the interface collaborators (route table loading, file
lookups, the CLI) program against. Implementations report misses and
write failures through return values instead of raising.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CacheProtocol(ABC):
    """Abstract interface for cache implementations."""

    @abstractmethod
    def get(self, key: str, ttl: int | None = None) -> Any | None:
        """Get a value from the cache, or None if absent or stale."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Set a value in the cache. Returns False if the write failed."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a value from the cache."""
        ...

    def exists(self, key: str, ttl: int | None = None) -> bool:
        """Check if a fresh value exists for key."""
        return self.get(key, ttl) is not None
