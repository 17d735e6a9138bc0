"""
fcache: filesystem-backed key/value cache with lazy time-based expiry.
"""

__version__ = "0.1.0"

from fcache.cache.file_cache import FILE_INDEX_KEY, FileCache, file_index_key
from fcache.exceptions import (
    CacheDecodeError,
    CacheEncodeError,
    DirectoryCreateError,
    FCacheError,
    NotWritableError,
    RouteCacheError,
)
from fcache.routes import ROUTE_CACHE_KEY, Route, RouteTable, cache_route

__all__ = [
    "__version__",
    "FILE_INDEX_KEY",
    "ROUTE_CACHE_KEY",
    "CacheDecodeError",
    "CacheEncodeError",
    "DirectoryCreateError",
    "FCacheError",
    "FileCache",
    "NotWritableError",
    "Route",
    "RouteCacheError",
    "RouteTable",
    "cache_route",
    "file_index_key",
]
