"""
Cache package.

- base.py: CacheProtocol interface
- codec.py: orjson payload encoding
- file_cache.py: sharded on-disk cache with lazy expiry
"""

from fcache.cache.base import CacheProtocol
from fcache.cache.file_cache import FILE_INDEX_KEY, FileCache, file_index_key, key_digest

__all__ = [
    "CacheProtocol",
    "FILE_INDEX_KEY",
    "FileCache",
    "file_index_key",
    "key_digest",
]
