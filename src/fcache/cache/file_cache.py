"""
File-based key/value cache with lazy time-based expiry.

Layout on disk:

    <root>/<d0d1>/<sha1(key)>.txt

where d0d1 are the first two hex characters of the digest. Entry freshness
comes from the file modification time: an entry is live while
now - mtime < ttl. Nothing is swept in the background; a stale entry is
deleted by the first get() that finds it.

Writes go to a temporary file in the shard directory and are moved into
place with os.replace() while holding an exclusive lock on a sidecar
<digest>.lock file, so readers see either the old entry or the new one.

The ttl passed to set() is not stored. Freshness is always judged with the
ttl given to get(), or the default lifetime.
"""

from __future__ import annotations

import contextlib
import fcntl
import hashlib
import os
import tempfile
import time
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable

from fcache.cache.base import CacheProtocol
from fcache.cache.codec import decode, encode
from fcache.config import Settings, get_settings, normalize_extension
from fcache.exceptions import CacheDecodeError, DirectoryCreateError, NotWritableError
from fcache.logging import get_logger

logger = get_logger(__name__)

FILE_SUFFIX = ".txt"
LOCK_SUFFIX = ".lock"
ROOT_DIR_MODE = 0o755
SHARD_DIR_MODE = 0o777
FILE_MODE = 0o644

# Cache key the file-resolution subsystem stores its path index under
FILE_INDEX_KEY = "file-index"


def key_digest(key: str) -> str:
    """Return the 40-character hex digest used as the entry filename."""
    return hashlib.sha1(key.encode("utf-8", "surrogatepass")).hexdigest()


def file_index_key(
    directory: str,
    file: str,
    ext: str | None,
    as_array: bool = False,
    default_extension: str = ".py",
) -> str:
    """Build the composite key used in the file index.

    Args:
        directory: Directory part of the lookup (e.g. "classes").
        file: File name without extension.
        ext: None for the default extension, "" for no extension, otherwise
            an extension with or without its leading period.
        as_array: Whether the lookup asks for all matches instead of one path.
        default_extension: Extension used when ext is None.
    """
    suffix = normalize_extension(default_extension if ext is None else ext)
    return f"{directory}/{file}{suffix}" + ("_array" if as_array else "_path")


class FileCache(CacheProtocol):
    """Sharded on-disk cache keyed by SHA-1 of the cache key.

    Misses, corrupt entries and failed writes never raise: get() returns
    None and set() returns False. Only an unusable root directory is fatal.
    """

    def __init__(
        self,
        root_dir: str | Path | None = None,
        default_ttl: int | None = None,
        default_extension: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache, creating the root directory if needed.

        Args:
            root_dir: Cache root. Defaults to the CACHE_DIR setting.
            default_ttl: Lifetime in seconds used when get() gets no ttl.
                Defaults to the CACHE_LIFE setting.
            default_extension: Extension find_file() uses when ext is None.
                Defaults to the DEFAULT_EXTENSION setting.
            clock: Returns the current time as a Unix timestamp.

        Raises:
            DirectoryCreateError: If the root directory cannot be created.
            NotWritableError: If the root directory is not writable.
        """
        settings: Settings | None = None
        if root_dir is None or default_ttl is None or default_extension is None:
            settings = get_settings()

        root = Path(root_dir) if root_dir is not None else settings.CACHE_DIR
        if not root.is_dir():
            try:
                root.mkdir(mode=ROOT_DIR_MODE, parents=True, exist_ok=True)
                # mkdir() is subject to the umask
                os.chmod(root, ROOT_DIR_MODE)
            except OSError as e:
                raise DirectoryCreateError(
                    "Could not create cache directory",
                    context={"dir": str(root), "error": str(e)},
                ) from e

        self.root_dir = root.resolve()
        if not os.access(self.root_dir, os.W_OK):
            raise NotWritableError(
                "Cache directory must be writable",
                context={"dir": str(self.root_dir)},
            )

        self.default_ttl = default_ttl if default_ttl is not None else settings.CACHE_LIFE
        self.default_extension = normalize_extension(
            default_extension if default_extension is not None else settings.DEFAULT_EXTENSION
        )
        self._clock = clock

        index = self.get(FILE_INDEX_KEY)
        self._files: Mapping[str, Any] = MappingProxyType(
            dict(index) if isinstance(index, dict) else {}
        )

        logger.info(
            "File cache initialized",
            root_dir=str(self.root_dir),
            default_ttl=self.default_ttl,
            indexed_files=len(self._files),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> FileCache:
        """Create a cache from a Settings object."""
        return cls(
            root_dir=settings.CACHE_DIR,
            default_ttl=settings.CACHE_LIFE,
            default_extension=settings.DEFAULT_EXTENSION,
        )

    @property
    def file_index(self) -> Mapping[str, Any]:
        """Read-only view of the file index loaded at init."""
        return self._files

    def path_for(self, key: str) -> Path:
        """Get the backing file path for a key."""
        digest = key_digest(key)
        return self.root_dir / digest[:2] / f"{digest}{FILE_SUFFIX}"

    def get(self, key: str, ttl: int | None = None) -> Any | None:
        """Get a cached value.

        A stale entry is deleted and reported as a miss. A corrupt entry is
        reported as a miss and left in place.

        Args:
            key: Cache key.
            ttl: Lifetime in seconds. Defaults to the cache's default_ttl.

        Returns:
            The cached value, or None if absent, stale or unreadable.
        """
        path = self.path_for(key)
        lifetime = self.default_ttl if ttl is None else ttl

        try:
            mtime = path.stat().st_mtime
        except OSError:
            return None

        if self._clock() - mtime < lifetime:
            try:
                return decode(path.read_bytes())
            except (OSError, CacheDecodeError) as e:
                logger.warning("Unreadable cache entry", key=key, path=str(path), error=str(e))
                return None

        try:
            path.unlink()
            self._remove_lock(path)
            logger.debug("Expired cache entry removed", key=key)
        except OSError as e:
            # Most likely removed by another reader already
            logger.debug("Could not remove expired entry", key=key, error=str(e))

        return None

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store a value.

        Args:
            key: Cache key.
            value: Any value the codec can serialize.
            ttl: Accepted for interface compatibility; not stored. Freshness
                is decided at read time.

        Returns:
            True if the entry was written, False on any I/O failure.

        Raises:
            CacheEncodeError: If the value cannot be serialized.
        """
        path = self.path_for(key)
        payload = encode(value)

        try:
            self._ensure_shard_dir(path.parent)
            self._write_atomic(path, payload)
        except OSError as e:
            logger.warning("Cache write failed", key=key, path=str(path), error=str(e))
            return False

        logger.debug("Cache entry written", key=key, size=len(payload))
        return True

    def delete(self, key: str) -> bool:
        """Remove an entry. Returns False if it did not exist or could not be removed."""
        path = self.path_for(key)
        try:
            path.unlink()
        except OSError:
            return False
        self._remove_lock(path)
        return True

    def find_file(
        self,
        directory: str,
        file: str,
        ext: str | None = None,
        as_array: bool = False,
    ) -> Any | None:
        """Look up a previously resolved file path in the file index.

        This never touches the filesystem; the index is loaded once at init
        and written by whatever resolves files.

        Returns:
            The indexed path (or list of paths when as_array), or None.
        """
        lookup = file_index_key(
            directory, file, ext, as_array, default_extension=self.default_extension
        )
        return self._files.get(lookup)

    def _ensure_shard_dir(self, shard_dir: Path) -> None:
        if shard_dir.is_dir():
            return
        shard_dir.mkdir(mode=SHARD_DIR_MODE, parents=True, exist_ok=True)
        os.chmod(shard_dir, SHARD_DIR_MODE)
        logger.debug("Created shard directory", dir=shard_dir.name)

    def _remove_lock(self, path: Path) -> None:
        # A writer holding the old lock still finishes with an atomic replace
        with contextlib.suppress(OSError):
            path.with_suffix(LOCK_SUFFIX).unlink()

    def _write_atomic(self, path: Path, payload: bytes) -> None:
        lock_path = path.with_suffix(LOCK_SUFFIX)
        with open(lock_path, "a") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                os.chmod(tmp_name, FILE_MODE)
                os.replace(tmp_name, path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
