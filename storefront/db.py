"""
Storage Module - Durable key/value backends

Stands in for browser localStorage: string values under string keys that
survive a restart. Backends:
- FileStorage: one file per key in a local directory (default)
- RedisStorage: Upstash Redis over REST
- MemoryStorage: process memory, for tests and throwaway sessions

Writers are not coordinated across processes; the last write wins.
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from upstash_redis import Redis

from storefront.config import Settings
from storefront.logging import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """Raised when a backend cannot read or write a key."""


class LocalStorage(Protocol):
    """Minimal string key/value interface shared by every backend."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def close(self) -> None: ...


class MemoryStorage:
    """Dictionary-backed storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def close(self) -> None:
        pass


class FileStorage:
    """
    Directory-backed storage.

    Each key maps to ``<directory>/<key>.json``. Writes go to a temporary file
    in the same directory followed by ``os.replace`` so a reader never sees a
    half-written value.
    """

    def __init__(self, directory: str | os.PathLike):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e

    def close(self) -> None:
        pass


class RedisStorage:
    """Upstash Redis (REST) storage, optionally namespaced by a key prefix."""

    def __init__(self, client: Redis, prefix: str = "storefront:"):
        self._redis = client
        self.prefix = prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisStorage":
        if not settings.redis_url or not settings.redis_token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        return cls(Redis(url=settings.redis_url, token=settings.redis_token))

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._redis.get(f"{self.prefix}{key}")
        except Exception as e:
            raise StorageError(f"Redis GET {key} failed: {e}") from e
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(f"{self.prefix}{key}", value)
        except Exception as e:
            raise StorageError(f"Redis SET {key} failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(f"{self.prefix}{key}")
        except Exception as e:
            raise StorageError(f"Redis DEL {key} failed: {e}") from e

    def close(self) -> None:
        pass


def get_storage(settings: Settings) -> LocalStorage:
    """Build the storage backend selected by ``settings.storage_backend``."""
    backend = settings.storage_backend
    if backend == "memory":
        logger.info("Using in-memory storage; cart will not survive a restart")
        return MemoryStorage()
    if backend == "redis":
        logger.info("Using Upstash Redis storage")
        return RedisStorage.from_settings(settings)
    logger.info(f"Using file storage at {settings.storage_dir}")
    return FileStorage(settings.storage_dir)
