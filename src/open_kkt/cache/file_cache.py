"""
File-backed key-value cache

Stores one value per file inside a cache directory. Used as the default
backing store for the token cache so a token survives process restarts.
"""

import os
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from open_kkt.exceptions import CacheMiss, CacheUnavailable


class FileCacheDefaults:
    """Default values for the file cache"""
    DIRECTORY = Path.home() / ".cache" / "open_kkt"
    FILE_PERMISSIONS = 0o600
    ENCODING = "utf-8"


class FileCache:
    """
    Directory of plain-text cache entries

    Features:
    - Cache directory created on first use
    - Atomic writes (temp file + rename) to prevent torn reads
    - Owner-only file permissions (0600)
    - Missing entries reported as CacheMiss, every other I/O
      failure as CacheUnavailable

    Example:
        >>> cache = FileCache("./cache")
        >>> cache.set("OpenApiToken 42", "token-value")
        >>> cache.get("OpenApiToken 42")
        'token-value'
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None) -> None:
        """
        Create the cache, making sure its directory exists

        Raises:
            CacheUnavailable: If the directory cannot be created
        """
        self._directory = Path(directory or FileCacheDefaults.DIRECTORY).resolve()
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheUnavailable(
                f"Unable to create cache directory {self._directory}: {e}",
                code="CACHE10",
                cause=e,
            ) from e

    @property
    def directory(self) -> Path:
        return self._directory

    def has(self, key: str) -> bool:
        """Check whether an entry exists for the key"""
        return self._path_for(key).is_file()

    def get(self, key: str) -> str:
        """
        Read the value stored under the key

        Raises:
            CacheMiss: If no entry exists
            CacheUnavailable: If the entry cannot be read
        """
        path = self._path_for(key)
        try:
            return path.read_text(FileCacheDefaults.ENCODING)
        except FileNotFoundError as e:
            raise CacheMiss(key) from e
        except OSError as e:
            raise CacheUnavailable(
                f"Insufficient permissions to read cache entry {path}: {e}",
                code="CACHE11",
                cause=e,
            ) from e

    def set(self, key: str, value: str) -> None:
        """
        Store a value under the key

        Raises:
            CacheUnavailable: If the entry cannot be written
        """
        path = self._path_for(key)
        if not os.access(self._directory, os.W_OK):
            raise CacheUnavailable(
                f"Insufficient permissions to write cache directory {self._directory}",
                code="CACHE12",
            )

        temp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
        try:
            temp_path.write_text(value, FileCacheDefaults.ENCODING)
            os.chmod(temp_path, FileCacheDefaults.FILE_PERMISSIONS)
            temp_path.replace(path)
        except OSError as e:
            raise CacheUnavailable(
                f"Failed to write cache entry {path}: {e}",
                code="CACHE13",
                cause=e,
            ) from e

    def delete(self, key: str) -> None:
        """Remove the entry if present"""
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise CacheUnavailable(
                f"Failed to delete cache entry {path}: {e}",
                code="CACHE14",
                cause=e,
            ) from e

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", "..") or "\x00" in key:
            raise CacheUnavailable(f"Invalid cache key: {key!r}", code="CACHE15")
        return self._directory / key


class MemoryCache:
    """In-process dict store with the same contract as FileCache"""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def get(self, key: str) -> str:
        with self._lock:
            try:
                return self._data[key]
            except KeyError:
                raise CacheMiss(key) from None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
