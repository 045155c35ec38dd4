"""Token cache module"""

from open_kkt.cache.file_cache import FileCache, FileCacheDefaults, MemoryCache
from open_kkt.cache.token_store import KeyValueStore, TokenStore, TOKEN_KEY_PREFIX

__all__ = [
    "FileCache",
    "FileCacheDefaults",
    "MemoryCache",
    "KeyValueStore",
    "TokenStore",
    "TOKEN_KEY_PREFIX",
]
