"""
Token cache facade

Keeps the current Open API token of an integration in an injectable
key-value store, under the key ``"OpenApiToken " + app_id``.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from open_kkt.exceptions import CacheMiss, CacheUnavailable, OpenApiError


logger = logging.getLogger(__name__)

TOKEN_KEY_PREFIX = "OpenApiToken "


@runtime_checkable
class KeyValueStore(Protocol):
    """Backing store capability consumed by TokenStore"""

    def has(self, key: str) -> bool:
        ...

    def get(self, key: str) -> str:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class TokenStore:
    """
    Facade over a KeyValueStore holding one token per app_id

    Any failure of the backing store surfaces as CacheUnavailable. Only a
    CacheMiss (or ``has() == False``) means "no cached token".
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @staticmethod
    def key_for(app_id: str) -> str:
        return f"{TOKEN_KEY_PREFIX}{app_id}"

    def has(self, app_id: str) -> bool:
        return self._call("has", self.key_for(app_id))

    def get(self, app_id: str) -> str:
        return self._call("get", self.key_for(app_id))

    def set(self, app_id: str, token: str) -> None:
        self._call("set", self.key_for(app_id), token)

    def delete(self, app_id: str) -> None:
        self._call("delete", self.key_for(app_id))

    def load(self, app_id: str) -> Optional[str]:
        """
        Return the cached token, or None when nothing is cached

        Raises:
            CacheUnavailable: If the store fails for any reason other
                than a missing entry
        """
        if not self.has(app_id):
            return None
        try:
            return self.get(app_id)
        except CacheMiss:
            logger.debug("Token cache entry for app_id %s vanished before read", app_id)
            return None

    def _call(self, operation: str, *args):
        try:
            return getattr(self._store, operation)(*args)
        except OpenApiError:
            raise
        except Exception as e:
            raise CacheUnavailable(
                f"Token cache {operation} failed: {e}",
                code="CACHE20",
                cause=e,
            ) from e
