"""Per-request nonce generation"""

import threading
import time


class NonceGenerator:
    """
    Produces ``nonce_<seconds><micros>`` identifiers from the wall clock

    Values are strictly increasing within a process: when two calls land on
    the same microsecond the later one is bumped past the previous value.
    """

    PREFIX = "nonce_"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def next(self) -> str:
        """Return a fresh nonce"""
        stamp = int(f"{time.time():.6f}".replace(".", ""))
        with self._lock:
            if stamp <= self._last:
                stamp = self._last + 1
            self._last = stamp
        return f"{self.PREFIX}{stamp}"
