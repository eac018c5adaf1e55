import threading
from contextlib import contextmanager

from storelink.core.errors import ActionInProgressError


class InFlightRegistry:
    """Tracks pending simulated storefront calls keyed by action and entity."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pending = set()

    def is_pending(self, key) -> bool:
        with self._lock:
            return key in self._pending

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    @contextmanager
    def claim(self, key):
        with self._lock:
            if key in self._pending:
                raise ActionInProgressError(f"{key[0]} already in progress for {key[1:]}")
            self._pending.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._pending.discard(key)


inflight = InFlightRegistry()
