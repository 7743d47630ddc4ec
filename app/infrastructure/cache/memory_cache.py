import time
from typing import Dict, Optional, Tuple

from ...application.ports.cache import VerificationCache


class InMemoryVerificationCache(VerificationCache):
    """Process-local cache. Expired entries are dropped on read and swept on every write."""

    def __init__(self) -> None:
        self._store: Dict[str, Tuple[str, float]] = {}

    def get(self, key: str) -> Optional[str]:
        rec = self._store.get(key)
        if not rec:
            return None
        value, expires_at = rec
        if time.monotonic() >= expires_at:
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        now = time.monotonic()
        expired = [k for k, (_, expires_at) in self._store.items() if now >= expires_at]
        for k in expired:
            del self._store[k]
        self._store[key] = (value, now + ttl_seconds)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)
