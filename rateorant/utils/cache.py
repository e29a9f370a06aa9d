# rateorant/utils/cache.py
from typing import Any, Optional
import time


class TTLCache:
    """Simple in-memory cache with a time-to-live per entry"""
    def __init__(self, ttl: int = 300):
        self._cache: dict = {}
        self._ttl = ttl

    def set(self, key: str, value: Any) -> None:
        self._cache[key] = (value, time.monotonic())

    def get(self, key: str) -> Optional[Any]:
        if key not in self._cache:
            return None
        value, timestamp = self._cache[key]
        if time.monotonic() - timestamp > self._ttl:
            del self._cache[key]
            return None
        return value

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)

    def clear(self) -> None:
        self._cache.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
