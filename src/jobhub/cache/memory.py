"""进程内 TTL 缓存：未配置 REDIS_URL 时使用（单机）。"""
import time
from threading import Lock
from typing import Callable

from .base import CacheAdapter


class MemoryCache(CacheAdapter):
    """key -> (value, 过期时刻)；读取与列举时惰性剔除过期项。"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._data: dict[str, tuple[str, float]] = {}
        self._lock = Lock()
        self._clock = clock

    def _alive(self, key: str, now: float) -> bool:
        entry = self._data.get(key)
        if entry is None:
            return False
        if entry[1] <= now:
            del self._data[key]
            return False
        return True

    def get(self, key):
        with self._lock:
            if not self._alive(key, self._clock()):
                return None
            return self._data[key][0]

    def set_with_ttl(self, key, value, ttl_seconds):
        with self._lock:
            self._data[key] = (value, self._clock() + ttl_seconds)

    def delete(self, *keys):
        removed = 0
        with self._lock:
            for key in keys:
                if self._data.pop(key, None) is not None:
                    removed += 1
        return removed

    def list_keys(self, prefix):
        now = self._clock()
        with self._lock:
            return [k for k in list(self._data) if k.startswith(prefix) and self._alive(k, now)]

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
