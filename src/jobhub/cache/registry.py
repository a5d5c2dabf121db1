"""根据配置返回当前使用的缓存（进程内单例）。"""
from jobhub.core.config import redis_url
from .base import CacheAdapter
from .memory import MemoryCache

_cache: CacheAdapter | None = None


def get_cache() -> CacheAdapter:
    """配置了 REDIS_URL 时使用 RedisCache，否则使用进程内 MemoryCache。"""
    global _cache
    if _cache is None:
        url = redis_url()
        if url:
            from .redis_cache import RedisCache
            _cache = RedisCache(url)
        else:
            _cache = MemoryCache()
    return _cache


def reset_cache() -> None:
    """丢弃单例（测试用）。"""
    global _cache
    _cache = None
