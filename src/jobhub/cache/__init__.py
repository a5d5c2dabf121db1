"""
缓存适配层：get / set_with_ttl / delete / delete_by_prefix / list_keys。
未配置 REDIS_URL 时用进程内内存（单机）；配置后使用 Redis。
"""
from .base import CacheAdapter
from .memory import MemoryCache
from .registry import get_cache, reset_cache

__all__ = ["CacheAdapter", "MemoryCache", "get_cache", "reset_cache"]
