"""
Redis 缓存：SETEX / GET / DEL；前缀列举用 SCAN MATCH（不用 KEYS，避免阻塞实例）。

键：{namespace}{key}，namespace 默认为空，与其他服务共用实例时可加前缀隔离。
"""
from .base import CacheAdapter
from jobhub.core.errors import CacheUnavailable

# 单次 DEL 的键数量上限
_DELETE_CHUNK = 500


class RedisCache(CacheAdapter):

    def __init__(self, url: str, namespace: str = ""):
        import redis
        self._redis = redis.from_url(url, decode_responses=True)
        self._namespace = namespace

    def _k(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def _call(self, fn, *args, **kwargs):
        import redis
        try:
            return fn(*args, **kwargs)
        except redis.RedisError as e:
            raise CacheUnavailable(f"redis cache: {e}") from e

    def get(self, key):
        return self._call(self._redis.get, self._k(key))

    def set_with_ttl(self, key, value, ttl_seconds):
        self._call(self._redis.setex, self._k(key), ttl_seconds, value)

    def delete(self, *keys):
        removed = 0
        full = [self._k(k) for k in keys]
        for i in range(0, len(full), _DELETE_CHUNK):
            removed += int(self._call(self._redis.delete, *full[i:i + _DELETE_CHUNK]) or 0)
        return removed

    def list_keys(self, prefix):
        # 前缀中的 glob 元字符需转义，否则 "jobs:{...}" 里的 [ ] 会被当作字符集
        pattern = _glob_escape(self._k(prefix)) + "*"
        keys = self._call(lambda: list(self._redis.scan_iter(match=pattern, count=500)))
        cut = len(self._namespace)
        return [k[cut:] for k in keys]


def _glob_escape(text: str) -> str:
    out = []
    for ch in text:
        if ch in "*?[]\\":
            out.append("\\" + ch)
        else:
            out.append(ch)
    return "".join(out)
