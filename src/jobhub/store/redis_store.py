"""
Redis 记录存储：每个集合一个 hash，field = "{partition}\\x1f{jobId}"，value = JSON。

Redis 无二级索引，scan 取全部 hash 字段后在客户端按谓词过滤，与全表扫描语义一致。
"""
import json
from typing import Any

from jobhub.core.errors import StoreUnavailable
from .base import Predicate, RecordKey, RecordStore
from .collections import partition_attr, record_key

_SEP = "\x1f"


class RedisRecordStore(RecordStore):
    """连接由 redis.from_url 创建；超时等客户端配置通过 URL 参数传入。"""

    def __init__(self, url: str, namespace: str = "jobhub:table"):
        import redis
        self._redis = redis.from_url(url, decode_responses=True)
        self._namespace = namespace

    def _hash_key(self, collection: str) -> str:
        partition_attr(collection)
        return f"{self._namespace}:{collection}"

    @staticmethod
    def _field(key: RecordKey) -> str:
        return f"{key[0]}{_SEP}{key[1]}"

    def _call(self, fn, *args):
        import redis
        try:
            return fn(*args)
        except redis.RedisError as e:
            raise StoreUnavailable(f"redis record store: {e}") from e

    def get(self, collection, key):
        raw = self._call(self._redis.hget, self._hash_key(collection), self._field(key))
        return json.loads(raw) if raw else None

    def scan(self, collection, predicate: Predicate):
        raw_items = self._call(self._redis.hvals, self._hash_key(collection))
        items = [json.loads(r) for r in raw_items]
        return [i for i in items if predicate.matches(i)]

    def put(self, collection, item):
        key = record_key(collection, item)
        if not all(key):
            raise StoreUnavailable(f"{collection}: 记录缺少主键 {partition_attr(collection)}/jobId")
        self._call(self._redis.hset, self._hash_key(collection), self._field(key), json.dumps(item))

    def update(self, collection, key, delta):
        # 读-改-写非原子；管理端写入频率低，可接受
        current = self.get(collection, key) or {partition_attr(collection): key[0], "jobId": key[1]}
        merged: dict[str, Any] = {**current, **delta}
        self._call(self._redis.hset, self._hash_key(collection), self._field(key), json.dumps(merged))
        return merged

    def delete(self, collection, key):
        self._call(self._redis.hdel, self._hash_key(collection), self._field(key))
