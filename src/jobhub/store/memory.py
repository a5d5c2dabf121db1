"""进程内记录存储：单机开发与测试使用，不持久化。"""
import copy
from threading import Lock
from typing import Any

from jobhub.core.errors import StoreUnavailable
from .base import Predicate, RecordKey, RecordStore
from .collections import partition_attr, record_key


class MemoryRecordStore(RecordStore):
    """
    每个集合一个 dict：(partition, jobId) -> 记录。
    读写都返回深拷贝，调用方修改返回值不会影响存储内容。
    """

    def __init__(self):
        self._tables: dict[str, dict[RecordKey, dict[str, Any]]] = {}
        self._lock = Lock()

    def _table(self, collection: str) -> dict[RecordKey, dict[str, Any]]:
        partition_attr(collection)  # 校验集合名
        return self._tables.setdefault(collection, {})

    def get(self, collection, key):
        with self._lock:
            item = self._table(collection).get(tuple(key))
            return copy.deepcopy(item) if item is not None else None

    def scan(self, collection, predicate: Predicate):
        with self._lock:
            items = list(self._table(collection).values())
        return [copy.deepcopy(i) for i in items if predicate.matches(i)]

    def put(self, collection, item):
        key = record_key(collection, item)
        if not all(key):
            raise StoreUnavailable(f"{collection}: 记录缺少主键 {partition_attr(collection)}/jobId")
        with self._lock:
            self._table(collection)[key] = copy.deepcopy(item)

    def update(self, collection, key, delta):
        with self._lock:
            table = self._table(collection)
            current = table.get(tuple(key))
            if current is None:
                # 与 DynamoDB UpdateItem 一致：主键不存在时创建
                part_attr = partition_attr(collection)
                current = {part_attr: key[0], "jobId": key[1]}
            merged = {**current, **copy.deepcopy(delta)}
            table[tuple(key)] = merged
            return copy.deepcopy(merged)

    def delete(self, collection, key):
        with self._lock:
            self._table(collection).pop(tuple(key), None)

    def clear(self) -> None:
        """清空所有集合（测试用）。"""
        with self._lock:
            self._tables.clear()
