"""
列表/详情读穿缓存 + 变更后失效。

键约定（与历史线上一致）：
- 列表：jobs:{规范化参数 JSON} / sarkari-jobs:{规范化参数 JSON}
- 详情：job:{jobId} / sarkari-job:{jobId}
- 已出结果：sarkari-jobs:results（位于政府岗位列表前缀下，随列表一起清扫）

缓存故障不影响请求：读失败视为未命中，写失败与失效失败只记日志。
"""
from __future__ import annotations

import json
from typing import Any, Callable, Mapping, TypeVar

from loguru import logger

from jobhub.cache import CacheAdapter
from jobhub.core.errors import CacheUnavailable
from jobhub.store import JOBS, SARKARI_JOBS
from .query import normalize_filters

T = TypeVar("T")

LISTING_PREFIX: dict[str, str] = {
    JOBS: "jobs",
    SARKARI_JOBS: "sarkari-jobs",
}
RECORD_PREFIX: dict[str, str] = {
    JOBS: "job",
    SARKARI_JOBS: "sarkari-job",
}
RESULTS_KEY = "sarkari-jobs:results"


def listing_key(collection: str, filters: Mapping[str, Any] | None, page: int, limit: int) -> str:
    """
    列表缓存键：集合前缀 + 规范化参数。
    只保留可识别的非空过滤键，page/limit 统一为 int，按键名排序序列化，
    参数顺序或 "1"/1 的差异不会产生不同的键。
    """
    params: dict[str, Any] = dict(normalize_filters(collection, filters))
    params["page"] = int(page)
    params["limit"] = int(limit)
    body = json.dumps(params, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return f"{LISTING_PREFIX[collection]}:{body}"


def record_cache_key(collection: str, job_id: str) -> str:
    return f"{RECORD_PREFIX[collection]}:{job_id}"


class ListingCache:
    """包装一个 CacheAdapter，提供读穿与失效；无锁，并发未命中时后写覆盖先写。"""

    def __init__(self, cache: CacheAdapter):
        self.cache = cache

    def _get(self, key: str) -> Any | None:
        try:
            raw = self.cache.get(key)
        except CacheUnavailable as e:
            logger.warning("cache get failed for {}, treating as miss: {}", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("corrupt cache entry {}, treating as miss", key)
            return None

    def _set(self, key: str, value: Any, ttl: int) -> None:
        try:
            self.cache.set_with_ttl(key, json.dumps(value, ensure_ascii=False), ttl)
        except CacheUnavailable as e:
            logger.warning("cache set failed for {}: {}", key, e)

    def read_through(self, key: str, ttl: int, compute: Callable[[], T]) -> T:
        """
        命中直接返回反序列化结果，不调用 compute；未命中调用 compute 并写入缓存。
        compute 抛出的异常原样向上传播且不写缓存；compute 返回 None（未找到）也不缓存。
        """
        cached = self._get(key)
        if cached is not None:
            return cached
        value = compute()
        if value is not None:
            self._set(key, value, ttl)
        return value

    def invalidate_record(self, collection: str, job_id: str) -> None:
        key = record_cache_key(collection, job_id)
        try:
            self.cache.delete(key)
        except CacheUnavailable as e:
            logger.warning("failed to invalidate {}: {}", key, e)

    def invalidate_collection_listings(self, collection: str) -> int:
        """
        前缀清扫：删除该集合所有列表缓存（任意过滤组合都可能包含被修改的记录）。
        清扫非原子，期间读者可能看到部分失效；失败只记日志，残留条目随 TTL 过期。
        """
        prefix = f"{LISTING_PREFIX[collection]}:"
        try:
            removed = self.cache.delete_by_prefix(prefix)
        except CacheUnavailable as e:
            logger.warning("failed to sweep {}* listing cache: {}", prefix, e)
            return 0
        logger.debug("swept {} listing cache entries under {}", removed, prefix)
        return removed

    def invalidate_after_mutation(self, collection: str, job_ids: list[str] | tuple[str, ...] = ()) -> None:
        """变更成功后调用：先删详情键，再清扫列表前缀。"""
        for job_id in job_ids:
            self.invalidate_record(collection, job_id)
        self.invalidate_collection_listings(collection)
