"""
职位列表服务：公开读接口（读穿缓存）+ 管理端写接口（写后失效）。

写路径：jobId 不是物理主键的分区部分，更新/删除前先按 jobId 扫描拿到分区值，再按完整主键操作。
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from loguru import logger
from pydantic import ValidationError

from jobhub.core.config import default_page_size, listing_ttl, record_ttl, results_ttl
from jobhub.core.errors import NotFound, ValidationFailure
from jobhub.store import JOBS, SARKARI_JOBS, NotEquals, RecordStore
from .cache import RESULTS_KEY, ListingCache, listing_key, record_cache_key
from .query import build_predicate, find_by_id, get_spec, scan_sorted, search, sort_newest_first
from .schemas import (
    JOB_REQUIRED_FIELDS,
    SARKARI_REQUIRED_FIELDS,
    GovernmentJob,
    ImportantDates,
    Job,
    to_record,
)

MODELS = {
    JOBS: Job,
    SARKARI_JOBS: GovernmentJob,
}

# 批量写入每批条数（与 DynamoDB BatchWrite 上限一致）
BULK_CHUNK_SIZE = 25

REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    JOBS: JOB_REQUIRED_FIELDS,
    SARKARI_JOBS: SARKARI_REQUIRED_FIELDS,
}

# 政府岗位批量导入时平铺在行里的日期列
_DATE_COLUMNS = {
    "applicationStart": "application_start",
    "applicationEnd": "application_end",
    "examDate": "exam_date",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _as_validation_failure(e: ValidationError) -> ValidationFailure:
    first = e.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ())) or None
    return ValidationFailure(f"{field or 'record'}: {first.get('msg')}", field=field)


def _missing_field(collection: str, data: Mapping[str, Any]) -> str | None:
    for name in REQUIRED_FIELDS[collection]:
        if not data.get(name):
            return name
    return None


class ListingService:
    """store 为记录存储，cache 为读穿/失效包装；二者都可在测试中替换为内存实现。"""

    def __init__(self, store: RecordStore, cache: ListingCache):
        self.store = store
        self.cache = cache

    # ---------- 读 ----------

    def _list(self, collection: str, filters: Mapping[str, Any] | None, page: int, limit: int | None) -> dict[str, Any]:
        limit = limit or default_page_size()
        key = listing_key(collection, filters, page, limit)
        return self.cache.read_through(
            key,
            listing_ttl(),
            lambda: search(self.store, collection, filters, page, limit).to_payload(),
        )

    def _get(self, collection: str, job_id: str) -> dict[str, Any]:
        def compute() -> dict[str, Any] | None:
            matches = find_by_id(self.store, collection, job_id)
            return matches[0] if matches else None

        item = self.cache.read_through(record_cache_key(collection, job_id), record_ttl(), compute)
        if item is None:
            raise NotFound(collection, job_id)
        return item

    def list_jobs(self, filters: Mapping[str, Any] | None = None, page: int = 1, limit: int | None = None) -> dict[str, Any]:
        """按分类/地点/毕业年份/标签/关键词过滤在招职位，返回 {jobs, pagination}。"""
        return self._list(JOBS, filters, page, limit)

    def get_job_by_id(self, job_id: str) -> dict[str, Any]:
        return self._get(JOBS, job_id)

    def list_sarkari_jobs(self, filters: Mapping[str, Any] | None = None, page: int = 1, limit: int | None = None) -> dict[str, Any]:
        return self._list(SARKARI_JOBS, filters, page, limit)

    def get_sarkari_job_by_id(self, job_id: str) -> dict[str, Any]:
        return self._get(SARKARI_JOBS, job_id)

    def list_sarkari_results(self) -> list[dict[str, Any]]:
        """status=result-out 的政府岗位，按创建时间倒序，不分页。"""
        return self.cache.read_through(
            RESULTS_KEY,
            results_ttl(),
            lambda: scan_sorted(self.store, SARKARI_JOBS, status="result-out"),
        )

    def active_jobs(self, exclude_id: str | None = None) -> list[dict[str, Any]]:
        """全部在招职位（不走缓存），供简历匹配的备选职位排序使用；exclude_id 在扫描时排除。"""
        predicate = build_predicate(JOBS, None)
        if exclude_id:
            predicate = predicate.and_(NotEquals("jobId", exclude_id))
        return sort_newest_first(JOBS, self.store.scan(JOBS, predicate))

    # ---------- 写 ----------

    def _build_job(self, data: Mapping[str, Any]) -> dict[str, Any]:
        payload = {
            **data,
            "jobId": str(uuid.uuid4()),
            "postedOn": _now_iso(),
            "status": "active",
        }
        return to_record(Job.model_validate(payload))

    def _build_sarkari_job(self, data: Mapping[str, Any]) -> dict[str, Any]:
        payload = dict(data)
        dates = {attr: payload.pop(col) for col, attr in _DATE_COLUMNS.items() if col in payload}
        if dates and not payload.get("importantDates"):
            payload["importantDates"] = ImportantDates(**dates)
        payload.update({"jobId": str(uuid.uuid4()), "createdAt": _now_iso(), "status": "active"})
        return to_record(GovernmentJob.model_validate(payload))

    def _build(self, collection: str, data: Mapping[str, Any]) -> dict[str, Any]:
        missing = _missing_field(collection, data)
        if missing:
            raise ValidationFailure(f"{missing} is required", field=missing)
        try:
            if collection == JOBS:
                return self._build_job(data)
            return self._build_sarkari_job(data)
        except ValidationError as e:
            raise _as_validation_failure(e) from e

    def _create(self, collection: str, data: Mapping[str, Any]) -> dict[str, Any]:
        item = self._build(collection, data)
        self.store.put(collection, item)
        self.cache.invalidate_after_mutation(collection, [item["jobId"]])
        logger.info("created {} {}", collection, item["jobId"])
        return item

    def _bulk_create(self, collection: str, rows: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        items: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []
        # 行内 tags/batch 可为逗号分隔字符串或数字，由模型校验器统一拆分
        for index, row in enumerate(rows, start=1):
            try:
                items.append(self._build(collection, row))
            except ValidationFailure as e:
                errors.append({"row": index, "error": str(e)})
        written = 0
        try:
            for i in range(0, len(items), BULK_CHUNK_SIZE):
                for item in items[i:i + BULK_CHUNK_SIZE]:
                    self.store.put(collection, item)
                    written += 1
        finally:
            # 部分写入后失败也要失效，已写入的记录必须对列表可见
            if written:
                self.cache.invalidate_after_mutation(collection)
        logger.info("bulk created {} {} records, {} rows rejected", written, collection, len(errors))
        return {"successful": written, "errors": len(errors), "errorDetails": errors}

    def _normalize_changes(
        self, collection: str, existing: Mapping[str, Any], changes: dict[str, Any]
    ) -> dict[str, Any]:
        """
        合并后的完整记录按集合模型校验（status 取值、tags/batch 拆分、数字转字符串），
        只返回被修改字段的规范化值；置空的字段原样保留 None。
        """
        try:
            validated = to_record(MODELS[collection].model_validate({**existing, **changes}))
        except ValidationError as e:
            raise _as_validation_failure(e) from e
        return {k: validated.get(k, changes[k]) for k in changes}

    def _update(self, collection: str, job_id: str, delta: Mapping[str, Any]) -> dict[str, Any]:
        matches = find_by_id(self.store, collection, job_id)
        if not matches:
            raise NotFound(collection, job_id)
        existing = matches[0]
        part_attr = get_spec(collection).partition_attr
        # jobId 与分区属性构成主键，不可修改
        changes = {k: v for k, v in delta.items() if k not in ("jobId", part_attr)}
        if not changes:
            return existing
        changes = self._normalize_changes(collection, existing, changes)
        updated = self.store.update(collection, (existing[part_attr], job_id), changes)
        self.cache.invalidate_after_mutation(collection, [job_id])
        logger.info("updated {} {} fields={}", collection, job_id, sorted(changes))
        return updated

    def _delete(self, collection: str, job_id: str) -> int:
        """不存在视为已删除（幂等）；跨分区重复的同 jobId 记录全部删除。"""
        matches = find_by_id(self.store, collection, job_id)
        part_attr = get_spec(collection).partition_attr
        deleted = 0
        try:
            for item in matches:
                self.store.delete(collection, (item[part_attr], job_id))
                deleted += 1
        finally:
            # 未找到也清一次，去掉可能残留的旧缓存
            self.cache.invalidate_after_mutation(collection, [job_id])
        if deleted:
            logger.info("deleted {} {} ({} record(s))", collection, job_id, deleted)
        return deleted

    def create_job(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return self._create(JOBS, data)

    def bulk_create_jobs(self, rows: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        return self._bulk_create(JOBS, rows)

    def update_job(self, job_id: str, delta: Mapping[str, Any]) -> dict[str, Any]:
        return self._update(JOBS, job_id, delta)

    def delete_job(self, job_id: str) -> int:
        return self._delete(JOBS, job_id)

    def create_sarkari_job(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return self._create(SARKARI_JOBS, data)

    def bulk_create_sarkari_jobs(self, rows: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        return self._bulk_create(SARKARI_JOBS, rows)

    def update_sarkari_job(self, job_id: str, delta: Mapping[str, Any]) -> dict[str, Any]:
        return self._update(SARKARI_JOBS, job_id, delta)

    def delete_sarkari_job(self, job_id: str) -> int:
        return self._delete(SARKARI_JOBS, job_id)
