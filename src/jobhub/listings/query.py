"""
列表查询引擎：过滤条件 → 谓词 → 全表扫描 → 按时间倒序 → 分页。

存储无二级索引，所有条件在一次 scan 中求值；引擎不依赖存储端分页。
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from loguru import logger

from jobhub.core.errors import ValidationFailure
from jobhub.store import (
    JOBS,
    SARKARI_JOBS,
    AnyOf,
    Contains,
    Equals,
    Predicate,
    RecordStore,
)
from jobhub.store.base import Condition
from .schemas import PaginationInfo, SearchResult

DEFAULT_PAGE_SIZE = 15


@dataclass(frozen=True)
class CollectionSpec:
    """集合的查询元数据：可识别的过滤键、排序时间字段、默认可列出状态。"""
    name: str
    partition_attr: str
    timestamp_attr: str
    listable_status: str = "active"
    # 过滤键 -> 由字符串值构造条件；顺序即规范化后的键顺序
    filters: dict[str, Callable[[str], Condition]] = field(default_factory=dict)


JOBS_SPEC = CollectionSpec(
    name=JOBS,
    partition_attr="category",
    timestamp_attr="postedOn",
    filters={
        "category": lambda v: Equals("category", v),
        "location": lambda v: Contains("location", v),
        "batch": lambda v: Contains("batch", v),
        "tags": lambda v: Contains("tags", v),
        "q": lambda v: AnyOf((Contains("role", v), Contains("companyName", v))),
    },
)

SARKARI_JOBS_SPEC = CollectionSpec(
    name=SARKARI_JOBS,
    partition_attr="organization",
    timestamp_attr="createdAt",
    filters={
        "organization": lambda v: Equals("organization", v),
    },
)

SPECS: dict[str, CollectionSpec] = {JOBS: JOBS_SPEC, SARKARI_JOBS: SARKARI_JOBS_SPEC}


def get_spec(collection: str | CollectionSpec) -> CollectionSpec:
    if isinstance(collection, CollectionSpec):
        return collection
    try:
        return SPECS[collection]
    except KeyError:
        raise ValueError(f"未知集合: {collection}") from None


def normalize_filters(collection: str | CollectionSpec, filters: Mapping[str, Any] | None) -> dict[str, str]:
    """只保留可识别且非空的过滤键，值原样转为字符串（区分大小写，不做 strip）。"""
    spec = get_spec(collection)
    filters = filters or {}
    out: dict[str, str] = {}
    for key in spec.filters:
        value = filters.get(key)
        if value is None or value == "":
            continue
        out[key] = str(value)
    return out


def build_predicate(
    collection: str | CollectionSpec,
    filters: Mapping[str, Any] | None,
    status: str | None = None,
) -> Predicate:
    """状态条件恒存在；其余条件按 AND 组合。"""
    spec = get_spec(collection)
    predicate = Predicate((Equals("status", status or spec.listable_status),))
    for key, value in normalize_filters(spec, filters).items():
        predicate = predicate.and_(spec.filters[key](value))
    return predicate


def parse_timestamp(value: Any) -> float:
    """ISO-8601（允许结尾 Z）→ epoch 秒；缺失或无法解析视为 0（排在最旧）。"""
    if value is None or value == "":
        return 0.0
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return 0.0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def sort_newest_first(collection: str | CollectionSpec, items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    按时间字段倒序；同一时间按 jobId 升序。
    scan 返回顺序不固定，先按 jobId 排一次再做稳定排序，保证同一快照下结果确定。
    """
    spec = get_spec(collection)
    ordered = sorted(items, key=lambda i: str(i.get("jobId") or ""))
    ordered.sort(key=lambda i: parse_timestamp(i.get(spec.timestamp_attr)), reverse=True)
    return ordered


def _check_paging(page: int, page_size: int) -> None:
    if page < 1:
        raise ValidationFailure("page must be >= 1", field="page")
    if page_size < 1:
        raise ValidationFailure("limit must be > 0", field="limit")


def paginate(items: list[dict[str, Any]], page: int, page_size: int) -> SearchResult:
    """offset = (page-1)*page_size；越界页返回空列表与正确的分页元数据。"""
    _check_paging(page, page_size)
    total = len(items)
    offset = (page - 1) * page_size
    return SearchResult(
        jobs=items[offset:offset + page_size],
        pagination=PaginationInfo(
            current_page=page,
            total_pages=math.ceil(total / page_size),
            total_jobs=total,
            has_next=offset + page_size < total,
            has_prev=page > 1,
        ),
    )


def scan_sorted(
    store: RecordStore,
    collection: str | CollectionSpec,
    filters: Mapping[str, Any] | None = None,
    status: str | None = None,
) -> list[dict[str, Any]]:
    """全表扫描 + 倒序排序，不分页（如「已出结果」视图）。存储异常原样向上抛出。"""
    spec = get_spec(collection)
    items = store.scan(spec.name, build_predicate(spec, filters, status))
    return sort_newest_first(spec, items)


def search(
    store: RecordStore,
    collection: str | CollectionSpec,
    filters: Mapping[str, Any] | None = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    status: str | None = None,
) -> SearchResult:
    """
    列表查询主入口。
    filters 中未识别的键忽略、缺失的键不加约束；status 不传则用集合默认可列出状态。
    存储失败抛 StoreUnavailable，不回退到旧缓存，也不返回空结果掩盖故障。
    """
    _check_paging(page, page_size)  # 非法参数不触发全表扫描
    items = scan_sorted(store, collection, filters, status)
    return paginate(items, page, page_size)


def find_by_id(store: RecordStore, collection: str | CollectionSpec, job_id: str) -> list[dict[str, Any]]:
    """
    按 jobId 扫描（jobId 不是物理主键的分区部分）。
    正常情况下至多一条；出现多条说明跨分区重复，记录为数据完整性问题，调用方取第一条。
    """
    spec = get_spec(collection)
    matches = store.scan(spec.name, Predicate((Equals("jobId", job_id),)))
    matches.sort(key=lambda m: str(m.get(spec.partition_attr) or ""))
    if len(matches) > 1:
        logger.error(
            "duplicate jobId {} in {} across partitions: {}",
            job_id,
            spec.name,
            [m.get(spec.partition_attr) for m in matches],
        )
    return matches
