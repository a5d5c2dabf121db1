"""
职位列表：查询引擎（全表扫描 + 过滤 + 排序 + 分页）、读穿缓存与变更失效、读写服务。
"""
from .schemas import (
    Job,
    GovernmentJob,
    ImportantDates,
    PaginationInfo,
    SearchResult,
)
from .query import search, find_by_id, build_predicate, normalize_filters
from .cache import ListingCache, listing_key, record_cache_key
from .service import ListingService

__all__ = [
    "Job",
    "GovernmentJob",
    "ImportantDates",
    "PaginationInfo",
    "SearchResult",
    "search",
    "find_by_id",
    "build_predicate",
    "normalize_filters",
    "ListingCache",
    "listing_key",
    "record_cache_key",
    "ListingService",
]
