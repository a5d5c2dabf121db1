"""
FastAPI 依赖：按配置组装服务单例；测试中用 app.dependency_overrides 替换。
"""
from jobhub.cache import get_cache
from jobhub.ingest.documents import DocumentSource, get_document_source
from jobhub.listings.cache import ListingCache
from jobhub.listings.service import ListingService
from jobhub.matching.backends import ScoringBackend, get_scoring_backend
from jobhub.store import get_record_store

_service: ListingService | None = None


def get_listing_service() -> ListingService:
    global _service
    if _service is None:
        _service = ListingService(get_record_store(), ListingCache(get_cache()))
    return _service


def get_documents() -> DocumentSource:
    return get_document_source()


def get_scorer() -> ScoringBackend | None:
    return get_scoring_backend()


def reset_services() -> None:
    """丢弃服务单例（测试用）。"""
    global _service
    _service = None
