"""
公共 fixture：内存记录存储 + 内存缓存组装的 ListingService，测试之间互不共享状态。
"""
import pytest

from jobhub.cache import MemoryCache
from jobhub.listings.cache import ListingCache
from jobhub.listings.service import ListingService
from jobhub.store import JOBS, SARKARI_JOBS, MemoryRecordStore


def job_record(job_id: str, **overrides) -> dict:
    """构造一条已入库形态的私企职位（camelCase）。"""
    item = {
        "jobId": job_id,
        "category": "Engineering",
        "role": f"Engineer {job_id}",
        "companyName": "Acme",
        "location": "Bangalore",
        "salary": "10 LPA",
        "jobDescription": "Build things",
        "originalLink": "https://example.com/apply",
        "tags": [],
        "batch": ["2025"],
        "postedOn": "2024-01-01T00:00:00Z",
        "expiresOn": "2024-12-31",
        "status": "active",
    }
    item.update(overrides)
    return item


def sarkari_record(job_id: str, **overrides) -> dict:
    item = {
        "jobId": job_id,
        "organization": "UPSC",
        "postName": f"Post {job_id}",
        "officialWebsite": "https://upsc.gov.in",
        "notificationLink": "https://upsc.gov.in/notice.pdf",
        "createdAt": "2024-01-01T00:00:00Z",
        "status": "active",
    }
    item.update(overrides)
    return item


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def cache():
    return MemoryCache()


@pytest.fixture
def service(store, cache):
    return ListingService(store, ListingCache(cache))


@pytest.fixture
def seed(store):
    """seed(jobs=[...], sarkari=[...]) 直接写入存储，绕过服务层。"""
    def _seed(jobs=(), sarkari=()):
        for item in jobs:
            store.put(JOBS, item)
        for item in sarkari:
            store.put(SARKARI_JOBS, item)
    return _seed
