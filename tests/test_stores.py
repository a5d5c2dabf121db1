"""
存储与缓存适配层：内存实现的语义，以及 Redis 实现的错误映射（redis 客户端用 MagicMock 替代）。
"""
from unittest.mock import MagicMock, patch

import pytest
import redis

from conftest import job_record
from jobhub.cache import MemoryCache
from jobhub.cache.redis_cache import RedisCache
from jobhub.core.errors import CacheUnavailable, StoreUnavailable
from jobhub.store import JOBS, AnyOf, Contains, Equals, NotEquals, Predicate
from jobhub.store.redis_store import RedisRecordStore


class TestConditions:
    def test_equals_requires_attribute(self):
        assert Equals("status", "active").matches({"status": "active"})
        assert not Equals("status", None).matches({})

    def test_not_equals_matches_missing(self):
        assert NotEquals("status", "expired").matches({})
        assert not NotEquals("status", "expired").matches({"status": "expired"})

    def test_contains_string_and_list(self):
        assert Contains("location", "Pune").matches({"location": "Pune, MH"})
        assert Contains("tags", "Go").matches({"tags": ["Go", "Rust"]})
        assert not Contains("tags", "G").matches({"tags": ["Go"]})
        assert not Contains("tags", "Go").matches({"tags": None})

    def test_any_of_inside_predicate(self):
        predicate = Predicate((Equals("status", "active"),)).and_(
            AnyOf((Contains("role", "Dev"), Contains("companyName", "Dev")))
        )
        assert predicate.matches({"status": "active", "companyName": "DevCo"})
        assert not predicate.matches({"status": "expired", "companyName": "DevCo"})
        assert Predicate().matches({})


class TestMemoryRecordStore:
    def test_returned_records_are_copies(self, store):
        store.put(JOBS, job_record("a", tags=["Go"]))
        item = store.get(JOBS, ("Engineering", "a"))
        item["tags"].append("Rust")
        assert store.get(JOBS, ("Engineering", "a"))["tags"] == ["Go"]

    def test_put_requires_full_key(self, store):
        with pytest.raises(StoreUnavailable):
            store.put(JOBS, job_record("a", category=""))

    def test_update_merges_and_upserts(self, store):
        store.put(JOBS, job_record("a"))
        merged = store.update(JOBS, ("Engineering", "a"), {"salary": "20 LPA"})
        assert merged["salary"] == "20 LPA"
        assert merged["role"] == "Engineer a"
        created = store.update(JOBS, ("Design", "z"), {"role": "New"})
        assert created == {"category": "Design", "jobId": "z", "role": "New"}

    def test_delete_missing_is_noop(self, store):
        store.delete(JOBS, ("Engineering", "nope"))

    def test_unknown_collection(self, store):
        with pytest.raises(ValueError):
            store.scan("users", Predicate())


class TestMemoryCache:
    def test_ttl_and_prefix_listing(self):
        now = [0.0]
        cache = MemoryCache(clock=lambda: now[0])
        cache.set_with_ttl("jobs:a", "1", 10)
        cache.set_with_ttl("jobs:b", "2", 100)
        cache.set_with_ttl("job:a", "3", 100)
        assert sorted(cache.list_keys("jobs:")) == ["jobs:a", "jobs:b"]
        now[0] = 50
        assert cache.get("jobs:a") is None
        assert cache.list_keys("jobs:") == ["jobs:b"]

    def test_delete_by_prefix(self, cache):
        cache.set_with_ttl("jobs:a", "1", 10)
        cache.set_with_ttl("jobs:b", "1", 10)
        cache.set_with_ttl("sarkari-jobs:a", "1", 10)
        assert cache.delete_by_prefix("jobs:") == 2
        assert cache.delete_by_prefix("jobs:") == 0
        assert cache.get("sarkari-jobs:a") == "1"

    def test_delete_counts_only_existing(self, cache):
        cache.set_with_ttl("k", "v", 10)
        assert cache.delete("k", "missing") == 1


@pytest.fixture
def fake_redis():
    client = MagicMock()
    with patch("redis.from_url", return_value=client):
        yield client


class TestRedisCache:
    def test_error_maps_to_cache_unavailable(self, fake_redis):
        fake_redis.get.side_effect = redis.ConnectionError("refused")
        with pytest.raises(CacheUnavailable):
            RedisCache("redis://localhost:6379/0").get("jobs:a")

    def test_setex_and_namespace(self, fake_redis):
        cache = RedisCache("redis://localhost:6379/0", namespace="jh:")
        cache.set_with_ttl("job:a", "{}", 600)
        fake_redis.setex.assert_called_once_with("jh:job:a", 600, "{}")

    def test_list_keys_escapes_glob_and_strips_namespace(self, fake_redis):
        fake_redis.scan_iter.return_value = iter(["jh:jobs:[x]"])
        cache = RedisCache("redis://localhost:6379/0", namespace="jh:")
        assert cache.list_keys("jobs:[") == ["jobs:[x]"]
        assert fake_redis.scan_iter.call_args.kwargs["match"] == "jh:jobs:\\[*"

    def test_delete_in_chunks(self, fake_redis):
        fake_redis.delete.side_effect = lambda *keys: len(keys)
        cache = RedisCache("redis://localhost:6379/0")
        assert cache.delete(*[f"k{i}" for i in range(1200)]) == 1200
        assert fake_redis.delete.call_count == 3


class TestRedisRecordStore:
    def test_scan_filters_client_side(self, fake_redis):
        import json

        fake_redis.hvals.return_value = [
            json.dumps(job_record("a")),
            json.dumps(job_record("b", status="expired")),
        ]
        store = RedisRecordStore("redis://localhost:6379/0")
        items = store.scan(JOBS, Predicate((Equals("status", "active"),)))
        assert [i["jobId"] for i in items] == ["a"]
        fake_redis.hvals.assert_called_once_with("jobhub:table:jobs")

    def test_error_maps_to_store_unavailable(self, fake_redis):
        fake_redis.hvals.side_effect = redis.TimeoutError("timeout")
        store = RedisRecordStore("redis://localhost:6379/0")
        with pytest.raises(StoreUnavailable):
            store.scan(JOBS, Predicate())
