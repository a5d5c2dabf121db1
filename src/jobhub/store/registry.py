"""根据配置返回当前使用的记录存储（进程内单例）。"""
from jobhub.core.config import record_store_backend, redis_url
from .base import RecordStore
from .memory import MemoryRecordStore

_store: RecordStore | None = None


def get_record_store() -> RecordStore:
    """
    JOBHUB_RECORD_STORE=redis 且配置了 REDIS_URL 时使用 RedisRecordStore，
    否则使用进程内 MemoryRecordStore。
    """
    global _store
    if _store is None:
        if record_store_backend() == "redis" and redis_url():
            from .redis_store import RedisRecordStore
            _store = RedisRecordStore(redis_url())
        else:
            _store = MemoryRecordStore()
    return _store


def reset_record_store() -> None:
    """丢弃单例，下次 get_record_store 重新按配置创建（测试用）。"""
    global _store
    _store = None
