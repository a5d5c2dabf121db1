"""
记录存储适配层：两段式主键（分区 + jobId）的键值表，提供 get / scan / put / update / delete。
- memory：进程内，默认，用于开发与测试。
- redis：每个集合一个 hash，需 REDIS_URL。
"""
from .base import AnyOf, Contains, Equals, NotEquals, Predicate, RecordStore
from .collections import JOBS, SARKARI_JOBS, partition_attr, record_key
from .memory import MemoryRecordStore
from .registry import get_record_store, reset_record_store

__all__ = [
    "AnyOf",
    "Contains",
    "Equals",
    "NotEquals",
    "Predicate",
    "RecordStore",
    "JOBS",
    "SARKARI_JOBS",
    "partition_attr",
    "record_key",
    "MemoryRecordStore",
    "get_record_store",
    "reset_record_store",
]
