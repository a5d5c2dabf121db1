"""缓存抽象：共享键值缓存，带 TTL；所有后端失败统一抛 CacheUnavailable。"""
from abc import ABC, abstractmethod


class CacheAdapter(ABC):
    """缓存接口：值为已序列化的字符串。"""

    @abstractmethod
    def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    @abstractmethod
    def delete(self, *keys: str) -> int:
        """删除若干键，返回实际删除数量。"""
        ...

    @abstractmethod
    def list_keys(self, prefix: str) -> list[str]:
        """列出以 prefix 开头的所有未过期键。"""
        ...

    def delete_by_prefix(self, prefix: str) -> int:
        """前缀清扫：后端无原生前缀删除时，先 list_keys 再逐批 delete。"""
        keys = self.list_keys(prefix)
        if not keys:
            return 0
        return self.delete(*keys)
