"""
记录存储抽象：按 (分区值, jobId) 两段式主键存取，另提供全表扫描 + 谓词过滤。

存储没有二级索引：按 jobId 点查、按条件列表都走 scan。所有后端失败统一抛 StoreUnavailable。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Union

RecordKey = tuple[str, str]  # (partition, jobId)


@dataclass(frozen=True)
class Equals:
    """属性等于给定值；属性缺失不匹配。"""
    attr: str
    value: Any

    def matches(self, item: dict[str, Any]) -> bool:
        return self.attr in item and item[self.attr] == self.value


@dataclass(frozen=True)
class NotEquals:
    """属性不等于给定值；属性缺失视为匹配。"""
    attr: str
    value: Any

    def matches(self, item: dict[str, Any]) -> bool:
        return item.get(self.attr) != self.value


@dataclass(frozen=True)
class Contains:
    """字符串属性做子串包含（区分大小写）；列表属性做成员包含。"""
    attr: str
    value: str

    def matches(self, item: dict[str, Any]) -> bool:
        actual = item.get(self.attr)
        if isinstance(actual, str):
            return self.value in actual
        if isinstance(actual, (list, tuple, set)):
            return self.value in actual
        return False


@dataclass(frozen=True)
class AnyOf:
    """OR 组：任一子条件成立即匹配。"""
    conditions: tuple["Condition", ...]

    def matches(self, item: dict[str, Any]) -> bool:
        return any(c.matches(item) for c in self.conditions)


Condition = Union[Equals, NotEquals, Contains, AnyOf]


@dataclass(frozen=True)
class Predicate:
    """条件的 AND 组合；空谓词匹配全部记录。"""
    conditions: tuple[Condition, ...] = field(default_factory=tuple)

    def and_(self, condition: Condition) -> "Predicate":
        return Predicate(self.conditions + (condition,))

    def matches(self, item: dict[str, Any]) -> bool:
        return all(c.matches(item) for c in self.conditions)


class RecordStore(ABC):
    """记录存储接口：各集合按 partition 属性 + jobId 组成主键。"""

    @abstractmethod
    def get(self, collection: str, key: RecordKey) -> dict[str, Any] | None:
        """按完整主键读取；不存在返回 None。"""
        ...

    @abstractmethod
    def scan(self, collection: str, predicate: Predicate) -> list[dict[str, Any]]:
        """全表扫描，返回所有满足谓词的记录（无序）。"""
        ...

    @abstractmethod
    def put(self, collection: str, item: dict[str, Any]) -> None:
        """写入或覆盖一条记录。"""
        ...

    @abstractmethod
    def update(self, collection: str, key: RecordKey, delta: dict[str, Any]) -> dict[str, Any]:
        """按主键合并更新属性，返回更新后的完整记录。"""
        ...

    @abstractmethod
    def delete(self, collection: str, key: RecordKey) -> None:
        """按主键删除；不存在时不报错。"""
        ...
