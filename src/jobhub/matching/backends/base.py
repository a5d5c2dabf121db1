"""打分后端抽象：prompt → 结构化匹配分析。"""
from abc import ABC, abstractmethod

from jobhub.matching.schemas import CompatibilityAnalysis


class ScoringBackend(ABC):
    """外部生成式打分服务接口；任意失败直接抛出，由 analyze 统一回退。"""

    name: str = "base"

    @abstractmethod
    def score(self, prompt: str) -> CompatibilityAnalysis:
        ...
