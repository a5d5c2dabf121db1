"""
打分后端：外部生成式服务的统一接口 score(prompt) → CompatibilityAnalysis。
- pydantic_ai：PydanticAI Agent + LiteLLM 模型，类型安全边界（默认）。
- litellm：LiteLLM 原始文本 + JSON 解析。
"""
from .base import ScoringBackend
from .registry import get_scoring_backend

__all__ = ["ScoringBackend", "get_scoring_backend"]
