"""根据配置返回当前使用的打分后端。"""
from jobhub.core.config import has_llm_key, scoring_backend
from .base import ScoringBackend

_backends: dict[str, ScoringBackend] = {}


def get_scoring_backend(backend_id: str | None = None) -> ScoringBackend | None:
    """
    backend_id 可选：pydantic_ai（默认）、litellm、heuristic。
    不传则读 JOBHUB_SCORING_BACKEND；未配置任何模型 API Key 或选择 heuristic 时返回 None，调用方直接走本地回退。
    """
    bid = (backend_id or scoring_backend()).strip().lower()
    if bid == "heuristic" or not has_llm_key():
        return None
    if bid != "litellm":
        bid = "pydantic_ai"
    if bid not in _backends:
        if bid == "litellm":
            from .litellm_backend import LiteLLMScoringBackend
            _backends[bid] = LiteLLMScoringBackend()
        else:
            from .pydantic_ai_backend import PydanticAIScoringBackend
            _backends[bid] = PydanticAIScoringBackend()
    return _backends[bid]
