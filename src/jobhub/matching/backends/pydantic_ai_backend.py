"""
PydanticAI 打分后端：output_type 定义数据边界，模型只返回 CompatibilityAnalysis。
模型通过 LiteLLM 统一切换（gemini/openai/deepseek/anthropic 等）。
"""
from __future__ import annotations

from jobhub.core.config import get_default_model
from jobhub.matching.prompt import SYSTEM_PROMPT
from jobhub.matching.schemas import CompatibilityAnalysis
from .base import ScoringBackend


def _model():
    from pydantic_ai_litellm import LiteLLMModel
    return LiteLLMModel(model_name=get_default_model())


def _compatibility_agent():
    from pydantic_ai import Agent
    return Agent(
        model=_model(),
        output_type=CompatibilityAnalysis,
        system_prompt=SYSTEM_PROMPT,
    )


class PydanticAIScoringBackend(ScoringBackend):
    name = "pydantic_ai"

    def __init__(self):
        self._agent = None

    def score(self, prompt: str) -> CompatibilityAnalysis:
        # 懒加载，避免未配置 key 时启动即初始化模型客户端
        if self._agent is None:
            self._agent = _compatibility_agent()
        result = self._agent.run_sync(prompt)
        return result.output
