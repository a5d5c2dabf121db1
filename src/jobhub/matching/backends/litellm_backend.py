"""LiteLLM 打分后端：单轮问答拿到文本，再由 parse_analysis 做 JSON 解析与校验。"""
from jobhub.core.llm import ask_ai
from jobhub.matching.parsing import parse_analysis
from jobhub.matching.prompt import SYSTEM_PROMPT
from jobhub.matching.schemas import CompatibilityAnalysis
from .base import ScoringBackend


class LiteLLMScoringBackend(ScoringBackend):
    name = "litellm"

    def __init__(self, model: str | None = None):
        self.model = model

    def score(self, prompt: str) -> CompatibilityAnalysis:
        text = ask_ai(prompt, model=self.model, system=SYSTEM_PROMPT, temperature=0)
        return parse_analysis(text)
