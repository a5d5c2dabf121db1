"""
简历匹配：简历 vs 职位打分（外部 LLM + 本地确定性回退）与备选职位排序。
"""
from .schemas import (
    CompatibilityAnalysis,
    ImprovementPair,
    AnalysisOutcome,
    SuggestedJob,
    AnalyzeCvRequest,
    AnalyzeCvResponse,
)
from .parsing import parse_analysis
from .prompt import build_prompt
from .scoring import analyze, fallback_analysis
from .ranking import rank_alternatives
from .pipeline import analyze_cv, analyze_cv_for_job, analyze_cv_text

__all__ = [
    "CompatibilityAnalysis",
    "ImprovementPair",
    "AnalysisOutcome",
    "SuggestedJob",
    "AnalyzeCvRequest",
    "AnalyzeCvResponse",
    "parse_analysis",
    "build_prompt",
    "analyze",
    "fallback_analysis",
    "rank_alternatives",
    "analyze_cv",
    "analyze_cv_for_job",
    "analyze_cv_text",
]
