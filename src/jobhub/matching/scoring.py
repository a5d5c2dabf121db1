"""
简历 vs 职位打分：构造 prompt → 外部打分后端 → 校验；任何失败回退到本地确定性结果，不向调用方抛出。
"""
from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from jobhub.core.tokens import count_tokens
from .backends import ScoringBackend
from .prompt import build_prompt
from .schemas import AnalysisOutcome, CompatibilityAnalysis, ImprovementPair

FALLBACK_STRENGTHS = [
    "Strong technical background in relevant technologies",
    "Relevant work experience for the role",
    "Problem-solving skills demonstrated",
]
FALLBACK_WEAKNESSES = [
    "Limited evidence of experience with some of the listed requirements",
    "Achievements are not quantified",
]
FALLBACK_IMPROVEMENTS = [
    "Add specific project details and outcomes",
    "Quantify achievements with numbers and metrics",
    "Tailor the skills section to match the job requirements",
]


def fallback_analysis(job: Mapping[str, Any], cv_text: str) -> CompatibilityAnalysis:
    """
    本地回退：只看职位标签是否出现在简历中（不区分大小写）。
    分数 = 40 + round(55 * 命中数 / 标签数)；职位无标签时为 50。
    """
    tags = [t for t in (job.get("tags") or []) if str(t).strip()]
    cv_lower = (cv_text or "").lower()
    matched = [t for t in tags if str(t).lower() in cv_lower]
    missing = [t for t in tags if t not in matched]
    score = 40 + round(55 * len(matched) / len(tags)) if tags else 50

    improvements: list[str | ImprovementPair] = list(FALLBACK_IMPROVEMENTS)
    if missing:
        current = ", ".join(matched) if matched else "(none listed)"
        improvements.append(
            ImprovementPair(
                before=f"Skills: {current}",
                after=f"Skills: {', '.join(matched + [missing[0]])} (only if you have hands-on {missing[0]} experience)",
            )
        )
    return CompatibilityAnalysis(
        compatibility_score=score,
        strengths=list(FALLBACK_STRENGTHS),
        weaknesses=list(FALLBACK_WEAKNESSES),
        improvements=improvements,
        matching_skills=matched,
        missing_skills=missing,
    )


def _short_error(e: Exception) -> str:
    """简短错误提示，便于排查（不暴露 key 或长栈）。"""
    msg = (str(e).strip() or type(e).__name__)[:120]
    lowered = msg.lower()
    if "key" in lowered or "secret" in lowered or "auth" in lowered:
        msg = type(e).__name__ + " (check the model API key and JOBHUB_DEFAULT_MODEL)"
    return msg


def analyze(job: Mapping[str, Any], cv_text: str, backend: ScoringBackend | None) -> AnalysisOutcome:
    """
    对单条职位做简历匹配分析。
    backend 为 None（未配置 key 或选择 heuristic）直接回退；后端异常、返回非法结构同样回退，
    结果中 source="fallback"，error 给出原因。
    """
    if backend is None:
        return AnalysisOutcome(analysis=fallback_analysis(job, cv_text), source="fallback")
    prompt = build_prompt(job, cv_text)
    logger.debug("scoring job {} with {} ({} prompt tokens)", job.get("jobId"), backend.name, count_tokens(prompt))
    try:
        analysis = backend.score(prompt)
        if not isinstance(analysis, CompatibilityAnalysis):
            analysis = CompatibilityAnalysis.model_validate(analysis)
        return AnalysisOutcome(analysis=analysis, source="llm")
    except Exception as e:
        err = _short_error(e)
        logger.warning("scoring backend {} failed for job {}, using fallback: {}", backend.name, job.get("jobId"), err)
        return AnalysisOutcome(analysis=fallback_analysis(job, cv_text), source="fallback", error=err)
