"""
简历分析流水线：取职位 → 读简历文本 → 打分（失败回退）→ 在全部在招职位中按技能重叠推荐备选。
"""
from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from jobhub.core.errors import StoreUnavailable
from jobhub.ingest.documents import DocumentSource
from jobhub.listings.service import ListingService
from .backends import ScoringBackend
from .ranking import rank_alternatives
from .schemas import AnalyzeCvResponse
from .scoring import analyze


def suggest_jobs(service: ListingService, matched_skills: list[str], current_job_id: str) -> list[dict[str, Any]]:
    """候选池拉取失败只记日志并返回空列表，不影响主分析结果。"""
    try:
        pool = service.active_jobs(exclude_id=current_job_id)
    except StoreUnavailable as e:
        logger.warning("candidate pool fetch failed, returning no suggestions: {}", e)
        return []
    return [s.model_dump(by_alias=True) for s in rank_alternatives(matched_skills, current_job_id, pool)]


def analyze_cv_for_job(
    service: ListingService,
    job: Mapping[str, Any],
    cv_text: str,
    backend: ScoringBackend | None,
) -> AnalyzeCvResponse:
    """对已取到的职位记录做分析；打分与推荐的失败都在内部吸收。"""
    outcome = analyze(job, cv_text, backend)
    suggestions = suggest_jobs(service, outcome.analysis.matching_skills, str(job.get("jobId") or ""))
    return AnalyzeCvResponse(
        analysis=outcome.analysis.to_payload(),
        suggested_jobs=suggestions,
        source=outcome.source,
        error=outcome.error,
    )


def analyze_cv_text(
    service: ListingService,
    job_id: str,
    cv_text: str,
    backend: ScoringBackend | None,
) -> AnalyzeCvResponse:
    """职位不存在抛 NotFound。"""
    return analyze_cv_for_job(service, service.get_job_by_id(job_id), cv_text, backend)


def analyze_cv(
    service: ListingService,
    job_id: str,
    document_ref: str,
    documents: DocumentSource,
    backend: ScoringBackend | None,
) -> AnalyzeCvResponse:
    """
    先确认职位存在再读简历（避免无效职位触发文档转换）。
    简历不存在抛 DocumentNotFound。
    """
    job = service.get_job_by_id(job_id)
    cv_text = documents.read_text(document_ref)
    return analyze_cv_for_job(service, job, cv_text, backend)
