"""备选职位排序：按职位标签与已匹配技能的重叠数倒序，纯本地、确定性。"""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from .schemas import SuggestedJob

MAX_SUGGESTIONS = 5


def match_count(tags: Iterable[Any], tokens: list[str]) -> int:
    """命中数 = 至少包含一个技能词（不区分大小写、子串）的标签数；每个标签最多计 1 次。"""
    count = 0
    for tag in tags or []:
        tag_lower = str(tag).lower()
        if any(tok in tag_lower for tok in tokens):
            count += 1
    return count


def rank_alternatives(
    matched_skill_tokens: Iterable[str],
    exclude_id: str | None,
    candidate_pool: Iterable[Mapping[str, Any]],
    limit: int = MAX_SUGGESTIONS,
) -> list[SuggestedJob]:
    """
    排除当前职位后按命中数倒序，同分保持候选池原顺序（稳定排序），取前 limit 条。
    空白技能词忽略（空串是任何标签的子串）。
    """
    tokens = [str(t).strip().lower() for t in matched_skill_tokens or [] if str(t).strip()]
    scored: list[tuple[int, Mapping[str, Any]]] = []
    for job in candidate_pool:
        if exclude_id is not None and job.get("jobId") == exclude_id:
            continue
        scored.append((match_count(job.get("tags") or [], tokens), job))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [
        SuggestedJob(
            job_id=str(job.get("jobId") or ""),
            role=job.get("role"),
            company_name=job.get("companyName"),
            location=job.get("location"),
            match_score=count,
        )
        for count, job in scored[:limit]
    ]
