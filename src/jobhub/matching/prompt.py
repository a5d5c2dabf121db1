"""
打分 prompt 构造：只由职位记录与简历文本决定，长度按 token 截断，相同输入得到相同 prompt。
"""
from __future__ import annotations

from typing import Any, Mapping

from jobhub.core.config import prompt_cv_tokens
from jobhub.core.tokens import truncate_to_tokens

# 职位描述 token 上限
DESCRIPTION_TOKENS = 1000

SYSTEM_PROMPT = (
    "You are a recruiter scoring how well a CV fits a job posting. "
    "Respond with a single JSON object only, no prose and no markdown."
)

_TEMPLATE = """Analyze the following CV against this job description and provide a structured response.

JOB DETAILS:
Role: {role}
Company: {company}
Location: {location}
Job Description: {description}
Required Skills/Tags: {tags}

CV CONTENT:
{cv}

Return JSON with exactly these keys:
{{
  "compatibilityScore": <integer 0-100>,
  "strengths": [3-5 key strengths that match the job],
  "weaknesses": [2-4 areas that need improvement],
  "improvements": [3-5 suggestions; each a string or {{"before": "...", "after": "..."}}],
  "matchingSkills": [skills from the CV that match the job requirements],
  "missingSkills": [important required skills missing from the CV]
}}"""


def build_prompt(job: Mapping[str, Any], cv_text: str) -> str:
    tags = job.get("tags") or []
    return _TEMPLATE.format(
        role=job.get("role") or "",
        company=job.get("companyName") or "",
        location=job.get("location") or "",
        description=truncate_to_tokens((job.get("jobDescription") or "").strip(), DESCRIPTION_TOKENS),
        tags=", ".join(tags) if tags else "Not specified",
        cv=truncate_to_tokens((cv_text or "").strip(), prompt_cv_tokens()),
    )
