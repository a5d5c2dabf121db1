"""
简历 vs 职位匹配结果的数据边界。

外部打分服务（LLM）只允许返回 CompatibilityAnalysis 结构；字段名与前端约定一致（camelCase）。
"""
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ImprovementPair(BaseModel):
    """改写建议：原句 → 建议改写。"""
    before: str = Field(..., description="简历原句")
    after: str = Field(..., description="建议改写")


Improvement = Union[str, ImprovementPair]


class CompatibilityAnalysis(BaseModel):
    """简历与职位的匹配分析（LLM 输出或本地回退），总分 0–100。"""
    model_config = ConfigDict(populate_by_name=True)

    compatibility_score: int = Field(..., alias="compatibilityScore", description="综合匹配分 0–100")
    strengths: list[str] = Field(default_factory=list, description="与职位匹配的优势，3–5 条")
    weaknesses: list[str] = Field(default_factory=list, description="不足之处，2–4 条")
    improvements: list[Improvement] = Field(default_factory=list, description="改进建议，纯文本或 before/after")
    matching_skills: list[str] = Field(default_factory=list, alias="matchingSkills", description="简历中与职位要求匹配的技能")
    missing_skills: list[str] = Field(default_factory=list, alias="missingSkills", description="职位要求但简历缺失的技能")

    @field_validator("compatibility_score", mode="before")
    @classmethod
    def _clamp_score(cls, v: Any) -> int:
        # 模型偶尔返回 "85"、85.5、超出范围的值或 1e999
        try:
            score = round(float(v))
        except (TypeError, ValueError, OverflowError):
            raise ValueError(f"compatibilityScore 不是有限数字: {v!r}") from None
        return max(0, min(100, score))

    @field_validator("strengths", "weaknesses", "matching_skills", "missing_skills", mode="before")
    @classmethod
    def _str_list(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        return [str(x).strip() for x in v if str(x).strip()]

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class AnalysisOutcome(BaseModel):
    """analyze 的返回：分析结果 + 来源；回退时 error 给出简短原因。"""
    analysis: CompatibilityAnalysis
    source: Literal["llm", "fallback"] = "llm"
    error: Optional[str] = None


class SuggestedJob(BaseModel):
    """按技能重叠排序的备选职位（精简字段）。"""
    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., alias="jobId")
    role: Optional[str] = None
    company_name: Optional[str] = Field(None, alias="companyName")
    location: Optional[str] = None
    match_score: int = Field(0, alias="matchScore", description="命中技能的标签数")


class AnalyzeCvRequest(BaseModel):
    """POST /api/v1/ai/analyze-cv 请求。"""
    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., alias="jobId", min_length=1, description="目标职位 jobId")
    cv_key: str = Field(..., alias="cvKey", min_length=1, description="简历文件在文档存储中的相对路径")


class AnalyzeCvResponse(BaseModel):
    """POST /api/v1/ai/analyze-cv 响应。"""
    model_config = ConfigDict(populate_by_name=True)

    analysis: dict[str, Any] = Field(default_factory=dict, description="CompatibilityAnalysis（camelCase）")
    suggested_jobs: list[dict[str, Any]] = Field(default_factory=list, alias="suggestedJobs")
    source: Literal["llm", "fallback"] = "llm"
    error: Optional[str] = None
