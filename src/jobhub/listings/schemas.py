"""
职位与政府岗位的数据模型。

存储中的记录是 camelCase 的 dict（与前端、历史数据一致），模型字段用 snake_case + camelCase 别名，
两种写法都能填充；写入存储前统一 model_dump(by_alias=True)。
"""
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

JobStatus = Literal["active", "expired"]
SarkariStatus = Literal["active", "result-out", "closed"]

# 创建时必填字段（按校验顺序，缺失时报第一个）
JOB_REQUIRED_FIELDS = (
    "role",
    "companyName",
    "location",
    "salary",
    "jobDescription",
    "originalLink",
    "category",
    "expiresOn",
)
SARKARI_REQUIRED_FIELDS = ("postName", "organization", "officialWebsite", "notificationLink")


def split_csv(value: Any) -> list[str]:
    """批量导入/表单里的逗号分隔字符串（或数字，如 batch=2025）→ 去空白后的列表。"""
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        # 表格导入的数字单元格（薪资、日期序列号等）按字符串保存
        coerce_numbers_to_str=True,
    )


class Job(_CamelModel):
    """私企职位，分区属性为 category。"""
    job_id: Optional[str] = Field(None, description="全局唯一标识（跨分类唯一）")
    category: Optional[str] = Field(None, description="分类，物理分区键")
    role: Optional[str] = Field(None, description="职位名称")
    company_name: Optional[str] = Field(None, description="公司名称")
    company_logo: Optional[str] = Field(None, description="公司 logo 地址")
    location: Optional[str] = Field(None, description="工作地点")
    salary: Optional[str] = Field(None, description="薪资描述")
    job_description: Optional[str] = Field(None, description="职位描述全文")
    original_link: Optional[str] = Field(None, description="外部投递链接")
    tags: list[str] = Field(default_factory=list, description="技能/标签")
    batch: list[str] = Field(default_factory=list, description="适用毕业年份，如 2025")
    posted_on: Optional[str] = Field(None, description="发布时间 ISO-8601")
    expires_on: Optional[str] = Field(None, description="截止时间")
    status: JobStatus = Field("active", description="active | expired")
    experience: Optional[str] = Field(None, description="经验要求")

    @field_validator("tags", "batch", mode="before")
    @classmethod
    def _split(cls, v: Any) -> list[str]:
        return split_csv(v)


class ImportantDates(_CamelModel):
    application_start: Optional[str] = None
    application_end: Optional[str] = None
    exam_date: Optional[str] = None


class GovernmentJob(_CamelModel):
    """政府岗位（Sarkari），分区属性为 organization。"""
    job_id: Optional[str] = Field(None, description="全局唯一标识")
    organization: Optional[str] = Field(None, description="招聘机构，物理分区键")
    post_name: Optional[str] = Field(None, description="岗位名称")
    advertisement_no: Optional[str] = Field(None, description="公告编号")
    important_dates: Optional[ImportantDates] = Field(None, description="报名开始/截止、考试日期")
    application_fee: Optional[str] = None
    vacancy_details: Optional[str] = None
    eligibility: Optional[str] = None
    official_website: Optional[str] = None
    notification_link: Optional[str] = None
    apply_link: Optional[str] = None
    result_link: Optional[str] = None
    created_at: Optional[str] = Field(None, description="创建时间 ISO-8601")
    status: SarkariStatus = Field("active", description="active | result-out | closed")


class PaginationInfo(_CamelModel):
    current_page: int
    total_pages: int
    total_jobs: int
    has_next: bool
    has_prev: bool


class SearchResult(BaseModel):
    """查询结果：jobs 为当前页的原始记录（camelCase），pagination 为分页元数据。"""
    jobs: list[dict[str, Any]] = Field(default_factory=list)
    pagination: PaginationInfo

    def to_payload(self) -> dict[str, Any]:
        return {"jobs": self.jobs, "pagination": self.pagination.model_dump(by_alias=True)}


def to_record(model: BaseModel) -> dict[str, Any]:
    """模型 → 存储记录（camelCase，去掉 None）。"""
    return model.model_dump(by_alias=True, exclude_none=True)
