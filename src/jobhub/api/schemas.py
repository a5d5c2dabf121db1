"""
管理端请求体与通用响应模型。
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BulkUploadRequest(BaseModel):
    """批量导入：表格已由上传服务解析为行（列名即字段名）。"""
    rows: list[dict[str, Any]] = Field(..., description="待导入的行，tags/batch 可为逗号分隔字符串")


class BulkUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    successful: int = 0
    errors: int = 0
    error_details: list[dict[str, Any]] = Field(default_factory=list, alias="errorDetails")


class MutationResponse(BaseModel):
    """创建/更新返回完整记录；删除返回删除条数。"""
    message: str
    job: Optional[dict[str, Any]] = None
    deleted: Optional[int] = None
