"""
jobhub HTTP 入口：职位/政府岗位公开列表与详情、简历匹配分析、管理端增删改。

读接口走读穿缓存（列表 5 分钟、详情 10 分钟）；写接口成功后删除详情缓存并清扫该集合的全部列表缓存。
存储故障返回 503（可重试），不会用空列表掩盖；缓存与打分服务故障在内部降级。
"""
import io
from typing import Any

from fastapi import Body, Depends, FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger

from jobhub.core.errors import DocumentNotFound, NotFound, StoreUnavailable, ValidationFailure
from jobhub.core.log import setup_logging
from jobhub.ingest.documents import DocumentSource
from jobhub.listings.service import ListingService
from jobhub.matching.backends import ScoringBackend
from jobhub.matching.pipeline import analyze_cv, analyze_cv_for_job
from jobhub.matching.schemas import AnalyzeCvRequest, AnalyzeCvResponse
from jobhub.store import JOBS
from .auth import AdminContext, get_admin
from .deps import get_documents, get_listing_service, get_scorer
from .schemas import BulkUploadRequest, BulkUploadResponse, MutationResponse

setup_logging()

app = FastAPI(
    title="jobhub API",
    description="职位聚合：私企职位与政府岗位列表、详情、简历匹配分析与管理端维护",
    version="0.1.0",
)

API = "/api/v1"


# ---------- 错误映射 ----------

@app.exception_handler(NotFound)
async def _not_found(request: Request, exc: NotFound):
    label = "Job" if exc.collection == JOBS else "Sarkari job"
    return JSONResponse(status_code=404, content={"error": f"{label} not found"})


@app.exception_handler(DocumentNotFound)
async def _document_not_found(request: Request, exc: DocumentNotFound):
    return JSONResponse(status_code=404, content={"error": "CV not found", "cvKey": exc.ref})


@app.exception_handler(ValidationFailure)
async def _validation_failure(request: Request, exc: ValidationFailure):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(StoreUnavailable)
async def _store_unavailable(request: Request, exc: StoreUnavailable):
    logger.error("store unavailable on {} {}: {}", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"error": "Service temporarily unavailable, please retry", "retry": True},
    )


@app.get("/health")
def health():
    """探活。"""
    return {"status": "ok", "service": "jobhub"}


# ---------- 私企职位 ----------

@app.get(f"{API}/jobs")
def list_jobs(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    category: str | None = None,
    location: str | None = None,
    batch: str | None = None,
    tags: str | None = None,
    q: str | None = Query(None, description="按职位名或公司名搜索"),
    service: ListingService = Depends(get_listing_service),
):
    """在招职位列表：分类精确匹配、地点子串、毕业年份/标签包含、关键词搜职位名或公司名；按发布时间倒序分页。"""
    filters = {"category": category, "location": location, "batch": batch, "tags": tags, "q": q}
    return service.list_jobs(filters, page, limit)


@app.get(f"{API}/jobs/{{job_id}}")
def get_job(job_id: str, service: ListingService = Depends(get_listing_service)):
    return service.get_job_by_id(job_id)


# ---------- 政府岗位 ----------

@app.get(f"{API}/sarkari-jobs")
def list_sarkari_jobs(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    organization: str | None = None,
    service: ListingService = Depends(get_listing_service),
):
    return service.list_sarkari_jobs({"organization": organization}, page, limit)


@app.get(f"{API}/sarkari-jobs/{{job_id}}")
def get_sarkari_job(job_id: str, service: ListingService = Depends(get_listing_service)):
    return service.get_sarkari_job_by_id(job_id)


@app.get(f"{API}/sarkari-results")
def list_sarkari_results(service: ListingService = Depends(get_listing_service)):
    """已出结果（status=result-out）的政府岗位，按创建时间倒序。"""
    return service.list_sarkari_results()


# ---------- 简历匹配 ----------

@app.post(f"{API}/ai/analyze-cv", response_model=AnalyzeCvResponse, response_model_exclude_none=True)
def ai_analyze_cv(
    request: AnalyzeCvRequest,
    service: ListingService = Depends(get_listing_service),
    documents: DocumentSource = Depends(get_documents),
    backend: ScoringBackend | None = Depends(get_scorer),
):
    """
    简历 vs 职位分析：cvKey 指向文档存储中已上传的简历。
    打分服务不可用时返回本地回退结果（source=fallback），不会报错。
    """
    return analyze_cv(service, request.job_id, request.cv_key, documents, backend)


@app.post(f"{API}/ai/analyze-cv/upload", response_model=AnalyzeCvResponse, response_model_exclude_none=True)
def ai_analyze_cv_upload(
    job_id: str = Form(..., alias="jobId", description="目标职位 jobId"),
    file: UploadFile = File(..., description="简历文件（PDF/Word/TXT 等）"),
    service: ListingService = Depends(get_listing_service),
    backend: ScoringBackend | None = Depends(get_scorer),
):
    """直接上传简历做分析：MarkItDown 转文本后走同一流水线，文件不落盘。"""
    job = service.get_job_by_id(job_id)
    content = file.file.read()
    if not content:
        raise HTTPException(status_code=400, detail="file is empty")
    try:
        from jobhub.ingest.markitdown_convert import stream_to_markdown

        cv_text = stream_to_markdown(io.BytesIO(content), filename=file.filename or None)
    except Exception as e:
        logger.warning("markitdown conversion failed for {}: {}", file.filename, e)
        raise HTTPException(status_code=400, detail=f"could not read document: {type(e).__name__}")
    return analyze_cv_for_job(service, job, cv_text, backend)


# ---------- 管理端 ----------

@app.post(f"{API}/admin/jobs", status_code=201, response_model=MutationResponse, response_model_exclude_none=True)
def admin_create_job(
    data: dict[str, Any] = Body(...),
    admin: AdminContext = Depends(get_admin),
    service: ListingService = Depends(get_listing_service),
):
    return MutationResponse(message="Job created successfully", job=service.create_job(data))


@app.post(f"{API}/admin/jobs/bulk", response_model=BulkUploadResponse)
def admin_bulk_create_jobs(
    body: BulkUploadRequest,
    admin: AdminContext = Depends(get_admin),
    service: ListingService = Depends(get_listing_service),
):
    result = service.bulk_create_jobs(body.rows)
    return BulkUploadResponse(
        message="Bulk upload completed",
        successful=result["successful"],
        errors=result["errors"],
        error_details=result["errorDetails"],
    )


@app.put(f"{API}/admin/jobs/{{job_id}}", response_model=MutationResponse, response_model_exclude_none=True)
def admin_update_job(
    job_id: str,
    updates: dict[str, Any] = Body(...),
    admin: AdminContext = Depends(get_admin),
    service: ListingService = Depends(get_listing_service),
):
    return MutationResponse(message="Job updated successfully", job=service.update_job(job_id, updates))


@app.delete(f"{API}/admin/jobs/{{job_id}}", response_model=MutationResponse, response_model_exclude_none=True)
def admin_delete_job(
    job_id: str,
    admin: AdminContext = Depends(get_admin),
    service: ListingService = Depends(get_listing_service),
):
    deleted = service.delete_job(job_id)
    message = "Job deleted successfully" if deleted else "Job deleted successfully (not found, already deleted)"
    return MutationResponse(message=message, deleted=deleted)


@app.post(f"{API}/admin/sarkari-jobs", status_code=201, response_model=MutationResponse, response_model_exclude_none=True)
def admin_create_sarkari_job(
    data: dict[str, Any] = Body(...),
    admin: AdminContext = Depends(get_admin),
    service: ListingService = Depends(get_listing_service),
):
    return MutationResponse(message="Sarkari job created successfully", job=service.create_sarkari_job(data))


@app.post(f"{API}/admin/sarkari-jobs/bulk", response_model=BulkUploadResponse)
def admin_bulk_create_sarkari_jobs(
    body: BulkUploadRequest,
    admin: AdminContext = Depends(get_admin),
    service: ListingService = Depends(get_listing_service),
):
    result = service.bulk_create_sarkari_jobs(body.rows)
    return BulkUploadResponse(
        message="Sarkari jobs bulk upload completed",
        successful=result["successful"],
        errors=result["errors"],
        error_details=result["errorDetails"],
    )


@app.put(f"{API}/admin/sarkari-jobs/{{job_id}}", response_model=MutationResponse, response_model_exclude_none=True)
def admin_update_sarkari_job(
    job_id: str,
    updates: dict[str, Any] = Body(...),
    admin: AdminContext = Depends(get_admin),
    service: ListingService = Depends(get_listing_service),
):
    return MutationResponse(
        message="Sarkari job updated successfully",
        job=service.update_sarkari_job(job_id, updates),
    )


@app.delete(f"{API}/admin/sarkari-jobs/{{job_id}}", response_model=MutationResponse, response_model_exclude_none=True)
def admin_delete_sarkari_job(
    job_id: str,
    admin: AdminContext = Depends(get_admin),
    service: ListingService = Depends(get_listing_service),
):
    deleted = service.delete_sarkari_job(job_id)
    message = "Sarkari job deleted successfully" if deleted else "Sarkari job deleted successfully (not found, already deleted)"
    return MutationResponse(message=message, deleted=deleted)
