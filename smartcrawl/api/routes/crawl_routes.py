"""Crawl Routes - 잡 제출 / 상태 조회

HTTP Layer는 서비스로 요청을 위임하는 Translator 역할만 수행합니다.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from smartcrawl.core.exceptions import JobNotFoundException, ValidationException
from smartcrawl.core.logging import logger
from smartcrawl.crawlers import CrawlOrchestrator
from smartcrawl.schemas.crawl_schema import (
    CrawlRequest,
    CrawlSubmitResponse,
    JobStatusResponse,
)
from smartcrawl.services import CrawlJobService, JobRecord, JobStatus, JobStore

router = APIRouter(tags=["crawl"])

# 싱글톤 서비스
_job_store: Optional[JobStore] = None
_job_service: Optional[CrawlJobService] = None


def get_job_store() -> JobStore:
    """JobStore 싱글톤"""
    global _job_store
    if _job_store is None:
        _job_store = JobStore()
    return _job_store


def get_job_service(store: JobStore = Depends(get_job_store)) -> CrawlJobService:
    """CrawlJobService 싱글톤"""
    global _job_service
    if _job_service is None:
        _job_service = CrawlJobService(store=store, crawler=CrawlOrchestrator())
    return _job_service


def current_job_service() -> Optional[CrawlJobService]:
    """이미 생성된 CrawlJobService (없으면 None)"""
    return _job_service


def to_status_response(record: JobRecord) -> JobStatusResponse:
    data = None
    if record.status is JobStatus.COMPLETED and record.result is not None:
        data = record.result.to_json_dict()
    error = record.error_message if record.status is JobStatus.FAILED else None
    return JobStatusResponse(job_id=record.id, status=record.status.value, data=data, error=error)


@router.post("/crawl", response_model=CrawlSubmitResponse, response_model_by_alias=True)
async def submit_crawl(
    request: Optional[CrawlRequest] = Body(None),
    service: CrawlJobService = Depends(get_job_service),
):
    """크롤 잡 제출 - 잡 ID 즉시 반환 (본문 누락도 url 누락과 같이 400)"""
    try:
        job_id = await service.submit(request.url if request is not None else None)
    except ValidationException as e:
        logger.warning(f"[API] Input validation failed: {e}")
        reason = e.details.get("reason", e.message)
        return JSONResponse(status_code=400, content={"error": reason})

    return CrawlSubmitResponse(job_id=job_id)


@router.get(
    "/status/{job_id}",
    response_model=JobStatusResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def get_status(
    job_id: str,
    service: CrawlJobService = Depends(get_job_service),
):
    """잡 상태 조회"""
    try:
        record = await service.get(job_id)
    except JobNotFoundException:
        return JSONResponse(status_code=404, content={"error": "Job not found"})

    return to_status_response(record)
