"""헬스 체크 엔드포인트"""
from datetime import datetime

from fastapi import APIRouter, Depends

from smartcrawl import __version__
from smartcrawl.api.routes.crawl_routes import get_job_store
from smartcrawl.schemas.crawl_schema import HealthResponse
from smartcrawl.services import JobStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(store: JobStore = Depends(get_job_store)):
    """
    헬스 체크 엔드포인트

    - 서버 상태
    - 상태별 잡 개수
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(),
        version=__version__,
        jobs=await store.counts(),
    )
