"""API 엔드포인트 패키지 - export only."""

from .routes import crawl_router, current_job_service, get_job_service, get_job_store, health_router

__all__ = ["crawl_router", "health_router", "current_job_service", "get_job_service", "get_job_store"]
