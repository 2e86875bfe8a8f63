"""API routes package."""

from .crawl_routes import router as crawl_router, current_job_service, get_job_service, get_job_store
from .health_routes import router as health_router

__all__ = ["crawl_router", "health_router", "current_job_service", "get_job_service", "get_job_store"]
