"""FastAPI 앱 팩토리

Usage:
    uvicorn smartcrawl.app:app --port 3000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartcrawl.api import crawl_router, current_job_service, health_router
from smartcrawl.core.config import settings
from smartcrawl.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"[App] Starting {settings.api_title} v{settings.api_version} "
        f"(headless={settings.crawler_headless}, retries={settings.crawler_max_retries})"
    )
    yield
    # 실행 중인 잡은 끊지 않고 끝날 때까지 기다린다
    service = current_job_service()
    if service is not None and service.active_tasks:
        logger.info(f"[App] Waiting for {service.active_tasks} running job(s)...")
        await service.wait_all()
    logger.info("[App] Shutdown complete")


def create_app() -> FastAPI:
    """앱 생성 - CORS, 헬스/잡 라우터 등록"""
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    for router in (health_router, crawl_router):
        app.include_router(router)

    return app


app = create_app()
