"""Playwright page 설정/보조 함수.

Page 생성 후 라우팅(리소스 차단) 등 공통 설정을 분리합니다.
"""

from __future__ import annotations

from typing import Collection, Optional

from playwright.async_api import Page, Request, Route

from smartcrawl.core.config import settings


def should_block(resource_type: str, blocked: Optional[Collection[str]] = None) -> bool:
    """리소스 타입이 차단 대상인지 (요청마다 독립 판정)"""
    blocked_types = blocked if blocked is not None else settings.crawler_blocked_resource_types
    return resource_type in blocked_types


async def handle_route(route: Route, request: Request) -> None:
    if should_block(request.resource_type):
        await route.abort()
        return
    await route.continue_()


async def configure_page(page: Page) -> Page:
    """기본 타임아웃 + 리소스 차단 라우트 설치"""
    page.set_default_timeout(settings.crawler_navigation_timeout_ms)
    await page.route("**/*", handle_route)
    return page
