"""Playwright 렌더링 세션 관리.

잡 1개 = 브라우저 1개. 세션은 공유/풀링하지 않으며
open_session() 컨텍스트를 벗어나는 모든 경로에서 닫힙니다.
"""

from __future__ import annotations

import asyncio
import platform
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from smartcrawl.core.config import settings
from smartcrawl.core.exceptions import SessionLaunchFailure
from smartcrawl.core.logging import logger


def build_launch_args() -> list[str]:
    args: list[str] = [
        "--disable-dev-shm-usage",
        "--disable-gpu",
        "--disable-background-networking",
        "--disable-default-apps",
        "--disable-extensions",
        "--no-first-run",
        "--no-default-browser-check",
    ]

    if platform.system().lower() == "linux":
        args.extend(["--no-sandbox", "--disable-setuid-sandbox"])

    return args


async def _teardown(
    pw: Optional[Playwright],
    browser: Optional[Browser],
    context: Optional[BrowserContext],
) -> None:
    if context is not None:
        try:
            await context.close()
        except Exception as e:
            logger.warning(f"[Playwright] Failed to close context: {type(e).__name__}: {e}")
    if browser is not None:
        try:
            await browser.close()
        except Exception as e:
            logger.warning(f"[Playwright] Failed to close browser: {type(e).__name__}: {e}")
    if pw is not None:
        try:
            await pw.stop()
        except Exception as e:
            logger.warning(f"[Playwright] Failed to stop playwright: {type(e).__name__}: {e}")


@asynccontextmanager
async def open_session() -> AsyncIterator[Page]:
    """전용 브라우저를 띄우고 새 Page를 yield

    Raises:
        SessionLaunchFailure: 브라우저 기동 실패/타임아웃
    """
    pw: Optional[Playwright] = None
    browser: Optional[Browser] = None
    context: Optional[BrowserContext] = None

    try:
        logger.info("[Playwright] Launching browser...")
        pw = await asyncio.wait_for(
            async_playwright().start(),
            timeout=settings.crawler_launch_timeout_s,
        )
        browser = await asyncio.wait_for(
            pw.chromium.launch(
                headless=settings.crawler_headless,
                args=build_launch_args(),
            ),
            timeout=settings.crawler_launch_timeout_s,
        )
        context = await browser.new_context(user_agent=settings.crawler_user_agent)
        page = await context.new_page()
    except Exception as e:
        logger.error(f"[Playwright] Failed to launch browser: {type(e).__name__}: {e}")
        await _teardown(pw, browser, context)
        raise SessionLaunchFailure(e) from e

    try:
        yield page
    finally:
        await _teardown(pw, browser, context)
        logger.info("[Playwright] Browser closed")
