"""open_session 수명 관리 테스트 (Playwright는 mock으로 대체)"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from smartcrawl.core.config import settings
from smartcrawl.core.exceptions import SessionLaunchFailure
from smartcrawl.crawlers.playwright.browser import build_launch_args, open_session


def mock_playwright(launch_error: Exception | None = None):
    page = MagicMock(name="page")
    context = MagicMock(name="context")
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()

    browser = MagicMock(name="browser")
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    pw = MagicMock(name="playwright")
    pw.stop = AsyncMock()
    if launch_error is not None:
        pw.chromium.launch = AsyncMock(side_effect=launch_error)
    else:
        pw.chromium.launch = AsyncMock(return_value=browser)

    factory = MagicMock()
    factory.return_value.start = AsyncMock(return_value=pw)
    return factory, pw, browser, context, page


@pytest.mark.asyncio
async def test_session_yields_page_and_closes_everything():
    factory, pw, browser, context, page = mock_playwright()

    with patch("smartcrawl.crawlers.playwright.browser.async_playwright", factory):
        async with open_session() as opened:
            assert opened is page
            context.close.assert_not_awaited()

    browser.new_context.assert_awaited_once_with(user_agent=settings.crawler_user_agent)
    context.close.assert_awaited_once()
    browser.close.assert_awaited_once()
    pw.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_session_closes_when_body_raises():
    factory, pw, browser, context, _ = mock_playwright()

    with patch("smartcrawl.crawlers.playwright.browser.async_playwright", factory):
        with pytest.raises(RuntimeError):
            async with open_session():
                raise RuntimeError("boom")

    browser.close.assert_awaited_once()
    pw.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_launch_failure_is_wrapped_and_playwright_stopped():
    factory, pw, browser, _, _ = mock_playwright(launch_error=RuntimeError("no chromium"))

    with patch("smartcrawl.crawlers.playwright.browser.async_playwright", factory):
        with pytest.raises(SessionLaunchFailure) as exc_info:
            async with open_session():
                pass

    assert exc_info.value.error_code == "SESSION_LAUNCH_FAILED"
    assert isinstance(exc_info.value.cause, RuntimeError)
    pw.stop.assert_awaited_once()
    browser.close.assert_not_awaited()


@pytest.mark.asyncio
async def test_teardown_errors_do_not_mask_result():
    factory, pw, browser, _, page = mock_playwright()
    browser.close.side_effect = RuntimeError("already closed")

    with patch("smartcrawl.crawlers.playwright.browser.async_playwright", factory):
        async with open_session() as opened:
            assert opened is page

    pw.stop.assert_awaited_once()


def test_launch_args_disable_shm():
    assert "--disable-dev-shm-usage" in build_launch_args()
