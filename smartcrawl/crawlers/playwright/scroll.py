"""Lazy-load 유도용 자동 스크롤.

고정 간격으로 조금씩 스크롤하며, 바닥에 닿거나 하드 캡을 넘으면 멈춥니다.
스크롤 높이는 매 tick 다시 읽습니다 (lazy 아이템이 붙으며 늘어날 수 있음).
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from playwright.async_api import Page

from smartcrawl.core.config import settings
from smartcrawl.core.logging import logger


_MEASURE_JS = "() => [document.body ? document.body.scrollHeight : 0, window.innerHeight]"
_SCROLL_JS = "(distance) => window.scrollBy(0, distance)"


async def auto_scroll(
    page: Page,
    *,
    step_px: Optional[int] = None,
    interval_ms: Optional[int] = None,
    max_distance_px: Optional[int] = None,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> int:
    """페이지 끝(또는 캡)까지 스크롤

    Returns:
        누적 스크롤 거리 (px)
    """
    step = settings.crawler_scroll_step_px if step_px is None else step_px
    interval = settings.crawler_scroll_interval_ms if interval_ms is None else interval_ms
    cap = settings.crawler_scroll_max_distance_px if max_distance_px is None else max_distance_px
    if step <= 0:
        raise ValueError(f"step_px must be positive: {step}")
    sleep_fn = sleep or asyncio.sleep

    total = 0
    ticks = 0
    while True:
        await sleep_fn(interval / 1000)
        scroll_height, viewport_height = await page.evaluate(_MEASURE_JS)
        await page.evaluate(_SCROLL_JS, step)
        total += step
        ticks += 1

        if total >= scroll_height - viewport_height or total > cap:
            break

    logger.debug(f"[Scroll] Done: distance={total}px ticks={ticks}")
    return total
