"""Crawl Orchestrator - 요청 1건의 렌더링/추출 파이프라인

1. 세션 획득 (모든 경로에서 해제 보장)
2. 리소스 차단 라우트 설치
3. 네비게이션 (domcontentloaded, 재시도)
4. network idle 대기 (soft timeout)
5. 자동 스크롤
6. 추출 (재시도)
7. 결과 저장

2~6 단계 실패 시 full-page 스크린샷을 남기고 세션 해제 후 다시 raise 합니다.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from smartcrawl.core.config import settings
from smartcrawl.core.exceptions import CrawlError, ExtractionFailure, NavigationFailure
from smartcrawl.core.logging import logger, sanitize_for_log
from smartcrawl.engine import ExtractionEngine, HtmlDocumentSnapshot, with_retry
from smartcrawl.schemas.crawl_schema import ExtractionResult

from .output import JsonFileSink, OutputSink, screenshot_path
from .playwright import auto_scroll, configure_page, open_session


SessionFactory = Callable[[], AbstractAsyncContextManager[Page]]
Sleep = Callable[[float], Awaitable[None]]


class CrawlOrchestrator:
    """렌더링 세션 1개로 URL 1개를 크롤링

    Usage:
        orchestrator = CrawlOrchestrator()
        result = await orchestrator.crawl("https://example.com", "results.json")
    """

    def __init__(
        self,
        session_factory: SessionFactory = open_session,
        engine: Optional[ExtractionEngine] = None,
        sink: Optional[OutputSink] = None,
        *,
        max_retries: Optional[int] = None,
        retry_delay_ms: Optional[int] = None,
        screenshot_dir: Optional[Union[str, Path]] = None,
        sleep: Optional[Sleep] = None,
    ):
        """
        Args:
            session_factory: Page를 yield하는 async context manager 팩토리
            engine: 추출 엔진 (기본 ExtractionEngine)
            sink: 결과 저장소 (기본 JsonFileSink)
            max_retries / retry_delay_ms: 네비게이션·추출 재시도 정책
            screenshot_dir: 실패 스크린샷 디렉터리
            sleep: 재시도/스크롤 대기 주입 (테스트용)
        """
        self.session_factory = session_factory
        self.engine = engine or ExtractionEngine()
        self.sink = sink or JsonFileSink()
        self.max_retries = settings.crawler_max_retries if max_retries is None else max_retries
        self.retry_delay_ms = settings.crawler_retry_delay_ms if retry_delay_ms is None else retry_delay_ms
        self.screenshot_dir = screenshot_dir
        self._sleep = sleep

    async def crawl(self, url: str, output_path: Union[str, Path]) -> ExtractionResult:
        """URL 크롤링 후 결과를 output_path에 저장하고 반환

        Raises:
            SessionLaunchFailure: 브라우저 기동 실패
            NavigationFailure: 네비게이션 재시도 소진
            ExtractionFailure: 추출 재시도 소진
            CrawlError: 그 밖의 단계 실패
        """
        logger.info(f"[Crawl] Starting crawl: url='{sanitize_for_log(url)}'")

        async with self.session_factory() as page:
            try:
                await configure_page(page)

                logger.info("[Crawl] Navigating to page...")
                await self._navigate(page, url)
                await self._wait_for_network_idle(page)

                logger.info("[Crawl] Scrolling...")
                await auto_scroll(page, sleep=self._sleep)

                logger.info("[Crawl] Extracting data...")
                result = await self._extract(page, url)
            except Exception as e:
                logger.error(f"[Crawl] Crawl failed: url='{sanitize_for_log(url)}'", exc_info=True)
                await self._capture_screenshot(page)
                if isinstance(e, CrawlError):
                    raise
                raise CrawlError(f"Crawl of {url} failed", e) from e

        logger.info(f"[Crawl] Extraction complete: items={len(result.items)} total={result.item_count}")
        try:
            saved = await self.sink.write(result, output_path)
        except Exception as e:
            logger.error(f"[Crawl] Failed to save results: {type(e).__name__}: {e}")
            raise CrawlError(f"Saving results to {output_path} failed", e, "OUTPUT_WRITE_FAILED") from e
        logger.info(f"[Crawl] Results saved to {saved}")
        return result

    async def _navigate(self, page: Page, url: str) -> None:
        try:
            await with_retry(
                lambda: page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=settings.crawler_navigation_timeout_ms,
                ),
                self.max_retries,
                self.retry_delay_ms,
                label="navigation",
                sleep=self._sleep,
            )
        except Exception as e:
            raise NavigationFailure(url, e) from e

    async def _wait_for_network_idle(self, page: Page) -> None:
        try:
            await page.wait_for_load_state(
                "networkidle",
                timeout=settings.crawler_network_idle_timeout_ms,
            )
        except PlaywrightTimeoutError:
            logger.info("[Crawl] Network idle timeout, proceeding...")

    async def _extract(self, page: Page, url: str) -> ExtractionResult:
        async def evaluate() -> ExtractionResult:
            html = await page.content()
            return self.engine.extract(HtmlDocumentSnapshot(html, page.url or url))

        try:
            return await with_retry(
                evaluate,
                self.max_retries,
                self.retry_delay_ms,
                label="extraction",
                sleep=self._sleep,
            )
        except Exception as e:
            raise ExtractionFailure(url, e) from e

    async def _capture_screenshot(self, page: Page) -> Optional[Path]:
        path = screenshot_path(self.screenshot_dir)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=str(path), full_page=True)
        except Exception as e:
            logger.warning(f"[Crawl] Failed to capture screenshot: {type(e).__name__}: {e}")
            return None
        logger.info(f"[Crawl] Screenshot saved to {path}")
        return path
