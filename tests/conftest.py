"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake(Page/Route/Session/Crawler) 주입

금지:
- 실제 브라우저 기동
- 외부 네트워크 호출
"""

from __future__ import annotations

import asyncio
import os
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from smartcrawl.schemas.crawl_schema import ExtractionResult, Item  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


async def no_sleep(_seconds: float) -> None:
    """대기 없이 이벤트 루프에 제어권만 양보"""
    await asyncio.sleep(0)


# ============================================================================
# Playwright Fake
# ============================================================================

@dataclass
class FakeRequest:
    resource_type: str
    url: str = "https://example.com/resource"


@dataclass
class FakeRoute:
    request: FakeRequest
    aborted: bool = False
    continued: bool = False

    async def abort(self) -> None:
        self.aborted = True

    async def continue_(self) -> None:
        self.continued = True


class FakePage:
    """Playwright Page 최소 대역

    - goto_failures: 처음 N번 goto 실패
    - content_failures: 처음 N번 content 실패
    - network_idle_timeout: wait_for_load_state에서 TimeoutError
    """

    def __init__(
        self,
        html: str = "",
        url: str = "https://example.com/",
        *,
        goto_failures: int = 0,
        content_failures: int = 0,
        network_idle_timeout: bool = False,
        scroll_height: int = 1000,
        viewport_height: int = 800,
        screenshot_error: Optional[Exception] = None,
    ) -> None:
        self.html = html
        self.url = url
        self.goto_failures = goto_failures
        self.content_failures = content_failures
        self.network_idle_timeout = network_idle_timeout
        self.scroll_height = scroll_height
        self.viewport_height = viewport_height
        self.screenshot_error = screenshot_error

        self.default_timeout: Optional[int] = None
        self.route_handler = None
        self.goto_calls: list[dict[str, Any]] = []
        self.content_calls = 0
        self.scrolled = 0
        self.screenshots: list[dict[str, Any]] = []

    def set_default_timeout(self, timeout: int) -> None:
        self.default_timeout = timeout

    async def route(self, pattern: str, handler) -> None:
        self.route_handler = handler

    async def goto(self, url: str, wait_until: str = "load", timeout: Optional[int] = None):
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if len(self.goto_calls) <= self.goto_failures:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")
        return None

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[int] = None) -> None:
        if self.network_idle_timeout:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        if "scrollHeight" in expression:
            return [self.scroll_height, self.viewport_height]
        self.scrolled += arg or 0
        return None

    async def content(self) -> str:
        self.content_calls += 1
        if self.content_calls <= self.content_failures:
            raise RuntimeError("Execution context was destroyed")
        return self.html

    async def screenshot(self, path: str, full_page: bool = False) -> bytes:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        self.screenshots.append({"path": path, "full_page": full_page})
        return b""


@dataclass
class FakeSession:
    """open_session 대역 - 열림/닫힘 추적"""

    page: FakePage
    opened: int = 0
    closed: int = 0
    launch_error: Optional[Exception] = None

    def __call__(self):
        return self._session()

    @asynccontextmanager
    async def _session(self):
        if self.launch_error is not None:
            raise self.launch_error
        self.opened += 1
        try:
            yield self.page
        finally:
            self.closed += 1


@dataclass
class RecordingSink:
    """OutputSink 대역"""

    writes: list[tuple[ExtractionResult, Any]] = field(default_factory=list)

    async def write(self, result: ExtractionResult, path):
        self.writes.append((result, path))
        return Path(path)


class FakeCrawler:
    """CrawlOrchestrator 대역 - gate가 열릴 때까지 대기 가능"""

    def __init__(
        self,
        result: Optional[ExtractionResult] = None,
        error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.result = result
        self.error = error
        self.gate = gate
        self.calls: list[tuple[str, Any]] = []

    async def crawl(self, url: str, output_path) -> ExtractionResult:
        self.calls.append((url, output_path))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


def make_result(count: int = 2) -> ExtractionResult:
    items = [
        Item(text=f"Example entry number {i} with text", link=f"https://example.com/{i}")
        for i in range(count)
    ]
    return ExtractionResult(title="Example Domain", item_count=count, items=items)


@pytest.fixture
def sample_result() -> ExtractionResult:
    return make_result()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()
