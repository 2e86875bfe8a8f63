"""Job Poller - 잡 제출 후 고정 간격 폴링

상태 머신(crawling → success | error | timeout)과 진행률 추정(ProgressSimulator)을 분리합니다.
진행률은 화면용 근사치일 뿐 종료 판정에 관여하지 않습니다.
timeout은 클라이언트 측 포기일 뿐 서버의 잡을 취소하지 않습니다.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Union

import httpx

from smartcrawl.core.config import settings
from smartcrawl.core.logging import logger
from smartcrawl.crawlers.output import write_json


Sleep = Callable[[float], Awaitable[None]]

INITIAL_PROGRESS = 10.0
PROGRESS_CEILING = 90.0
PROGRESS_MAX_STEP = 5.0


class PollState(str, Enum):
    """클라이언트 화면 상태"""

    CRAWLING = "crawling"
    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"

    @property
    def is_terminal(self) -> bool:
        return self is not PollState.CRAWLING


@dataclass
class PollUpdate:
    """폴러가 내보내는 상태 스냅샷"""

    state: PollState
    progress: float
    job_id: Optional[str] = None
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    attempts: int = 0


class ProgressSimulator:
    """가짜 진행률 타이머 - interval마다 최대 5씩 랜덤 증가, 90에서 정지"""

    def __init__(
        self,
        on_tick: Callable[[float], None],
        *,
        start: float = INITIAL_PROGRESS,
        interval_ms: Optional[int] = None,
        rng: Optional[random.Random] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self.value = start
        self._on_tick = on_tick
        if interval_ms is None:
            interval_ms = settings.poller_progress_interval_ms
        self._interval_s = interval_ms / 1000
        self._rng = rng or random.Random()
        self._sleep = sleep or asyncio.sleep
        self._task: Optional[asyncio.Task] = None

    def advance(self) -> float:
        if self.value < PROGRESS_CEILING:
            self.value = min(PROGRESS_CEILING, self.value + self._rng.random() * PROGRESS_MAX_STEP)
        return self.value

    def start(self) -> None:
        self.stop()
        self._task = asyncio.create_task(self._loop())

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _loop(self) -> None:
        while True:
            await self._sleep(self._interval_s)
            self._on_tick(self.advance())


class JobPoller:
    """잡 제출 + 상태 폴링

    Usage:
        poller = JobPoller("http://localhost:3000")
        async for update in poller.start_job("https://example.com"):
            print(update.state, update.progress)
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        interval_ms: Optional[int] = None,
        max_attempts: Optional[int] = None,
        progress_interval_ms: Optional[int] = None,
        simulate_progress: bool = True,
        download_dir: Optional[Union[str, Path]] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self.api_url = (api_url or settings.poller_api_url).rstrip("/")
        self.interval_ms = settings.poller_interval_ms if interval_ms is None else interval_ms
        self.max_attempts = settings.poller_max_attempts if max_attempts is None else max_attempts
        self.progress_interval_ms = (
            settings.poller_progress_interval_ms if progress_interval_ms is None else progress_interval_ms
        )
        self.simulate_progress = simulate_progress
        self.download_dir = Path(download_dir) if download_dir is not None else None
        self.attempts = 0
        self._client = client
        self._sleep = sleep or asyncio.sleep

    async def run(self, url: str) -> PollUpdate:
        """start_job을 끝까지 소비하고 마지막(종료) 상태 반환"""
        last: Optional[PollUpdate] = None
        async for update in self.start_job(url):
            last = update
        if last is None:
            raise RuntimeError("poller produced no updates")
        return last

    async def start_job(self, url: str) -> AsyncIterator[PollUpdate]:
        """상태 업데이트 스트림 - 종료 상태(success/error/timeout) 1건으로 끝난다"""
        self.attempts = 0
        queue: asyncio.Queue[PollUpdate] = asyncio.Queue()
        job_ref: dict[str, Optional[str]] = {"job_id": None}

        def on_progress(value: float) -> None:
            queue.put_nowait(
                PollUpdate(PollState.CRAWLING, value, job_id=job_ref["job_id"], attempts=self.attempts)
            )

        progress = ProgressSimulator(on_progress, interval_ms=self.progress_interval_ms)
        queue.put_nowait(PollUpdate(PollState.CRAWLING, progress.value))
        if self.simulate_progress:
            progress.start()

        owns_client = self._client is None
        client = self._client or httpx.AsyncClient(base_url=self.api_url, timeout=10.0)
        worker = asyncio.create_task(self._drive(client, url, queue, progress, job_ref))

        try:
            while True:
                update = await queue.get()
                yield update
                if update.state.is_terminal:
                    break
        finally:
            progress.stop()
            if not worker.done():
                worker.cancel()
            await asyncio.gather(worker, return_exceptions=True)
            if owns_client:
                await client.aclose()

    async def _drive(
        self,
        client: httpx.AsyncClient,
        url: str,
        queue: asyncio.Queue,
        progress: ProgressSimulator,
        job_ref: dict[str, Optional[str]],
    ) -> None:
        try:
            job_id = await self._submit(client, url)
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error(f"[Poller] Submission failed: {type(e).__name__}: {e}")
            progress.stop()
            queue.put_nowait(PollUpdate(PollState.ERROR, progress.value, error=str(e)))
            return

        job_ref["job_id"] = job_id
        logger.info(f"[Poller] Job {job_id} submitted, polling every {self.interval_ms}ms")

        while True:
            await self._sleep(self.interval_ms / 1000)
            self.attempts += 1

            if self.attempts > self.max_attempts:
                progress.stop()
                logger.warning(f"[Poller] Job {job_id} gave up after {self.max_attempts} attempts")
                queue.put_nowait(
                    PollUpdate(PollState.TIMEOUT, progress.value, job_id=job_id, attempts=self.attempts)
                )
                return

            try:
                body = await self._fetch_status(client, job_id)
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"[Poller] Polling error: {type(e).__name__}: {e}")
                continue

            status = body.get("status")
            if status == "completed":
                progress.stop()
                data = body.get("data")
                self._download(job_id, data)
                queue.put_nowait(
                    PollUpdate(PollState.SUCCESS, 100.0, job_id=job_id, data=data, attempts=self.attempts)
                )
                return
            if status == "failed":
                progress.stop()
                queue.put_nowait(
                    PollUpdate(PollState.ERROR, 0.0, job_id=job_id, error=body.get("error"), attempts=self.attempts)
                )
                return

    async def _submit(self, client: httpx.AsyncClient, url: str) -> str:
        response = await client.post(f"{self.api_url}/crawl", json={"url": url})
        response.raise_for_status()
        return response.json()["jobId"]

    async def _fetch_status(self, client: httpx.AsyncClient, job_id: str) -> dict[str, Any]:
        response = await client.get(f"{self.api_url}/status/{job_id}")
        response.raise_for_status()
        return response.json()

    def _download(self, job_id: str, data: Optional[dict[str, Any]]) -> None:
        if self.download_dir is None or data is None:
            return
        try:
            path = write_json(data, self.download_dir / f"crawl-{job_id}.json")
            logger.info(f"[Poller] Result saved to {path}")
        except OSError as e:
            logger.warning(f"[Poller] Failed to save result: {e}")
