"""Crawl Job Service - 제출 즉시 잡 ID 반환, 크롤은 백그라운드 task에서 실행

잡 task 경계에서 모든 실패를 잡아 FAILED로 기록하며, 제출자에게 다시 raise 하지 않습니다.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Protocol, Union

from smartcrawl.core.exceptions import ValidationException
from smartcrawl.core.logging import logger, sanitize_for_log
from smartcrawl.crawlers.output import job_output_path
from smartcrawl.schemas.crawl_schema import ExtractionResult
from smartcrawl.services.job_store import JobRecord, JobStatus, JobStore


class Crawler(Protocol):
    """CrawlOrchestrator 인터페이스"""

    async def crawl(self, url: str, output_path: Union[str, Path]) -> ExtractionResult: ...


def validate_url(url: Optional[str]) -> str:
    """제출 URL 검증 - 누락/빈값만 거부, 형식 오류는 잡 실패(NavigationFailure)로 기록된다

    Raises:
        ValidationException: url 누락/빈값
    """
    if url is None or not url.strip():
        raise ValidationException("url", "URL is required")
    return url.strip()


class CrawlJobService:
    """잡 제출/조회 서비스

    Usage:
        service = CrawlJobService(JobStore(), CrawlOrchestrator())
        job_id = await service.submit("https://example.com")
        record = await service.get(job_id)
    """

    def __init__(
        self,
        store: JobStore,
        crawler: Crawler,
        output_dir: Optional[Union[str, Path]] = None,
    ):
        if store is None:
            raise ValueError("store must not be None")
        if crawler is None:
            raise ValueError("crawler must not be None")

        self.store = store
        self.crawler = crawler
        self.output_dir = output_dir
        # 실행 중 task 참조 유지 (GC로 인한 조기 소멸 방지)
        self._tasks: set[asyncio.Task] = set()

    async def submit(self, url: Optional[str]) -> str:
        """잡 생성 후 크롤 task를 띄우고 즉시 잡 ID 반환"""
        url = validate_url(url)
        job_id = await self.store.create()

        task = asyncio.create_task(self._run(job_id, url), name=f"crawl-{job_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info(f"[JobService] Job {job_id} submitted: url='{sanitize_for_log(url)}'")
        return job_id

    async def get(self, job_id: str) -> JobRecord:
        """Raises: JobNotFoundException"""
        return await self.store.get(job_id)

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)

    async def wait_all(self) -> None:
        """실행 중인 잡 task가 모두 끝날 때까지 대기 (종료/테스트용)"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(self, job_id: str, url: str) -> None:
        await self.store.transition(job_id, JobStatus.CRAWLING)
        try:
            output_path = job_output_path(job_id, self.output_dir)
            result = await self.crawler.crawl(url, output_path)
        except Exception as e:
            logger.error(f"[JobService] Job {job_id} failed: {e}")
            await self.store.transition(job_id, JobStatus.FAILED, error_message=str(e))
            return

        await self.store.transition(job_id, JobStatus.COMPLETED, result=result)
        logger.info(f"[JobService] Job {job_id} completed: items={len(result.items)}")
