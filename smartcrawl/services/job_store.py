"""Job Store - 잡 ID → 잡 레코드 (동시성 안전)

HTTP 상태 조회(읽기)와 잡별 백그라운드 task(자기 레코드만 쓰기)가 동시에 접근하므로
모든 조회/변경은 asyncio.Lock 아래에서 수행하고, 외부에는 복사본만 돌려줍니다.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from smartcrawl.core.exceptions import InvalidJobTransition, JobNotFoundException
from smartcrawl.core.logging import logger
from smartcrawl.schemas.crawl_schema import ExtractionResult


class JobStatus(str, Enum):
    """잡 상태

    PENDING → CRAWLING → {COMPLETED | FAILED}
    """

    PENDING = "pending"
    CRAWLING = "crawling"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


_ALLOWED_TRANSITIONS: dict[JobStatus, tuple[JobStatus, ...]] = {
    JobStatus.PENDING: (JobStatus.CRAWLING,),
    JobStatus.CRAWLING: (JobStatus.COMPLETED, JobStatus.FAILED),
    JobStatus.COMPLETED: (),
    JobStatus.FAILED: (),
}


@dataclass(frozen=True)
class JobRecord:
    """잡 레코드

    Attributes:
        id: 잡 식별자
        status: 현재 상태
        result: COMPLETED일 때만 존재
        error_message: FAILED일 때만 존재
    """

    id: str
    status: JobStatus = JobStatus.PENDING
    result: Optional[ExtractionResult] = None
    error_message: Optional[str] = None


class JobStore:
    """메모리 잡 저장소

    만료 정책은 없습니다 (종료 상태 레코드는 프로세스 수명 동안 유지).
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._jobs: dict[str, JobRecord] = {}

    async def create(self) -> str:
        """PENDING 레코드를 만들고 새 잡 ID 반환"""
        async with self._lock:
            job_id = str(uuid.uuid4())
            while job_id in self._jobs:
                job_id = str(uuid.uuid4())
            self._jobs[job_id] = JobRecord(id=job_id)
        logger.debug(f"[JobStore] Created job {job_id}")
        return job_id

    async def transition(
        self,
        job_id: str,
        new_status: JobStatus,
        *,
        result: Optional[ExtractionResult] = None,
        error_message: Optional[str] = None,
    ) -> JobRecord:
        """상태 전이 + 페이로드 기록

        Raises:
            JobNotFoundException: 알 수 없는 잡 ID
            InvalidJobTransition: 역행/종료 상태에서의 전이
        """
        async with self._lock:
            record = self._jobs.get(job_id)
            if record is None:
                raise JobNotFoundException(job_id)
            if new_status not in _ALLOWED_TRANSITIONS[record.status]:
                raise InvalidJobTransition(job_id, record.status.value, new_status.value)

            updated = replace(
                record,
                status=new_status,
                result=result if new_status is JobStatus.COMPLETED else None,
                error_message=error_message if new_status is JobStatus.FAILED else None,
            )
            self._jobs[job_id] = updated
        logger.debug(f"[JobStore] Job {job_id}: {record.status.value} -> {new_status.value}")
        return updated

    async def get(self, job_id: str) -> JobRecord:
        """Raises: JobNotFoundException"""
        async with self._lock:
            record = self._jobs.get(job_id)
        if record is None:
            raise JobNotFoundException(job_id)
        return record

    async def counts(self) -> dict[str, int]:
        """상태별 잡 개수 (헬스 체크용)"""
        async with self._lock:
            records = list(self._jobs.values())
        counts = {status.value: 0 for status in JobStatus}
        for record in records:
            counts[record.status.value] += 1
        return counts
