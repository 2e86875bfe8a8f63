"""Service layer - 잡 저장소 / 잡 실행"""

from .job_store import JobRecord, JobStatus, JobStore
from .impl.crawl_job_service import CrawlJobService

__all__ = ["JobRecord", "JobStatus", "JobStore", "CrawlJobService"]
