"""Crawler modules (Playwright rendering + extraction).

공개 API는 이 파일에서만 export합니다.
"""

from .orchestrator import CrawlOrchestrator
from .output import JsonFileSink, OutputSink, job_output_path, screenshot_path

__all__ = [
    "CrawlOrchestrator",
    "JsonFileSink",
    "OutputSink",
    "job_output_path",
    "screenshot_path",
]
