"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class SmartCrawlException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 크롤러 관련 예외
class CrawlerException(SmartCrawlException):
    """크롤러 관련 예외의 기본 클래스"""
    def __init__(self, message: str, error_code: str = "CRAWLER_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CRAWLER_ERROR", details)


class CrawlError(CrawlerException):
    """크롤 실패 - 가장 안쪽 원인(cause)을 감싼다"""
    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        error_code: str = "CRAWL_FAILED",
        details: Optional[dict[str, Any]] = None,
    ):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {type(cause).__name__}: {cause}"
        super().__init__(message, error_code, details)
        self.__cause__ = cause


class NavigationFailure(CrawlError):
    """네비게이션 재시도 소진"""
    def __init__(self, url: str, cause: Optional[BaseException] = None):
        super().__init__(f"Navigation to {url} failed", cause, "NAVIGATION_FAILED", {"url": url})


class ExtractionFailure(CrawlError):
    """추출 재시도 소진"""
    def __init__(self, url: str, cause: Optional[BaseException] = None):
        super().__init__(f"Extraction from {url} failed", cause, "EXTRACTION_FAILED", {"url": url})


class SessionLaunchFailure(CrawlError):
    """렌더링 세션(브라우저) 기동 실패"""
    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__("Rendering session could not be launched", cause, "SESSION_LAUNCH_FAILED")


# 잡 관련 예외
class JobException(SmartCrawlException):
    """잡 저장소 관련 예외"""
    def __init__(self, message: str, error_code: str = "JOB_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "JOB_ERROR", details)


class JobNotFoundException(JobException):
    """알 수 없는 잡 ID"""
    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}", "JOB_NOT_FOUND", {"job_id": job_id})


class InvalidJobTransition(JobException):
    """허용되지 않은 상태 전이 (오케스트레이션 버그)"""
    def __init__(self, job_id: str, current: str, requested: str):
        message = f"Job {job_id} cannot move from '{current}' to '{requested}'"
        super().__init__(message, "INVALID_JOB_TRANSITION",
                         {"job_id": job_id, "current": current, "requested": requested})


# 유효성 검증 관련 예외
class ValidationException(SmartCrawlException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                         details or {"field": field, "reason": reason})

