"""Pydantic 스키마 정의 - 추출 결과 / 잡 API"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """추출된 아이템 1건"""
    text: str = Field(..., description="정규화된 가시 텍스트 (잘렸으면 '...' 접미사)")
    link: str = Field(..., min_length=1, description="절대 URL")
    image: Optional[str] = Field(None, description="대표 이미지 절대 URL")


class ExtractionResult(BaseModel):
    """페이지 1개에 대한 추출 결과

    - item_count: 중복 제거 후, 상한(cap) 적용 전 개수
    - items: 문서 순서 기준 최초 등장 순, 최대 N개
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field("", description="document.title")
    meta_description: Optional[str] = Field(None, alias="metaDescription")
    item_count: int = Field(0, ge=0, alias="itemCount")
    items: list[Item] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        """외부 산출물(JSON)용 직렬화 - 필드명은 camelCase"""
        return self.model_dump(by_alias=True, exclude_none=True)


class CrawlRequest(BaseModel):
    """잡 제출 요청. url 누락/빈값은 라우트에서 400으로 처리한다."""
    url: Optional[str] = Field(None, max_length=2048, description="크롤링할 URL")


class CrawlSubmitResponse(BaseModel):
    """잡 제출 응답"""
    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., alias="jobId")


class JobStatusResponse(BaseModel):
    """잡 상태 조회 응답"""
    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., alias="jobId")
    status: str = Field(..., description="pending | crawling | completed | failed")
    data: Optional[dict[str, Any]] = Field(None, description="completed일 때만 존재")
    error: Optional[str] = Field(None, description="failed일 때만 존재")


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    jobs: dict[str, int] = Field(default_factory=dict)
