"""스키마/설정 검증 테스트."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from smartcrawl.core.config import Settings
from smartcrawl.schemas.crawl_schema import (
    CrawlSubmitResponse,
    ExtractionResult,
    Item,
    JobStatusResponse,
)


def test_item_requires_non_empty_link():
    with pytest.raises(ValidationError):
        Item(text="some text", link="")


def test_extraction_result_accepts_field_names_and_aliases():
    by_name = ExtractionResult(title="t", meta_description="d", item_count=0)
    by_alias = ExtractionResult.model_validate({"title": "t", "metaDescription": "d", "itemCount": 0})
    assert by_name == by_alias


def test_submit_response_uses_job_id_alias():
    assert CrawlSubmitResponse(job_id="x").model_dump(by_alias=True) == {"jobId": "x"}


def test_status_response_serialization():
    response = JobStatusResponse(job_id="x", status="pending")
    assert response.model_dump(by_alias=True, exclude_none=True) == {"jobId": "x", "status": "pending"}


def test_settings_defaults():
    s = Settings()
    assert s.crawler_navigation_timeout_ms == 30000
    assert s.crawler_network_idle_timeout_ms == 5000
    assert s.crawler_max_retries == 3
    assert s.crawler_retry_delay_ms == 2000
    assert s.crawler_blocked_resource_types == ["image", "stylesheet", "font", "media"]
    assert s.crawler_scroll_max_distance_px == 15000
    assert s.extraction_max_items == 20
    assert s.poller_max_attempts == 30
    assert s.poller_interval_ms == 2000


@pytest.mark.parametrize(
    "field,value",
    [
        ("crawler_navigation_timeout_ms", 0),
        ("crawler_scroll_step_px", -1),
        ("crawler_max_retries", -1),
        ("extraction_max_items", 0),
        ("crawler_launch_timeout_s", 0),
    ],
)
def test_settings_validation(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})
