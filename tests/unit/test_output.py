"""산출물 경로/저장 테스트."""

from __future__ import annotations

import json

import pytest

from smartcrawl.crawlers.output import JsonFileSink, job_output_path, screenshot_path
from smartcrawl.schemas.crawl_schema import ExtractionResult, Item


def test_job_output_path():
    assert str(job_output_path("abc", "out")).replace("\\", "/") == "out/crawl-abc.json"


def test_screenshot_path_is_timestamped():
    path = screenshot_path("shots", now_ms=1700000000000)
    assert path.name == "error-1700000000000.png"
    assert path.parent.name == "shots"


@pytest.mark.asyncio
async def test_json_sink_writes_indented_camelcase(tmp_path):
    result = ExtractionResult(
        title="T",
        meta_description="D",
        item_count=1,
        items=[Item(text="hello world!", link="https://e.com/1")],
    )
    target = tmp_path / "nested" / "dir" / "result.json"

    saved = await JsonFileSink().write(result, target)

    assert saved == target
    raw = target.read_text(encoding="utf-8")
    assert raw.startswith('{\n  "title"')
    data = json.loads(raw)
    assert data == {
        "title": "T",
        "metaDescription": "D",
        "itemCount": 1,
        "items": [{"text": "hello world!", "link": "https://e.com/1"}],
    }
