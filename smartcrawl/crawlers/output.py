"""크롤 산출물 경로/저장 (JSON 결과, 진단 스크린샷 경로)"""

from __future__ import annotations

import asyncio
import json
import time
from pathlib import Path
from typing import Optional, Protocol, Union

from smartcrawl.core.config import settings
from smartcrawl.schemas.crawl_schema import ExtractionResult


PathLike = Union[str, Path]


class OutputSink(Protocol):
    """추출 결과 저장소 인터페이스"""

    async def write(self, result: ExtractionResult, path: PathLike) -> Path: ...


def job_output_path(job_id: str, output_dir: Optional[PathLike] = None) -> Path:
    """잡 ID 기반 결과 파일 경로 (output/crawl-<jobId>.json)"""
    base = Path(output_dir if output_dir is not None else settings.output_dir)
    return base / f"crawl-{job_id}.json"


def screenshot_path(screenshot_dir: Optional[PathLike] = None, now_ms: Optional[int] = None) -> Path:
    """타임스탬프 기반 진단 스크린샷 경로 (error-<epoch ms>.png)"""
    base = Path(screenshot_dir if screenshot_dir is not None else settings.screenshot_dir)
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return base / f"error-{stamp}.png"


def write_json(data: dict, path: PathLike) -> Path:
    """들여쓰기(2) JSON 저장, 상위 디렉터리 자동 생성"""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return target


class JsonFileSink:
    """ExtractionResult를 JSON 파일로 저장"""

    async def write(self, result: ExtractionResult, path: PathLike) -> Path:
        return await asyncio.to_thread(write_json, result.to_json_dict(), path)
