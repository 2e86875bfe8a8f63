"""Extraction Engine - 렌더링된 문서에서 구조화 아이템 추출 (순수 로직)

1. title / meta description
2. Primary pass: 콘텐츠 컨테이너 후보 selector 매칭
3. Fallback pass: primary가 0건일 때만 전체 <a> 스윕
4. link 기준 중복 제거 (최초 등장 우선)
5. 상한 적용 (item_count는 상한 적용 전 개수)

네트워크/타이밍 의존이 없으므로 동일 스냅샷 → 동일 결과입니다.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from smartcrawl.core.config import settings
from smartcrawl.engine.snapshot import DocumentSnapshot, SnapshotElement
from smartcrawl.schemas.crawl_schema import ExtractionResult, Item


# 우선순위 순서의 컨테이너 후보 (범용 시맨틱 → 컴포넌트 클래스 → ARIA → 사이트 전용 태그 → 범용 결과 클래스)
CONTAINER_SELECTORS: tuple[str, ...] = (
    "article",
    ".product",
    ".item",
    ".card",
    "li",
    "tr",
    '[role="article"]',
    '[role="listitem"]',
    "ytd-video-renderer",
    "ytd-rich-item-renderer",
    "ytd-compact-video-renderer",
    ".result",
    ".entry",
    ".post",
)

ELLIPSIS = "..."

_WS_RE = re.compile(r"\s+")

# 컨테이너/앵커 채택 최소 길이 (초과해야 채택)
PRIMARY_MIN_TEXT_LENGTH = 10
FALLBACK_MIN_TEXT_LENGTH = 20


def collapse_whitespace(text: str) -> str:
    """연속 공백을 한 칸으로 줄이고 양끝 공백 제거"""
    return _WS_RE.sub(" ", text or "").strip()


def element_text(element: SnapshotElement) -> str:
    """가시 텍스트, 없으면 aria-label → title 속성"""
    text = (element.inner_text or "").strip()
    if not text:
        text = element.get_attribute("aria-label") or element.get_attribute("title") or ""
    return collapse_whitespace(text)


def truncate(text: str, limit: int) -> str:
    """limit 초과 시 잘라내고 '...' 접미사"""
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def is_script_url(link: str) -> bool:
    return link.strip().lower().startswith("javascript:")


def dedupe_by_link(items: Sequence[Item]) -> list[Item]:
    """link 기준 최초 등장만 남김 (순서 유지)"""
    seen: set[str] = set()
    unique: list[Item] = []
    for item in items:
        if item.link in seen:
            continue
        seen.add(item.link)
        unique.append(item)
    return unique


class ExtractionEngine:
    """휴리스틱 추출기

    Usage:
        engine = ExtractionEngine()
        result = engine.extract(HtmlDocumentSnapshot(html, url))
    """

    def __init__(
        self,
        selectors: Sequence[str] = CONTAINER_SELECTORS,
        max_items: Optional[int] = None,
        item_text_limit: Optional[int] = None,
        fallback_text_limit: Optional[int] = None,
    ) -> None:
        self.selectors = tuple(selectors)
        self.max_items = settings.extraction_max_items if max_items is None else max_items
        self.item_text_limit = (
            settings.extraction_item_text_limit if item_text_limit is None else item_text_limit
        )
        self.fallback_text_limit = (
            settings.extraction_fallback_text_limit if fallback_text_limit is None else fallback_text_limit
        )

    def extract(self, snapshot: DocumentSnapshot) -> ExtractionResult:
        items = self._primary_pass(snapshot)
        if not items:
            items = self._fallback_pass(snapshot)

        unique = dedupe_by_link(items)

        return ExtractionResult(
            title=snapshot.title or "",
            meta_description=snapshot.meta_description,
            item_count=len(unique),
            items=unique[: self.max_items],
        )

    def _primary_pass(self, snapshot: DocumentSnapshot) -> list[Item]:
        items: list[Item] = []
        for element in snapshot.query_all(self.selectors):
            text = element_text(element)
            link = element.first_link()
            if len(text) <= PRIMARY_MIN_TEXT_LENGTH or not link:
                continue
            items.append(
                Item(
                    text=truncate(text, self.item_text_limit),
                    link=link,
                    image=element.first_image(),
                )
            )
        return items

    def _fallback_pass(self, snapshot: DocumentSnapshot) -> list[Item]:
        items: list[Item] = []
        for anchor in snapshot.anchors():
            text = element_text(anchor)
            link = anchor.href
            if len(text) <= FALLBACK_MIN_TEXT_LENGTH or not link or is_script_url(link):
                continue
            # fallback 텍스트는 길이와 무관하게 항상 '...'로 끝난다
            items.append(Item(text=text[: self.fallback_text_limit] + ELLIPSIS, link=link))
        return items
