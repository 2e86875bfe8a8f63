"""Document Snapshot - 렌더링된 문서에 대한 조회 인터페이스

ExtractionEngine은 이 인터페이스만 알고, 실제 브라우저 없이도
직렬화된 HTML(selectolax)로 동일한 추출을 수행할 수 있습니다.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Protocol, Sequence
from urllib.parse import urljoin

from selectolax.parser import HTMLParser, Node


# innerText에 포함되지 않는 태그
_INVISIBLE_TAGS = ["script", "style", "noscript", "template"]

_DISPLAY_NONE_RE = re.compile(r"display\s*:\s*none", re.IGNORECASE)

# 앞뒤로 줄바꿈이 들어가는 블록 레벨 태그 (그 외 태그는 텍스트를 그대로 이어 붙인다)
_BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "dd", "details", "dialog", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "summary", "table",
    "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
})


class SnapshotElement(Protocol):
    """스냅샷 내 요소 1개"""

    @property
    def inner_text(self) -> str: ...

    @property
    def href(self) -> str: ...

    def get_attribute(self, name: str) -> Optional[str]: ...

    def first_link(self) -> str: ...

    def first_image(self) -> Optional[str]: ...


class DocumentSnapshot(Protocol):
    """렌더링 완료 시점의 문서 스냅샷"""

    @property
    def title(self) -> str: ...

    @property
    def meta_description(self) -> Optional[str]: ...

    def query_all(self, selectors: Sequence[str]) -> list[SnapshotElement]: ...

    def anchors(self) -> list[SnapshotElement]: ...


def resolve_url(base_url: str, raw: Optional[str]) -> str:
    """브라우저의 a.href / img.src 처럼 속성값을 절대 URL로 해석

    속성이 없으면 빈 문자열을 반환합니다.
    """
    if raw is None:
        return ""
    value = raw.strip()
    if not base_url:
        return value
    return urljoin(base_url, value)


def _children(node: Node) -> list[Node]:
    children: list[Node] = []
    child = node.child
    while child is not None:
        children.append(child)
        child = child.next
    return children


def visible_text(node: Node) -> str:
    """innerText 근사치 - 인라인 텍스트는 그대로 잇고 블록 경계와 <br>에만 줄바꿈"""
    parts: list[str] = []
    # (node, closing) 스택으로 문서 순서 순회
    stack: list[tuple[Node, bool]] = [(n, False) for n in reversed(_children(node))]

    while stack:
        current, closing = stack.pop()
        tag = current.tag or ""
        if closing:
            parts.append("\n")
            continue
        if tag == "-text":
            parts.append(current.text(deep=False) or "")
            continue
        if tag == "br":
            parts.append("\n")
            continue
        if tag.startswith(("-", "_")):
            continue

        block = tag in _BLOCK_TAGS
        if block:
            parts.append("\n")
            stack.append((current, True))

        stack.extend((n, False) for n in reversed(_children(current)))

    return "".join(parts)


class HtmlElement:
    """selectolax Node 기반 SnapshotElement"""

    def __init__(self, node: Node, base_url: str) -> None:
        self._node = node
        self._base_url = base_url

    @property
    def inner_text(self) -> str:
        return visible_text(self._node)

    @property
    def href(self) -> str:
        return resolve_url(self._base_url, self.get_attribute("href"))

    def get_attribute(self, name: str) -> Optional[str]:
        return self._node.attributes.get(name)

    def first_link(self) -> str:
        anchor = self._node.css_first("a")
        if anchor is None:
            return ""
        return resolve_url(self._base_url, anchor.attributes.get("href"))

    def first_image(self) -> Optional[str]:
        img = self._node.css_first("img")
        if img is None:
            return None
        src = img.attributes.get("src")
        if not src or not src.strip():
            return None
        return resolve_url(self._base_url, src)


class HtmlDocumentSnapshot:
    """직렬화된 HTML + 페이지 URL로 만든 DocumentSnapshot

    title/meta는 생성 시점에 읽고, 이후 <head>와 화면에 보이지 않는 노드
    (hidden 속성, 인라인 display:none)를 제거한 트리만 조회합니다.

    Usage:
        snapshot = HtmlDocumentSnapshot(await page.content(), page.url)
        result = ExtractionEngine().extract(snapshot)
    """

    def __init__(self, html: str, base_url: str = "") -> None:
        self._tree = HTMLParser(html or "")
        self._base_url = base_url

        title = self._tree.css_first("title")
        self._title = " ".join((title.text() or "").split()) if title is not None else ""
        meta = self._tree.css_first('meta[name="description"]')
        self._meta_description = meta.attributes.get("content") if meta is not None else None

        self._tree.strip_tags(_INVISIBLE_TAGS)
        self._remove_hidden()

    @property
    def title(self) -> str:
        return self._title

    @property
    def meta_description(self) -> Optional[str]:
        return self._meta_description

    def _remove_hidden(self) -> None:
        candidates = list(self._tree.css("head, [hidden]"))
        candidates.extend(
            node for node in self._tree.css("[style]")
            if _DISPLAY_NONE_RE.search(node.attributes.get("style") or "")
        )
        ids = {node.mem_id for node in candidates}

        # 이미 제거될 조상을 가진 노드는 건너뛴다
        roots = []
        for node in candidates:
            parent = node.parent
            while parent is not None and parent.mem_id not in ids:
                parent = parent.parent
            if parent is None:
                roots.append(node)

        seen: set[int] = set()
        for node in roots:
            if node.mem_id in seen:
                continue
            seen.add(node.mem_id)
            node.decompose()

    def _elements(self) -> Iterable[Node]:
        root = self._tree.root
        if root is None:
            return []
        return root.traverse(include_text=False)

    def query_all(self, selectors: Sequence[str]) -> list[SnapshotElement]:
        """selector 그룹에 매칭되는 요소를 문서 순서대로 (중복 없이) 반환"""
        if not selectors:
            return []
        matched = {node.mem_id for node in self._tree.css(", ".join(selectors))}
        if not matched:
            return []
        return [
            HtmlElement(node, self._base_url)
            for node in self._elements()
            if node.mem_id in matched
        ]

    def anchors(self) -> list[SnapshotElement]:
        return [HtmlElement(node, self._base_url) for node in self._tree.css("a")]
