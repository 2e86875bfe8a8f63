"""Engine Layer - 추출/재시도 순수 로직

공개 API는 이 파일에서만 export합니다.
"""

from .extraction import CONTAINER_SELECTORS, ExtractionEngine
from .retry import with_retry
from .snapshot import DocumentSnapshot, HtmlDocumentSnapshot, SnapshotElement

__all__ = [
    "CONTAINER_SELECTORS",
    "ExtractionEngine",
    "with_retry",
    "DocumentSnapshot",
    "HtmlDocumentSnapshot",
    "SnapshotElement",
]
