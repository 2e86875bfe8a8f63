"""smartcrawl - 동적 페이지 렌더링 + 구조화 추출 잡 서비스"""

__version__ = "1.0.0"
