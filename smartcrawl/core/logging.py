"""로깅 설정

- 패키지 로거 "smartcrawl" 하나를 stdout으로 내보낸다
- 로그 메시지는 "[Crawl]", "[JobService]" 같은 컴포넌트 태그로 시작한다
"""
import logging
import os
import sys
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from smartcrawl.core.config import settings


LOGGER_NAME = "smartcrawl"
HANDLER_NAME = "smartcrawl.stdout"

# 쿼리 키에 아래 문자열이 포함되면 값을 가린다
SENSITIVE_KEYS = ("password", "token", "api_key", "apikey", "secret", "session")

_PROD_FORMAT = "%(asctime)s %(levelname)s %(message)s"
_DEV_FORMAT = "%(asctime)s %(levelname)-7s %(name)s %(module)s:%(lineno)d %(message)s"


def is_production() -> bool:
    return os.getenv("ENVIRONMENT", "development") == "production"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """패키지 로거 구성 (여러 번 호출해도 핸들러는 1개)"""
    logger = logging.getLogger(LOGGER_NAME)

    level_name = (level or settings.log_level).upper()
    if is_production() and level_name == "DEBUG":
        level_name = "INFO"
    resolved = logging.getLevelName(level_name)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logger.setLevel(resolved)
    logger.propagate = False

    handler = next((h for h in logger.handlers if h.get_name() == HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(
            logging.Formatter(_PROD_FORMAT if is_production() else _DEV_FORMAT, datefmt="%H:%M:%S")
        )
        logger.addHandler(handler)
    handler.setLevel(resolved)

    return logger


logger = setup_logging()


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def sanitize_for_log(value: Optional[str], max_length: int = 100) -> str:
    """URL 로깅용 정리 - 민감한 쿼리 값은 ***로 가리고 max_length에서 자른다"""
    if not value:
        return "[empty]"

    result = value
    try:
        parts = urlsplit(value)
    except ValueError:
        parts = None

    if parts is not None and parts.query:
        pairs = parse_qsl(parts.query, keep_blank_values=True)
        if any(_is_sensitive(k) for k, _ in pairs):
            masked = [(k, "***" if _is_sensitive(k) else v) for k, v in pairs]
            result = urlunsplit(parts._replace(query=urlencode(masked, safe="*")))

    if len(result) > max_length:
        result = result[:max_length] + "..."
    return result
