"""Retry Policy - 고정 간격 재시도 래퍼

네비게이션/추출 단계 모두 같은 형태(최대 N회, 고정 지연)로 감쌉니다.
지연은 asyncio.sleep 이므로 해당 잡의 task만 대기하고 다른 잡은 막지 않습니다.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from smartcrawl.core.logging import logger

T = TypeVar("T")


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    delay_ms: int = 2000,
    *,
    label: str = "operation",
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> T:
    """operation을 실행하고 실패 시 고정 간격으로 재시도

    Args:
        operation: 인자 없는 async callable (호출마다 새 awaitable 생성)
        max_retries: 최초 시도 이후 추가 재시도 횟수
        delay_ms: 재시도 사이 지연 (밀리초, 증가 없음)
        label: 로그 식별용 이름
        sleep: 테스트용 sleep 주입

    Returns:
        operation의 성공 반환값

    Raises:
        마지막 시도의 예외를 그대로 전파
    """
    if max_retries < 0:
        raise ValueError(f"max_retries must be >= 0: {max_retries}")

    sleep_fn = sleep or asyncio.sleep
    attempts_remaining = max_retries

    while True:
        try:
            return await operation()
        except Exception as e:
            if attempts_remaining <= 0:
                raise
            logger.warning(
                f"[Retry] {label} failed ({type(e).__name__}), retrying in {delay_ms}ms... "
                f"({attempts_remaining} attempts left)"
            )
            await sleep_fn(delay_ms / 1000)
            attempts_remaining -= 1
