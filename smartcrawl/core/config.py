"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 크롤러 (Playwright 세션)
    crawler_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )
    crawler_headless: bool = True
    crawler_launch_timeout_s: float = 25.0
    crawler_navigation_timeout_ms: int = 30000
    crawler_network_idle_timeout_ms: int = 5000
    crawler_max_retries: int = 3
    crawler_retry_delay_ms: int = 2000

    # 요청 단위로 abort 할 리소스 타입
    crawler_blocked_resource_types: list[str] = ["image", "stylesheet", "font", "media"]

    # lazy-load 유도용 스크롤
    crawler_scroll_step_px: int = 100
    crawler_scroll_interval_ms: int = 100
    crawler_scroll_max_distance_px: int = 15000

    # 추출
    extraction_max_items: int = 20
    extraction_item_text_limit: int = 150
    extraction_fallback_text_limit: int = 100

    # 산출물
    output_dir: str = "output"
    screenshot_dir: str = "."

    # 클라이언트 폴러
    poller_api_url: str = "http://localhost:3000"
    poller_interval_ms: int = 2000
    poller_max_attempts: int = 30
    poller_progress_interval_ms: int = 1000

    # API
    api_title: str = "Smart Crawl Service"
    api_version: str = "1.0.0"
    api_description: str = "URL을 렌더링하고 구조화된 아이템을 비동기 잡으로 추출합니다."
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # 로깅
    log_level: str = "INFO"

    @field_validator(
        "crawler_navigation_timeout_ms",
        "crawler_network_idle_timeout_ms",
        "crawler_scroll_step_px",
        "crawler_scroll_interval_ms",
        "crawler_scroll_max_distance_px",
        "poller_interval_ms",
        "poller_progress_interval_ms",
    )
    @classmethod
    def validate_positive_ms(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("timeouts and scroll parameters must be positive")
        return v

    @field_validator("crawler_max_retries", "crawler_retry_delay_ms")
    @classmethod
    def validate_retry(cls, v: int) -> int:
        if v < 0:
            raise ValueError("retry settings must be >= 0")
        return v

    @field_validator(
        "extraction_max_items",
        "extraction_item_text_limit",
        "extraction_fallback_text_limit",
        "poller_max_attempts",
    )
    @classmethod
    def validate_limits(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("limits must be positive")
        return v

    @field_validator("crawler_launch_timeout_s")
    @classmethod
    def validate_launch_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("crawler_launch_timeout_s must be positive")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
