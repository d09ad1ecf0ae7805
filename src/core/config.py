"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # WebOPAC 카탈로그
    opac_base_url: str = "https://webopac.hff-muc.de/webOPACClient.hffsis"
    opac_login_id: str = "wohff"
    opac_user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    opac_accept_language: str = "en-US,en;q=0.5"
    opac_http_impersonate: str = "chrome110"
    opac_http_max_clients: int = 10

    # Single request budget (handshake or search page)
    opac_request_timeout_s: float = 20.0

    # The backend drops sessions server-side; renew before it does
    session_ttl_s: float = 300.0

    # 스로틀링: 동시 요청 수 + 요청 간 최소 간격
    # NOTE: earlier builds ran 5 slots / 200ms, later ones 8 slots / 100ms.
    throttle_max_concurrent: int = 8
    throttle_min_interval_ms: int = 100

    # 결과 캐시
    cache_ttl: int = 3600  # 1시간
    cache_sweep_interval_s: float = 300.0

    # Caller-side deadline (must exceed the worst-case throttle queue wait)
    query_timeout_s: float = 90.0

    # API
    api_title: str = "Film Availability Service"
    api_version: str = "1.0.0"
    api_description: str = "Checks whether a film is held by the HFF library catalog."

    # 로깅
    log_level: str = "INFO"

    @field_validator("opac_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("opac_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator(
        "opac_request_timeout_s",
        "session_ttl_s",
        "cache_sweep_interval_s",
        "query_timeout_s",
    )
    @classmethod
    def validate_positive_durations(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("durations must be positive")
        return v

    @field_validator("cache_ttl")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache_ttl must be positive")
        return v

    @field_validator("throttle_max_concurrent", "opac_http_max_clients")
    @classmethod
    def validate_widths(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("concurrency limits must be positive")
        return v

    @field_validator("throttle_min_interval_ms")
    @classmethod
    def validate_min_interval(cls, v: int) -> int:
        if v < 0:
            raise ValueError("throttle_min_interval_ms must be >= 0")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
