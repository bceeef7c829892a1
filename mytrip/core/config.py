"""애플리케이션 전역 설정을 관리하는 모듈."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TOUR_API_BASE_URL = "https://apis.data.go.kr/B551011/KorService2"


class Settings(BaseSettings):
    """환경 변수 기반 설정 모델."""

    # 한국관광공사 API 키는 호출 시점에 검증한다.
    TOUR_API_KEY: str | None = None
    TOUR_API_BASE_URL: str = TOUR_API_BASE_URL
    TOUR_API_MOBILE_OS: str = "ETC"
    TOUR_API_MOBILE_APP: str = "MyTrip"
    TOUR_API_TIMEOUT_SECONDS: int = 30
    TOUR_API_MAX_RETRIES: int = 3
    TOUR_API_BACKOFF_BASE_SECONDS: float = 1.0
    PET_INFO_BATCH_SIZE: int = 10
    DEFAULT_NUM_OF_ROWS: int = 20
    REQUEST_TIMEOUT_SECONDS: int = 60
    SERVICE_SECRET: str | None = None
    APP_ENV: str = "development"
    DOCS_MODE: str = "disabled"
    EXPOSE_INTERNAL_ERRORS: bool = False
    CORS_ALLOW_ORIGINS: str = ""
    CORS_ALLOW_METHODS: str = "GET,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Content-Type,x-service-secret"
    CORS_ALLOW_CREDENTIALS: bool = False
    SECURITY_HEADERS_ENABLED: bool = True
    ENABLE_HSTS: bool = False
    HSTS_MAX_AGE_SECONDS: int = 31536000
    PROXY_HEADERS_ENABLED: bool = True
    PROXY_TRUSTED_HOSTS: str = "127.0.0.1"
    TRUSTED_HOSTS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("TOUR_API_KEY", mode="before")
    @classmethod
    def _blank_tour_api_key_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("TOUR_API_MAX_RETRIES", mode="before")
    @classmethod
    def _clamp_tour_api_max_retries(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 3
        except (TypeError, ValueError):
            numeric = 3
        return min(10, max(1, numeric))

    @field_validator("PET_INFO_BATCH_SIZE", mode="before")
    @classmethod
    def _clamp_pet_info_batch_size(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 10
        except (TypeError, ValueError):
            numeric = 10
        return min(50, max(1, numeric))

    @field_validator("DEFAULT_NUM_OF_ROWS", mode="before")
    @classmethod
    def _clamp_default_num_of_rows(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 20
        except (TypeError, ValueError):
            numeric = 20
        return min(100, max(1, numeric))


@lru_cache
def get_settings() -> Settings:
    """Settings 인스턴스를 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return Settings()
