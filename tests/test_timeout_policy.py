"""타임아웃 정책 유틸 테스트."""

from mytrip.core.config import Settings
from mytrip.core.timeout_policy import build_timeout_policy, to_requests_timeout


def test_build_timeout_policy_caps_by_request_timeout() -> None:
    settings = Settings(
        TOUR_API_KEY="test-key",
        SERVICE_SECRET="test-service-secret",
        REQUEST_TIMEOUT_SECONDS=20,
        TOUR_API_TIMEOUT_SECONDS=45,
    )

    policy = build_timeout_policy(settings)

    assert policy.request_timeout_seconds == 20
    assert policy.tour_api_timeout_seconds == 20


def test_build_timeout_policy_carries_retry_settings() -> None:
    settings = Settings(
        TOUR_API_KEY="test-key",
        TOUR_API_MAX_RETRIES=5,
        TOUR_API_BACKOFF_BASE_SECONDS=0.5,
    )

    policy = build_timeout_policy(settings)

    assert policy.tour_api_timeout_seconds == 30
    assert policy.tour_api_max_retries == 5
    assert policy.tour_api_backoff_base_seconds == 0.5


def test_settings_clamp_out_of_range_values() -> None:
    settings = Settings(TOUR_API_MAX_RETRIES=0, PET_INFO_BATCH_SIZE=500, DEFAULT_NUM_OF_ROWS=0, TOUR_API_KEY="  ")

    assert settings.TOUR_API_MAX_RETRIES == 1
    assert settings.PET_INFO_BATCH_SIZE == 50
    assert settings.DEFAULT_NUM_OF_ROWS == 1
    assert settings.TOUR_API_KEY is None


def test_to_requests_timeout_returns_connect_and_read_timeout() -> None:
    connect_timeout, read_timeout = to_requests_timeout(10)

    assert connect_timeout == 3.0
    assert read_timeout == 7.0
