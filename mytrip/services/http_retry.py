"""관광 API 호출용 재시도 래퍼.

- 시도마다 타임아웃을 건다. 타임아웃은 재시도 대상이다.
- 4xx는 잘못된 요청이므로 즉시 실패한다.
- 5xx, 연결 오류, 타임아웃은 지수 백오프(1초, 2초, 4초 ...) 후 재시도한다.
- `max_retries`는 전체 시도 횟수다. 모두 실패하면 마지막 오류를 던진다.
"""

from __future__ import annotations

import asyncio
from typing import Any

import requests

from mytrip.core.errors import (
    TourApiError,
    TourApiHttpError,
    TourApiNetworkError,
    TourApiTimeoutError,
)
from mytrip.core.logger import get_logger
from mytrip.core.timeout_policy import to_requests_timeout

logger = get_logger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_BACKOFF_BASE_SECONDS = 1.0


def backoff_delay(attempt: int, base_seconds: float = DEFAULT_BACKOFF_BASE_SECONDS) -> float:
    """0부터 시작하는 attempt 뒤에 기다릴 시간(초)."""
    return base_seconds * (2**attempt)


def _classify_response(response: requests.Response) -> TourApiError | None:
    """응답 상태를 분류합니다. 성공이면 None."""
    status_code = response.status_code
    reason = response.reason or ""
    if status_code < 400:
        return None
    if status_code < 500:
        return TourApiHttpError(f"API 요청 실패: {status_code} {reason}".rstrip(), status_code)
    return TourApiHttpError(f"서버 에러: {status_code} {reason}".rstrip(), status_code)


async def fetch_with_retry(
    url: str,
    params: dict[str, Any] | None = None,
    *,
    headers: dict[str, str] | None = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    backoff_base_seconds: float = DEFAULT_BACKOFF_BASE_SECONDS,
) -> requests.Response:
    """GET 요청을 보내고 일시적 실패는 지수 백오프로 재시도합니다."""
    max_attempts = max(1, int(max_retries))
    request_timeout = to_requests_timeout(timeout_seconds)
    timeout_ms = int(float(timeout_seconds) * 1000)
    last_error: TourApiError | None = None

    for attempt in range(max_attempts):

        def _send() -> requests.Response:
            return requests.get(url, params=params, headers=headers, timeout=request_timeout)

        try:
            response = await asyncio.to_thread(_send)
        except requests.Timeout as exc:
            last_error = TourApiTimeoutError(f"요청 시간 초과 ({timeout_ms}ms)")
            last_error.__cause__ = exc
        except requests.RequestException as exc:
            last_error = TourApiNetworkError(f"네트워크 에러: {exc}")
            last_error.__cause__ = exc
        else:
            failure = _classify_response(response)
            if failure is None:
                if attempt > 0:
                    logger.info("Tour API request succeeded after retry: attempt=%d/%d", attempt + 1, max_attempts)
                return response
            if not failure.retryable:
                logger.error("Tour API request rejected: status=%s url=%s", response.status_code, url)
                raise failure
            last_error = failure

        if attempt >= max_attempts - 1:
            break

        delay = backoff_delay(attempt, backoff_base_seconds)
        logger.warning(
            "Tour API request failed, retrying: attempt=%d/%d delay=%.2fs code=%s error=%s",
            attempt + 1,
            max_attempts,
            delay,
            last_error.code,
            last_error,
        )
        await asyncio.sleep(delay)

    logger.error("Tour API request failed permanently: attempts=%d url=%s error=%s", max_attempts, url, last_error)
    if last_error is None:
        raise TourApiError("알 수 없는 에러가 발생했습니다.")
    raise last_error
