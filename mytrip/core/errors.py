"""관광 API 호출 예외 계층과 표준 에러 응답 변환."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """클라이언트에 노출되는 에러 코드."""

    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class TourApiError(RuntimeError):
    """관광 API 계층 예외의 공통 부모."""

    code: ErrorCode = ErrorCode.API_ERROR
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TourApiConfigError(TourApiError):
    """API 키 등 필수 설정이 없을 때 발생한다."""

    code = ErrorCode.CONFIG_ERROR
    status_code = 500


class TourApiValidationError(TourApiError):
    """필수 파라미터 누락 또는 잘못된 입력."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class TourApiNetworkError(TourApiError):
    """연결 실패 등 일시적인 네트워크 오류."""

    code = ErrorCode.NETWORK_ERROR
    status_code = 502
    retryable = True


class TourApiTimeoutError(TourApiError):
    """시도당 제한 시간 초과."""

    code = ErrorCode.TIMEOUT_ERROR
    status_code = 504
    retryable = True


class TourApiHttpError(TourApiError):
    """업스트림이 2xx/3xx 이외의 HTTP 상태를 반환한 경우."""

    def __init__(self, message: str, upstream_status: int) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.code = status_to_error_code(upstream_status)
        self.retryable = upstream_status >= 500
        self.status_code = upstream_status if 400 <= upstream_status < 500 else 502


class TourApiUpstreamError(TourApiError):
    """정상 봉투에 성공 이외의 resultCode가 담긴 경우."""

    status_code = 502

    def __init__(self, result_code: str, result_msg: str) -> None:
        super().__init__(f"API 에러: {result_code} - {result_msg}")
        self.result_code = result_code
        self.result_msg = result_msg


class TourApiMalformedResponseError(TourApiError):
    """응답 JSON에 기대한 봉투 구조가 없는 경우."""

    code = ErrorCode.MALFORMED_RESPONSE
    status_code = 502


class TourApiNotFoundError(TourApiError):
    """조회 결과가 비어 있는 단건 조회."""

    code = ErrorCode.NOT_FOUND
    status_code = 404


def status_to_error_code(status_code: int) -> ErrorCode:
    """HTTP 상태 코드를 에러 코드로 변환합니다."""
    if status_code == 401:
        return ErrorCode.UNAUTHORIZED
    if status_code == 404:
        return ErrorCode.NOT_FOUND
    if 400 <= status_code < 500:
        return ErrorCode.VALIDATION_ERROR
    if status_code >= 500:
        return ErrorCode.INTERNAL_ERROR
    return ErrorCode.API_ERROR


def to_error_response(
    exc: Exception,
    *,
    status_code: int | None = None,
    expose_details: bool = False,
) -> dict[str, Any]:
    """예외를 `{error, code, statusCode}` 형식의 응답 본문으로 변환합니다."""
    if isinstance(exc, TourApiError):
        message = exc.message
        code = exc.code
        resolved_status = status_code or exc.status_code
    else:
        message = str(exc) if expose_details else "알 수 없는 오류가 발생했습니다."
        code = ErrorCode.UNKNOWN_ERROR
        resolved_status = status_code or 500

    body: dict[str, Any] = {"error": message, "code": str(code), "statusCode": resolved_status}
    if expose_details:
        details: dict[str, Any] = {"type": type(exc).__name__}
        if isinstance(exc, TourApiUpstreamError):
            details["resultCode"] = exc.result_code
        if isinstance(exc, TourApiHttpError):
            details["upstreamStatus"] = exc.upstream_status
        body["details"] = details
    return body
