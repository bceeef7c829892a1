"""API 의존성 모음."""

from fastapi import Header, HTTPException, status

from mytrip.core.config import get_settings
from mytrip.services.tour_api_client import TourApiClient, get_tour_api_client


def get_client() -> TourApiClient:
    """관광 API 클라이언트를 제공합니다. 테스트에서는 dependency_overrides로 교체한다."""
    return get_tour_api_client()


def require_service_secret(
    x_service_secret: str | None = Header(default=None, alias="x-service-secret"),
) -> None:
    """문서 엔드포인트 보호용 시크릿 헤더를 검증한다."""
    settings = get_settings()
    if not settings.SERVICE_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="서비스 시크릿 설정이 없습니다.",
        )

    if x_service_secret != settings.SERVICE_SECRET:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="유효하지 않은 서비스 시크릿입니다.",
        )
