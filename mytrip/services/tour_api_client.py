"""한국관광공사 API(KorService2) 클라이언트.

쿼리 빌더 → 재시도 래퍼 → 응답 파서 순서로 조합한다.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

from mytrip.core.config import Settings, get_settings
from mytrip.core.errors import (
    TourApiError,
    TourApiHttpError,
    TourApiNotFoundError,
    TourApiUpstreamError,
)
from mytrip.core.logger import get_logger
from mytrip.core.timeout_policy import get_timeout_policy
from mytrip.schemas.tour import (
    AreaCode,
    PetTourInfo,
    TourApiPage,
    TourDetail,
    TourImage,
    TourIntro,
    TourItem,
    TourListPage,
    parse_intro,
)
from mytrip.services import tour_api_params as params
from mytrip.services.http_retry import fetch_with_retry
from mytrip.services.tour_api_response import decode_json, parse_tour_api_response

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# data.go.kr 공통 에러 코드 03 = NODATA_ERROR
NO_DATA_RESULT_CODES = frozenset({"03"})


def is_not_found_error(exc: Exception) -> bool:
    """'데이터 없음' 성격의 실패인지 판별합니다."""
    if isinstance(exc, TourApiNotFoundError):
        return True
    if isinstance(exc, TourApiHttpError):
        return exc.upstream_status == 404
    if isinstance(exc, TourApiUpstreamError):
        return exc.result_code in NO_DATA_RESULT_CODES
    return False


class TourApiClient:
    """관광 API 오퍼레이션별 비동기 호출 메서드를 제공합니다."""

    def __init__(
        self,
        settings: Settings,
        timeout_seconds: float = 30,
        max_retries: int = 3,
        backoff_base_seconds: float = 1.0,
    ) -> None:
        self._settings = settings
        self._base_url = settings.TOUR_API_BASE_URL
        self._timeout_seconds = timeout_seconds
        self._max_retries = max_retries
        self._backoff_base_seconds = backoff_base_seconds

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TourApiClient:
        """애플리케이션 설정으로 클라이언트를 생성합니다. API 키는 호출 시점에 검증합니다."""
        resolved = settings or get_settings()
        policy = get_timeout_policy(resolved)
        if not resolved.TOUR_API_KEY:
            logger.warning("TOUR_API_KEY is not configured. Tour API calls will fail until it is set.")
        return cls(
            settings=resolved,
            timeout_seconds=policy.tour_api_timeout_seconds,
            max_retries=policy.tour_api_max_retries,
            backoff_base_seconds=policy.tour_api_backoff_base_seconds,
        )

    async def _call(
        self,
        request: params.TourApiRequest,
        model: type[ModelT],
        item_parser: Callable[[dict[str, Any]], ModelT] | None = None,
    ) -> TourApiPage[ModelT]:
        response = await fetch_with_retry(
            request.url(self._base_url),
            request.params,
            max_retries=self._max_retries,
            timeout_seconds=self._timeout_seconds,
            backoff_base_seconds=self._backoff_base_seconds,
        )
        page = parse_tour_api_response(decode_json(response), model, item_parser)
        logger.debug(
            "Tour API call completed: operation=%s items=%d total_count=%d",
            request.operation,
            len(page.items),
            page.total_count,
        )
        return page

    async def get_area_codes(self, num_of_rows: int = 10, page_no: int = 1) -> list[AreaCode]:
        """지역코드 목록을 조회합니다 (areaCode2)."""
        request = params.area_code_request(num_of_rows, page_no, settings=self._settings)
        page = await self._call(request, AreaCode)
        return page.items

    async def get_area_based_list(
        self,
        area_code: str | None = None,
        content_type_id: str | None = None,
        num_of_rows: int = 10,
        page_no: int = 1,
    ) -> TourListPage:
        """지역/타입 기반 관광지 목록을 조회합니다 (areaBasedList2)."""
        request = params.area_based_list_request(
            area_code, content_type_id, num_of_rows, page_no, settings=self._settings
        )
        page = await self._call(request, TourItem)
        return TourListPage(items=page.items, total_count=page.total_count)

    async def search_keyword(
        self,
        keyword: str,
        area_code: str | None = None,
        content_type_id: str | None = None,
        num_of_rows: int = 10,
        page_no: int = 1,
    ) -> TourListPage:
        """키워드로 관광지를 검색합니다 (searchKeyword2)."""
        request = params.search_keyword_request(
            keyword, area_code, content_type_id, num_of_rows, page_no, settings=self._settings
        )
        page = await self._call(request, TourItem)
        return TourListPage(items=page.items, total_count=page.total_count)

    async def get_detail_common(self, content_id: str) -> TourDetail:
        """관광지 상세 정보를 조회합니다 (detailCommon2)."""
        request = params.detail_common_request(content_id, settings=self._settings)
        page = await self._call(request, TourDetail)
        if not page.items:
            raise TourApiNotFoundError(f"관광지 정보를 찾을 수 없습니다: {content_id}")
        return page.items[0]

    async def get_detail_intro(self, content_id: str, content_type_id: str) -> TourIntro:
        """관광 타입별 운영 정보를 조회합니다 (detailIntro2)."""
        request = params.detail_intro_request(content_id, content_type_id, settings=self._settings)
        page = await self._call(request, TourIntro, parse_intro)
        if not page.items:
            raise TourApiNotFoundError(f"운영 정보를 찾을 수 없습니다: {content_id}")
        return page.items[0]

    async def get_detail_images(self, content_id: str) -> list[TourImage]:
        """관광지 이미지 목록을 조회합니다 (detailImage2)."""
        request = params.detail_image_request(content_id, settings=self._settings)
        page = await self._call(request, TourImage)
        return page.items

    async def get_detail_pet_tour(self, content_id: str) -> PetTourInfo | None:
        """반려동물 동반 정보를 조회합니다. 정보가 없으면 None (detailPetTour2)."""
        request = params.detail_pet_tour_request(content_id, settings=self._settings)
        try:
            page = await self._call(request, PetTourInfo)
        except TourApiError as exc:
            if is_not_found_error(exc):
                logger.info("Pet tour info not available: content_id=%s reason=%s", content_id, exc)
                return None
            raise
        return page.items[0] if page.items else None


@lru_cache(maxsize=1)
def get_tour_api_client() -> TourApiClient:
    """설정 재사용을 위한 프로세스 단위 싱글톤을 반환합니다."""
    return TourApiClient.from_settings()
