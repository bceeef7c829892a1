"""관광 API 오퍼레이션별 쿼리 파라미터 빌더.

모든 빌더는 필수 입력을 먼저 검증하고(`TourApiValidationError`), 그다음 API 키를
확인한다(`TourApiConfigError`). 둘 다 네트워크 호출 전에 발생한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from mytrip.core.config import Settings, get_settings
from mytrip.core.errors import TourApiConfigError, TourApiValidationError

AREA_CODE = "areaCode2"
AREA_BASED_LIST = "areaBasedList2"
SEARCH_KEYWORD = "searchKeyword2"
DETAIL_COMMON = "detailCommon2"
DETAIL_INTRO = "detailIntro2"
DETAIL_IMAGE = "detailImage2"
DETAIL_PET_TOUR = "detailPetTour2"

DEFAULT_NUM_OF_ROWS = 10
DEFAULT_PAGE_NO = 1

_DETAIL_COMMON_FLAGS = {
    "defaultYN": "Y",
    "firstImageYN": "Y",
    "areacodeYN": "Y",
    "catcodeYN": "Y",
    "addrinfoYN": "Y",
    "mapinfoYN": "Y",
    "overviewYN": "Y",
}
_DETAIL_IMAGE_FLAGS = {"imageYN": "Y", "subImageYN": "Y"}


def compact_params(params: dict[str, Any]) -> dict[str, str]:
    """None/빈 문자열 값을 제거하고 문자열로 변환합니다."""
    return {key: str(value) for key, value in params.items() if value is not None and value != ""}


@dataclass(frozen=True, slots=True)
class TourApiRequest:
    """오퍼레이션 경로와 직렬화 직전의 쿼리 파라미터."""

    operation: str
    params: dict[str, str] = field(default_factory=dict)

    def url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/{self.operation}"

    def to_url(self, base_url: str) -> str:
        """쿼리 문자열까지 포함한 전체 URL."""
        return f"{self.url(base_url)}?{urlencode(self.params)}"


def common_params(settings: Settings | None = None) -> dict[str, str]:
    """인증/클라이언트 식별 공통 블록."""
    resolved = settings or get_settings()
    if not resolved.TOUR_API_KEY:
        raise TourApiConfigError("한국관광공사 API 키가 설정되지 않았습니다. TOUR_API_KEY 환경변수를 설정해주세요.")
    return {
        "serviceKey": resolved.TOUR_API_KEY,
        "MobileOS": resolved.TOUR_API_MOBILE_OS,
        "MobileApp": resolved.TOUR_API_MOBILE_APP,
        "_type": "json",
    }


def _build(operation: str, settings: Settings | None, **params: Any) -> TourApiRequest:
    return TourApiRequest(operation=operation, params=compact_params({**common_params(settings), **params}))


def _require_content_id(content_id: str | None) -> str:
    value = str(content_id or "").strip()
    if not value:
        raise TourApiValidationError("콘텐츠 ID가 필요합니다.")
    if not value.isdigit():
        raise TourApiValidationError(f"콘텐츠 ID 형식이 올바르지 않습니다: {value}")
    return value


def _require_paging(num_of_rows: int, page_no: int) -> None:
    if num_of_rows < 1:
        raise TourApiValidationError("numOfRows는 1 이상이어야 합니다.")
    if page_no < 1:
        raise TourApiValidationError("pageNo는 1 이상이어야 합니다.")


def area_code_request(
    num_of_rows: int = DEFAULT_NUM_OF_ROWS,
    page_no: int = DEFAULT_PAGE_NO,
    *,
    settings: Settings | None = None,
) -> TourApiRequest:
    _require_paging(num_of_rows, page_no)
    return _build(AREA_CODE, settings, numOfRows=num_of_rows, pageNo=page_no)


def area_based_list_request(
    area_code: str | None = None,
    content_type_id: str | None = None,
    num_of_rows: int = DEFAULT_NUM_OF_ROWS,
    page_no: int = DEFAULT_PAGE_NO,
    *,
    settings: Settings | None = None,
) -> TourApiRequest:
    _require_paging(num_of_rows, page_no)
    return _build(
        AREA_BASED_LIST,
        settings,
        numOfRows=num_of_rows,
        pageNo=page_no,
        areaCode=area_code,
        contentTypeId=content_type_id,
    )


def search_keyword_request(
    keyword: str | None,
    area_code: str | None = None,
    content_type_id: str | None = None,
    num_of_rows: int = DEFAULT_NUM_OF_ROWS,
    page_no: int = DEFAULT_PAGE_NO,
    *,
    settings: Settings | None = None,
) -> TourApiRequest:
    trimmed = (keyword or "").strip()
    if not trimmed:
        raise TourApiValidationError("검색 키워드를 입력해주세요.")
    _require_paging(num_of_rows, page_no)
    return _build(
        SEARCH_KEYWORD,
        settings,
        keyword=trimmed,
        numOfRows=num_of_rows,
        pageNo=page_no,
        areaCode=area_code,
        contentTypeId=content_type_id,
    )


def detail_common_request(content_id: str | None, *, settings: Settings | None = None) -> TourApiRequest:
    content_id = _require_content_id(content_id)
    return _build(DETAIL_COMMON, settings, contentId=content_id, **_DETAIL_COMMON_FLAGS)


def detail_intro_request(
    content_id: str | None,
    content_type_id: str | None,
    *,
    settings: Settings | None = None,
) -> TourApiRequest:
    content_type_id = str(content_type_id or "").strip()
    if not str(content_id or "").strip() or not content_type_id:
        raise TourApiValidationError("콘텐츠 ID와 타입 ID가 필요합니다.")
    content_id = _require_content_id(content_id)
    return _build(DETAIL_INTRO, settings, contentId=content_id, contentTypeId=content_type_id)


def detail_image_request(content_id: str | None, *, settings: Settings | None = None) -> TourApiRequest:
    content_id = _require_content_id(content_id)
    return _build(DETAIL_IMAGE, settings, contentId=content_id, **_DETAIL_IMAGE_FLAGS)


def detail_pet_tour_request(content_id: str | None, *, settings: Settings | None = None) -> TourApiRequest:
    content_id = _require_content_id(content_id)
    return _build(DETAIL_PET_TOUR, settings, contentId=content_id)
