"""관광지 목록/상세/통계 API."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, Query

from mytrip.api.dependencies import get_client
from mytrip.core.config import get_settings
from mytrip.core.errors import TourApiError, TourApiValidationError
from mytrip.core.logger import get_logger
from mytrip.schemas.enums import TourSort
from mytrip.schemas.stats import StatsSummary
from mytrip.schemas.tour import (
    AreaCode,
    ErrorResponse,
    PetTourInfo,
    PlaceDetailResponse,
    TourImage,
    TourIntro,
    TourListPage,
)
from mytrip.services.pet_filter import batch_get_pet_tour_info
from mytrip.services.stats_service import get_stats_summary
from mytrip.services.tour_api_client import TourApiClient
from mytrip.services.tour_sort import sort_tours

router = APIRouter(prefix="/api", tags=["tours"])
logger = get_logger(__name__)

MIN_NUM_OF_ROWS = 1
MAX_NUM_OF_ROWS = 100
MAX_PET_INFO_IDS = 100

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "잘못된 요청 파라미터"},
    500: {"model": ErrorResponse, "description": "설정 오류 또는 내부 오류"},
    502: {"model": ErrorResponse, "description": "관광 API 오류"},
}


def _parse_int(raw: str | None, name: str, default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise TourApiValidationError(f"{name}는 정수여야 합니다.") from exc


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _section(content_id: str, name: str, outcome: Any, default: Any) -> Any:
    """부가 섹션 결과를 꺼냅니다. 관광 API 오류는 기본값으로 대체합니다."""
    if isinstance(outcome, TourApiError):
        logger.warning("Place detail section unavailable: content_id=%s section=%s error=%s", content_id, name, outcome)
        return default
    if isinstance(outcome, BaseException):
        raise outcome
    return outcome


@router.get(
    "/tours",
    response_model=TourListPage,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def list_tours(
    keyword: str | None = None,
    area_code: str | None = Query(default=None, alias="areaCode"),
    content_type_id: str | None = Query(default=None, alias="contentTypeId"),
    num_of_rows: str | None = Query(default=None, alias="numOfRows"),
    page_no: str | None = Query(default=None, alias="pageNo"),
    sort: TourSort | None = Query(default=None, description="응답한 한 페이지 안에서만 정렬"),
    client: TourApiClient = Depends(get_client),  # noqa: B008
) -> TourListPage:
    """무한 스크롤용 관광지 목록. 키워드가 있으면 검색, 없으면 지역/타입 목록.

    `sort`는 응답한 한 페이지만 정렬한다. 스크롤로 누적한 전체 목록의 정렬은
    누적기의 `sorted_items()`가 담당한다.
    """
    rows = _parse_int(num_of_rows, "numOfRows", get_settings().DEFAULT_NUM_OF_ROWS)
    page = _parse_int(page_no, "pageNo", 1)
    if rows < MIN_NUM_OF_ROWS or rows > MAX_NUM_OF_ROWS:
        raise TourApiValidationError("numOfRows는 1 이상 100 이하여야 합니다.")
    if page < 1:
        raise TourApiValidationError("pageNo는 1 이상이어야 합니다.")

    area_code = _optional(area_code)
    content_type_id = _optional(content_type_id)
    search_keyword = _optional(keyword)

    if search_keyword:
        result = await client.search_keyword(search_keyword, area_code, content_type_id, rows, page)
    else:
        result = await client.get_area_based_list(area_code, content_type_id, rows, page)

    logger.info(
        "Tour list served: mode=%s area_code=%s content_type_id=%s page=%d rows=%d items=%d total_count=%d",
        "search" if search_keyword else "area",
        area_code,
        content_type_id,
        page,
        rows,
        len(result.items),
        result.total_count,
    )
    if sort is not None:
        return TourListPage(items=sort_tours(result.items, sort), total_count=result.total_count)
    return result


@router.get("/areas", response_model=list[AreaCode], response_model_exclude_none=True, responses=ERROR_RESPONSES)
async def list_areas(client: TourApiClient = Depends(get_client)) -> list[AreaCode]:  # noqa: B008
    """필터 메뉴용 지역코드 목록."""
    return await client.get_area_codes(num_of_rows=MAX_NUM_OF_ROWS, page_no=1)


@router.get(
    "/places/{content_id}",
    response_model=PlaceDetailResponse,
    response_model_exclude_none=True,
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "관광지 없음"}},
)
async def get_place(content_id: str, client: TourApiClient = Depends(get_client)) -> PlaceDetailResponse:  # noqa: B008
    """상세 정보와 운영 정보, 이미지, 반려동물 정보를 묶어 반환합니다.

    상세 정보 실패는 에러로 응답하고, 나머지는 실패하면 해당 섹션만 비운다.
    """
    detail = await client.get_detail_common(content_id)

    intro_result, images_result, pet_result = await asyncio.gather(
        client.get_detail_intro(content_id, detail.content_type_id),
        client.get_detail_images(content_id),
        client.get_detail_pet_tour(content_id),
        return_exceptions=True,
    )

    intro: TourIntro | None = _section(content_id, "intro", intro_result, None)
    images: list[TourImage] = _section(content_id, "images", images_result, [])
    pet_tour: PetTourInfo | None = _section(content_id, "pet_tour", pet_result, None)

    return PlaceDetailResponse(
        detail=detail,
        coordinates=detail.coordinates(),
        intro=intro,
        images=images,
        pet_tour=pet_tour,
    )


@router.get(
    "/pet-info",
    response_model=dict[str, PetTourInfo | None],
    responses=ERROR_RESPONSES,
)
async def get_pet_info(
    content_ids: str = Query(..., alias="contentIds", description="쉼표로 구분한 콘텐츠 ID 목록"),
    client: TourApiClient = Depends(get_client),  # noqa: B008
) -> dict[str, PetTourInfo | None]:
    """여러 관광지의 반려동물 정보를 배치로 조회합니다. 정보가 없으면 null."""
    ids = list(dict.fromkeys(item.strip() for item in content_ids.split(",") if item.strip()))
    if not ids:
        raise TourApiValidationError("contentIds가 필요합니다.")
    if len(ids) > MAX_PET_INFO_IDS:
        raise TourApiValidationError(f"contentIds는 최대 {MAX_PET_INFO_IDS}개까지 조회할 수 있습니다.")

    return await batch_get_pet_tour_info(
        ids,
        batch_size=get_settings().PET_INFO_BATCH_SIZE,
        fetch=client.get_detail_pet_tour,
    )


@router.get("/stats", response_model=StatsSummary, responses=ERROR_RESPONSES)
async def get_stats(client: TourApiClient = Depends(get_client)) -> StatsSummary:  # noqa: B008
    """지역/타입별 관광지 수 요약."""
    return await get_stats_summary(client)
