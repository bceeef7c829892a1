"""반려동물 동반 정보 배치 조회 및 필터링."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, Mapping, Sequence

from mytrip.core.logger import get_logger
from mytrip.schemas.enums import PetSize
from mytrip.schemas.tour import PetTourInfo, TourItem

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 10

PetInfoFetcher = Callable[[str], Awaitable[PetTourInfo | None]]

_PET_SIZE_KEYWORDS: dict[PetSize, tuple[str, ...]] = {
    PetSize.SMALL: ("소형", "소"),
    PetSize.MEDIUM: ("중형", "중"),
    PetSize.LARGE: ("대형", "대"),
    PetSize.ALL: (),
}


def _chunks(items: Sequence[str], size: int) -> Iterable[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def batch_get_pet_tour_info(
    content_ids: Sequence[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
    fetch: PetInfoFetcher | None = None,
) -> dict[str, PetTourInfo | None]:
    """관광지별 반려동물 정보를 `batch_size` 단위로 조회합니다.

    배치 안에서는 동시에, 배치끼리는 순서대로 호출해 동시 요청 수를 제한한다.
    개별 실패는 로그만 남기고 해당 ID를 None으로 채운다.

    Args:
        content_ids: 관광지 ID 목록
        batch_size: 한 번에 동시에 보낼 요청 수
        fetch: ID 하나를 조회하는 코루틴 함수 (기본값: 관광 API 클라이언트)

    Returns:
        ID → 반려동물 정보(없으면 None) 매핑
    """
    if fetch is None:
        from mytrip.services.tour_api_client import get_tour_api_client

        fetch = get_tour_api_client().get_detail_pet_tour

    size = max(1, int(batch_size))
    result: dict[str, PetTourInfo | None] = {}

    for batch in _chunks(list(content_ids), size):
        outcomes = await asyncio.gather(*(fetch(content_id) for content_id in batch), return_exceptions=True)
        for content_id, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                logger.error("Pet tour info fetch failed: content_id=%s error=%s", content_id, outcome)
                result[content_id] = None
            else:
                result[content_id] = outcome

    failed = sum(1 for value in result.values() if value is None)
    logger.info("Pet tour info batch completed: requested=%d without_info=%d", len(result), failed)
    return result


def is_pet_friendly(pet_info: PetTourInfo | None) -> bool:
    """동반 가능 표시(chkpetleash == "Y")가 있는지 반환합니다."""
    if pet_info is None:
        return False
    return (pet_info.chkpetleash or "").strip().upper() == "Y"


def matches_pet_size(pet_info: PetTourInfo | None, pet_size: PetSize | str) -> bool:
    """크기 필터 조건을 만족하는지 반환합니다. 정보가 없거나 ALL이면 통과."""
    size = PetSize(pet_size)
    if pet_info is None or size is PetSize.ALL:
        return True

    keywords = _PET_SIZE_KEYWORDS[size]
    value = pet_info.chkpetsize or ""
    return any(keyword in value for keyword in keywords)


def filter_pet_friendly_tours(
    tours: Iterable[TourItem],
    pet_info_map: Mapping[str, PetTourInfo | None],
    pet_size: PetSize | str | None = None,
) -> list[TourItem]:
    """반려동물 동반 가능한 관광지만 남깁니다."""
    filtered: list[TourItem] = []
    for tour in tours:
        pet_info = pet_info_map.get(tour.content_id)
        if not is_pet_friendly(pet_info):
            continue
        if pet_size and PetSize(pet_size) is not PetSize.ALL and not matches_pet_size(pet_info, pet_size):
            continue
        filtered.append(tour)
    return filtered
