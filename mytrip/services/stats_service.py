"""지역별/타입별 관광지 수 집계.

집계는 `numOfRows=1` 조회의 totalCount만 사용한다. 개별 지역/타입 실패는
로그만 남기고 결과에서 뺀다.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from mytrip.core.errors import TourApiError
from mytrip.core.logger import get_logger
from mytrip.schemas.enums import REGION_LABELS, TOUR_TYPE_LABELS, ContentType
from mytrip.schemas.stats import RegionStats, StatsSummary, TypeStats
from mytrip.schemas.tour import AreaCode
from mytrip.services.tour_api_client import TourApiClient

logger = get_logger(__name__)

TOP_N = 3
AREA_CODE_PAGE_SIZE = 100


async def _count(client: TourApiClient, area_code: str | None, content_type_id: str | None) -> int:
    page = await client.get_area_based_list(area_code, content_type_id, num_of_rows=1, page_no=1)
    return page.total_count


async def get_region_stats(client: TourApiClient) -> list[RegionStats]:
    """지역별 관광지 수를 내림차순으로 반환합니다."""
    areas = await client.get_area_codes(num_of_rows=AREA_CODE_PAGE_SIZE, page_no=1)

    async def _region(area: AreaCode) -> RegionStats | None:
        try:
            count = await _count(client, area.code, None)
        except TourApiError as exc:
            logger.error("Region stats fetch failed: area_code=%s error=%s", area.code, exc)
            return None
        return RegionStats(
            region_code=area.code,
            region_name=REGION_LABELS.get(area.code, area.name),
            count=count,
        )

    results = await asyncio.gather(*(_region(area) for area in areas))
    stats = [stat for stat in results if stat is not None]
    return sorted(stats, key=lambda stat: stat.count, reverse=True)


async def get_type_stats(client: TourApiClient) -> list[TypeStats]:
    """관광 타입별 관광지 수를 내림차순으로 반환합니다."""

    async def _type(content_type: ContentType) -> TypeStats | None:
        try:
            count = await _count(client, None, content_type.value)
        except TourApiError as exc:
            logger.error("Type stats fetch failed: content_type_id=%s error=%s", content_type.value, exc)
            return None
        return TypeStats(type_id=content_type.value, type_name=TOUR_TYPE_LABELS[content_type], count=count)

    results = await asyncio.gather(*(_type(content_type) for content_type in ContentType))
    stats = [stat for stat in results if stat is not None]
    return sorted(stats, key=lambda stat: stat.count, reverse=True)


async def get_stats_summary(client: TourApiClient) -> StatsSummary:
    """전체 관광지 수와 상위 지역/타입을 요약합니다.

    전체 수 조회가 실패하거나 0이면 타입별 합계, 그다음 지역별 합계로 대신한다.
    """

    async def _regions() -> list[RegionStats]:
        try:
            return await get_region_stats(client)
        except TourApiError as exc:
            logger.error("Region stats collection failed: %s", exc)
            return []

    async def _types() -> list[TypeStats]:
        try:
            return await get_type_stats(client)
        except TourApiError as exc:
            logger.error("Type stats collection failed: %s", exc)
            return []

    async def _total() -> int:
        try:
            return await _count(client, None, None)
        except TourApiError as exc:
            logger.error("Total tour count fetch failed: %s", exc)
            return 0

    region_stats, type_stats, total_count = await asyncio.gather(_regions(), _types(), _total())

    if total_count == 0:
        type_sum = sum(stat.count for stat in type_stats)
        total_count = type_sum if type_sum > 0 else sum(stat.count for stat in region_stats)
        logger.warning("Total tour count unavailable, using fallback sum: total_count=%d", total_count)

    return StatsSummary(
        total_count=total_count,
        top_regions=region_stats[:TOP_N],
        top_types=type_stats[:TOP_N],
        last_updated=datetime.now(timezone.utc),
    )
