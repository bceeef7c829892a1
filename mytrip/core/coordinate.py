"""관광 API 좌표(mapx/mapy)를 지도용 WGS84 좌표로 변환합니다.

관광 API는 좌표를 10^7 배율의 정수 문자열로 내려준다(예: "1269817570").
값이 비었거나 0이면 적도/본초자오선에 마커가 찍히므로 기본 좌표로 대체한다.
"""

from __future__ import annotations

import math

from mytrip.core.geo import KOREA_BOUNDS, GeoPoint
from mytrip.core.logger import get_logger

logger = get_logger(__name__)

COORDINATE_SCALE = 10_000_000
# 서울 시청
DEFAULT_COORDINATE = GeoPoint(lat=37.5665, lng=126.9780)


def _parse_coordinate(value: str | int | float | None) -> float | None:
    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None
    try:
        numeric = float(raw)
    except ValueError:
        return None
    if not math.isfinite(numeric) or numeric == 0:
        return None
    return numeric


def katec_to_wgs84(mapx: str | int | float | None, mapy: str | int | float | None) -> GeoPoint:
    """mapx(경도)/mapy(위도) 쌍을 위경도로 변환합니다. 예외를 던지지 않습니다."""
    lng_raw = _parse_coordinate(mapx)
    lat_raw = _parse_coordinate(mapy)

    if lng_raw is None or lat_raw is None:
        logger.warning("Invalid tour coordinates, using default: mapx=%r mapy=%r", mapx, mapy)
        return DEFAULT_COORDINATE

    point = GeoPoint(lat=lat_raw / COORDINATE_SCALE, lng=lng_raw / COORDINATE_SCALE)
    if not KOREA_BOUNDS.contains_point(point):
        logger.warning("Tour coordinates outside Korea, using default: lat=%s lng=%s", point.lat, point.lng)
        return DEFAULT_COORDINATE

    return point
