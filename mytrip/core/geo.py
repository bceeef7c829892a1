"""위경도 좌표와 사각형 영역 유틸리티."""

from __future__ import annotations

import math
from dataclasses import dataclass

_MIN_LAT = -90.0
_MAX_LAT = 90.0
_MIN_LNG = -180.0
_MAX_LNG = 180.0
_EPSILON = 1e-6


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """WGS84 위경도 좌표."""

    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True, slots=True)
class GeoRectangle:
    """좌표 유효성 검증에 사용하는 위경도 사각형."""

    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float

    def __post_init__(self) -> None:
        min_lat, max_lat = sorted((float(self.min_lat), float(self.max_lat)))
        min_lng, max_lng = sorted((float(self.min_lng), float(self.max_lng)))

        min_lat = _clamp(min_lat, _MIN_LAT, _MAX_LAT)
        max_lat = _clamp(max_lat, _MIN_LAT, _MAX_LAT)
        min_lng = _clamp(min_lng, _MIN_LNG, _MAX_LNG)
        max_lng = _clamp(max_lng, _MIN_LNG, _MAX_LNG)

        if math.isclose(min_lat, max_lat):
            min_lat = _clamp(min_lat - _EPSILON, _MIN_LAT, _MAX_LAT)
            max_lat = _clamp(max_lat + _EPSILON, _MIN_LAT, _MAX_LAT)
        if math.isclose(min_lng, max_lng):
            min_lng = _clamp(min_lng - _EPSILON, _MIN_LNG, _MAX_LNG)
            max_lng = _clamp(max_lng + _EPSILON, _MIN_LNG, _MAX_LNG)

        object.__setattr__(self, "min_lat", min_lat)
        object.__setattr__(self, "min_lng", min_lng)
        object.__setattr__(self, "max_lat", max_lat)
        object.__setattr__(self, "max_lng", max_lng)

    def contains(self, latitude: float, longitude: float) -> bool:
        """점이 사각형 내부(경계 포함)에 있는지 반환합니다."""
        lat = float(latitude)
        lng = float(longitude)
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng

    def contains_point(self, point: GeoPoint) -> bool:
        return self.contains(point.lat, point.lng)


# 한반도 남부 영역 (경도 124~132, 위도 33~43)
KOREA_BOUNDS = GeoRectangle(min_lat=33.0, min_lng=124.0, max_lat=43.0, max_lng=132.0)
