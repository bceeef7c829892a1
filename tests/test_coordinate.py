"""관광 API 좌표 변환 테스트."""

from __future__ import annotations

import pytest

from mytrip.core.coordinate import DEFAULT_COORDINATE, katec_to_wgs84
from mytrip.core.geo import KOREA_BOUNDS, GeoPoint, GeoRectangle
from mytrip.schemas.tour import TourItem
from tests.mocks.tour_api_payloads import tour_item


def test_katec_to_wgs84_scales_fixed_point_values() -> None:
    point = katec_to_wgs84("1269817570", "375662570")

    assert point.lat == pytest.approx(37.566257)
    assert point.lng == pytest.approx(126.981757)


def test_katec_to_wgs84_accepts_numbers() -> None:
    point = katec_to_wgs84(1291603078, 351588092)

    assert point.lat == pytest.approx(35.1588092)
    assert point.lng == pytest.approx(129.1603078)


@pytest.mark.parametrize(
    ("mapx", "mapy"),
    [
        ("", ""),
        (None, None),
        ("0", "0"),
        ("abc", "375662570"),
        ("1269817570", "nan"),
        ("1269817570", ""),
    ],
)
def test_katec_to_wgs84_invalid_input_falls_back_to_city_hall(mapx, mapy) -> None:
    assert katec_to_wgs84(mapx, mapy) == DEFAULT_COORDINATE


def test_katec_to_wgs84_outside_korea_falls_back() -> None:
    # 도쿄
    assert katec_to_wgs84("1396917000", "356895000") == DEFAULT_COORDINATE


def test_default_coordinate_is_seoul_city_hall() -> None:
    assert DEFAULT_COORDINATE.to_dict() == {"lat": 37.5665, "lng": 126.9780}
    assert KOREA_BOUNDS.contains_point(DEFAULT_COORDINATE)


def test_geo_rectangle_contains_point_and_rectangle() -> None:
    seoul = GeoRectangle(37.4, 126.7, 37.7, 127.2)

    assert KOREA_BOUNDS.contains(seoul.max_lat, seoul.max_lng)
    assert seoul.contains(37.5, 127.0)
    assert seoul.contains_point(GeoPoint(lat=37.5665, lng=126.9780))
    assert not seoul.contains_point(GeoPoint(lat=35.1796, lng=129.0756))


def test_tour_item_coordinates_use_conversion() -> None:
    item = TourItem.model_validate(tour_item())

    point = item.coordinates()

    assert point.lat == pytest.approx(37.5788222)
    assert point.lng == pytest.approx(126.976993)
