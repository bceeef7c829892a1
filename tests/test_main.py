"""애플리케이션 진입점과 관광 API 엔드포인트 테스트."""

from __future__ import annotations

import importlib

import pytest
from fastapi.testclient import TestClient

from mytrip.api.dependencies import get_client
from mytrip.core.config import get_settings
from mytrip.services.tour_api_client import get_tour_api_client
from tests.mocks.mock_tour_api_client import MockTourApiClient


def _set_required_env(monkeypatch, **overrides: str) -> None:
    monkeypatch.setenv("TOUR_API_KEY", "test-service-key")
    monkeypatch.setenv("SERVICE_SECRET", "test-service-secret")
    monkeypatch.setenv("DOCS_MODE", "disabled")
    monkeypatch.setenv("EXPOSE_INTERNAL_ERRORS", "false")
    for key, value in overrides.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    get_tour_api_client.cache_clear()


def _load_main_module():
    import mytrip.main as main_module

    return importlib.reload(main_module)


def _client_with(monkeypatch, tour_client=None, **env: str) -> tuple[TestClient, MockTourApiClient]:
    _set_required_env(monkeypatch, **env)
    main_module = _load_main_module()
    mock_client = tour_client or MockTourApiClient()
    main_module.app.dependency_overrides[get_client] = lambda: mock_client
    return TestClient(main_module.app, raise_server_exceptions=False), mock_client


def test_health_check_endpoint(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "MyTrip Tour API is running"}


def test_docs_disabled_by_default(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)

    assert client.get("/docs").status_code == 404
    assert client.get("/redoc").status_code == 404
    assert client.get("/openapi.json").status_code == 404


def test_docs_secret_mode_requires_service_secret(monkeypatch) -> None:
    _set_required_env(monkeypatch, DOCS_MODE="secret")
    main_module = _load_main_module()

    client = TestClient(main_module.app)

    unauthorized = client.get("/docs")
    assert unauthorized.status_code == 401

    authorized = client.get("/docs", headers={"x-service-secret": "test-service-secret"})
    assert authorized.status_code == 200


def test_openapi_lists_tour_routes(monkeypatch) -> None:
    _set_required_env(monkeypatch, DOCS_MODE="public")
    main_module = _load_main_module()

    paths = main_module.app.openapi()["paths"]

    for path in ("/api/tours", "/api/areas", "/api/places/{content_id}", "/api/pet-info", "/api/stats"):
        assert path in paths


def test_security_headers_are_attached(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["referrer-policy"] == "no-referrer"
    assert response.headers["permissions-policy"] == "geolocation=(), microphone=(), camera=()"


def test_cors_allowlist_from_env(monkeypatch) -> None:
    _set_required_env(
        monkeypatch,
        CORS_ALLOW_ORIGINS="https://example.com",
        CORS_ALLOW_METHODS="GET,OPTIONS",
        CORS_ALLOW_HEADERS="Content-Type",
    )
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/", headers={"Origin": "https://example.com"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://example.com"


def test_list_tours_area_mode(monkeypatch) -> None:
    client, mock_client = _client_with(monkeypatch)

    response = client.get("/api/tours", params={"areaCode": "1"})

    assert response.status_code == 200
    body = response.json()
    assert body["totalCount"] == 2
    assert [item["contentid"] for item in body["items"]] == ["126508", "264337"]
    assert "addr2" not in body["items"][0]
    assert mock_client.calls[0] == ("get_area_based_list", ("1", None, 20, 1))


def test_list_tours_keyword_switches_to_search(monkeypatch) -> None:
    client, mock_client = _client_with(monkeypatch)

    response = client.get("/api/tours", params={"keyword": " 경복궁 ", "numOfRows": "5", "pageNo": "1"})

    assert response.status_code == 200
    assert [item["title"] for item in response.json()["items"]] == ["경복궁"]
    assert mock_client.calls[0] == ("search_keyword", ("경복궁", None, None, 5, 1))


def test_list_tours_blank_keyword_uses_area_listing(monkeypatch) -> None:
    client, mock_client = _client_with(monkeypatch)

    response = client.get("/api/tours", params={"keyword": "   "})

    assert response.status_code == 200
    assert mock_client.calls[0][0] == "get_area_based_list"


def test_list_tours_sort_by_name_and_latest(monkeypatch) -> None:
    client, _ = _client_with(monkeypatch)

    by_name = client.get("/api/tours", params={"sort": "name"}).json()
    latest = client.get("/api/tours", params={"sort": "latest"}).json()

    assert [item["title"] for item in by_name["items"]] == ["경복궁", "국립중앙박물관", "해운대해수욕장"]
    assert [item["contentid"] for item in latest["items"]] == ["126078", "126508", "264337"]


@pytest.mark.parametrize(
    "params",
    [
        {"numOfRows": "0"},
        {"numOfRows": "101"},
        {"numOfRows": "abc"},
        {"pageNo": "0"},
        {"pageNo": "-1"},
    ],
)
def test_list_tours_rejects_invalid_paging(monkeypatch, params) -> None:
    client, mock_client = _client_with(monkeypatch)

    response = client.get("/api/tours", params=params)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["statusCode"] == 400
    assert body["error"]
    assert mock_client.calls == []


def test_list_tours_without_api_key_returns_config_error(monkeypatch) -> None:
    _set_required_env(monkeypatch, TOUR_API_KEY="")
    main_module = _load_main_module()
    client = TestClient(main_module.app)

    response = client.get("/api/tours")

    assert response.status_code == 500
    assert response.json()["code"] == "CONFIG_ERROR"
    assert response.json()["statusCode"] == 500


def test_list_areas(monkeypatch) -> None:
    client, _ = _client_with(monkeypatch)

    response = client.get("/api/areas")

    assert response.status_code == 200
    assert [area["name"] for area in response.json()] == ["서울", "부산", "제주도"]


def test_place_detail_bundles_sections(monkeypatch) -> None:
    client, _ = _client_with(monkeypatch)

    response = client.get("/api/places/126508")

    assert response.status_code == 200
    body = response.json()
    assert body["detail"]["title"] == "경복궁"
    assert body["coordinates"]["lat"] == pytest.approx(37.5788222)
    assert body["intro"]["expguide"] == "해설 프로그램"
    assert len(body["images"]) == 1
    assert body["petTour"]["chkpetleash"] == "Y"


def test_place_detail_degrades_failed_sections(monkeypatch) -> None:
    client, _ = _client_with(monkeypatch, MockTourApiClient(failing_sections={"intro", "images"}))

    response = client.get("/api/places/264337")

    assert response.status_code == 200
    body = response.json()
    assert body["detail"]["contentid"] == "264337"
    assert "intro" not in body
    assert body["images"] == []
    assert "petTour" not in body


def test_place_detail_missing_returns_not_found(monkeypatch) -> None:
    client, _ = _client_with(monkeypatch)

    response = client.get("/api/places/999999")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_pet_info_batch_returns_null_for_missing(monkeypatch) -> None:
    client, _ = _client_with(monkeypatch)

    response = client.get("/api/pet-info", params={"contentIds": "126508, 264337,126508"})

    assert response.status_code == 200
    body = response.json()
    assert list(body) == ["126508", "264337"]
    assert body["126508"]["chkpetleash"] == "Y"
    assert body["264337"] is None


def test_pet_info_requires_ids(monkeypatch) -> None:
    client, _ = _client_with(monkeypatch)

    response = client.get("/api/pet-info", params={"contentIds": " , "})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_stats_summary(monkeypatch) -> None:
    client, _ = _client_with(monkeypatch)

    response = client.get("/api/stats")

    assert response.status_code == 200
    body = response.json()
    assert body["totalCount"] == 3
    assert body["topRegions"][0] == {"regionCode": "1", "regionName": "서울", "count": 2}
    assert body["topTypes"][0]["typeId"] == "12"
    assert "lastUpdated" in body


def test_unexpected_exception_returns_generic_error(monkeypatch) -> None:
    class _BrokenClient(MockTourApiClient):
        async def get_area_codes(self, num_of_rows: int = 10, page_no: int = 1):
            raise ValueError("boom")

    client, _ = _client_with(monkeypatch, _BrokenClient())

    response = client.get("/api/areas")

    assert response.status_code == 500
    assert response.json() == {"error": "알 수 없는 오류가 발생했습니다.", "code": "UNKNOWN_ERROR", "statusCode": 500}


def test_ready_endpoint_reports_missing_key(monkeypatch) -> None:
    _set_required_env(monkeypatch, TOUR_API_KEY="")

    async def _fake_tcp(*args, **kwargs):
        return {"status": "ok", "ok": True, "required": True, "detail": "mock-ok"}

    monkeypatch.setattr("mytrip.core.readiness._check_tcp_connectivity", _fake_tcp)
    main_module = _load_main_module()

    response = TestClient(main_module.app).get("/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"
