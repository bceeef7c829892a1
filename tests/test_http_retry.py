"""관광 API 재시도 래퍼 테스트."""

from __future__ import annotations

import asyncio

import pytest
import requests

from mytrip.core.errors import TourApiHttpError, TourApiNetworkError, TourApiTimeoutError
from mytrip.services.http_retry import backoff_delay, fetch_with_retry
from tests.mocks.tour_api_payloads import make_response


def _install_fakes(monkeypatch, outcomes: list) -> tuple[dict, list[float]]:
    call_count = {"value": 0}
    sleep_delays: list[float] = []

    def _fake_get(*args, **kwargs):
        outcome = outcomes[min(call_count["value"], len(outcomes) - 1)]
        call_count["value"] += 1
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def _fake_sleep(delay: float) -> None:
        sleep_delays.append(delay)

    monkeypatch.setattr("mytrip.services.http_retry.requests.get", _fake_get)
    monkeypatch.setattr("mytrip.services.http_retry.asyncio.sleep", _fake_sleep)
    return call_count, sleep_delays


def test_fetch_with_retry_succeeds_after_server_errors(monkeypatch) -> None:
    call_count, sleep_delays = _install_fakes(
        monkeypatch,
        [
            make_response(500, reason="Internal Server Error"),
            make_response(503, reason="Service Unavailable"),
            make_response(200, {"ok": True}),
        ],
    )

    response = asyncio.run(fetch_with_retry("https://example.com/areaCode2", {"pageNo": "1"}, max_retries=3))

    assert response.status_code == 200
    assert call_count["value"] == 3
    assert sleep_delays == pytest.approx([1.0, 2.0])


def test_fetch_with_retry_raises_last_error_when_budget_exhausted(monkeypatch) -> None:
    call_count, sleep_delays = _install_fakes(monkeypatch, [make_response(500, reason="Internal Server Error")])

    with pytest.raises(TourApiHttpError) as exc_info:
        asyncio.run(fetch_with_retry("https://example.com/areaCode2", max_retries=3))

    assert exc_info.value.upstream_status == 500
    assert exc_info.value.status_code == 502
    assert call_count["value"] == 3
    assert sleep_delays == pytest.approx([1.0, 2.0])


def test_fetch_with_retry_does_not_retry_client_errors(monkeypatch) -> None:
    call_count, sleep_delays = _install_fakes(monkeypatch, [make_response(404, reason="Not Found")])

    with pytest.raises(TourApiHttpError) as exc_info:
        asyncio.run(fetch_with_retry("https://example.com/detailCommon2", max_retries=3))

    assert exc_info.value.upstream_status == 404
    assert exc_info.value.retryable is False
    assert call_count["value"] == 1
    assert sleep_delays == []


def test_fetch_with_retry_retries_timeouts_and_labels_them(monkeypatch) -> None:
    call_count, sleep_delays = _install_fakes(monkeypatch, [requests.Timeout("read timed out")])

    with pytest.raises(TourApiTimeoutError) as exc_info:
        asyncio.run(fetch_with_retry("https://example.com/areaBasedList2", max_retries=3, timeout_seconds=30))

    assert "시간 초과" in str(exc_info.value)
    assert "30000ms" in str(exc_info.value)
    assert call_count["value"] == 3
    assert sleep_delays == pytest.approx([1.0, 2.0])


def test_fetch_with_retry_recovers_from_connection_error(monkeypatch) -> None:
    call_count, sleep_delays = _install_fakes(
        monkeypatch,
        [requests.ConnectionError("connection reset"), make_response(200, {"ok": True})],
    )

    response = asyncio.run(fetch_with_retry("https://example.com/searchKeyword2", max_retries=3))

    assert response.json() == {"ok": True}
    assert call_count["value"] == 2
    assert sleep_delays == pytest.approx([1.0])


def test_fetch_with_retry_single_attempt_raises_network_error(monkeypatch) -> None:
    call_count, sleep_delays = _install_fakes(monkeypatch, [requests.ConnectionError("refused")])

    with pytest.raises(TourApiNetworkError):
        asyncio.run(fetch_with_retry("https://example.com/areaCode2", max_retries=1))

    assert call_count["value"] == 1
    assert sleep_delays == []


def test_backoff_delay_doubles_per_attempt() -> None:
    assert [backoff_delay(attempt) for attempt in range(3)] == [1.0, 2.0, 4.0]
    assert backoff_delay(2, base_seconds=0.5) == 2.0
