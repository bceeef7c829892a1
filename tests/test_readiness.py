"""Readiness 체크 유틸 테스트."""

from __future__ import annotations

import asyncio

from mytrip.core.config import get_settings
from mytrip.core.readiness import collect_readiness_status


def _set_required_env(monkeypatch, **overrides: str) -> None:
    monkeypatch.setenv("TOUR_API_KEY", "test-service-key")
    monkeypatch.setenv("SERVICE_SECRET", "test-service-secret")
    for key, value in overrides.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()


def test_collect_readiness_status_not_ready_when_api_key_missing(monkeypatch) -> None:
    _set_required_env(monkeypatch, TOUR_API_KEY="")

    async def _fake_tcp(*args, **kwargs):
        return {"status": "ok", "ok": True, "required": True, "detail": "mock-ok"}

    monkeypatch.setattr("mytrip.core.readiness._check_tcp_connectivity", _fake_tcp)

    result = asyncio.run(collect_readiness_status())

    assert result["status"] == "not_ready"
    assert result["checks"]["tour_api_key"]["status"] == "fail"


def test_collect_readiness_status_ready_with_reachable_upstream(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    captured: dict = {}

    async def _fake_tcp(host, port, timeout_seconds, label):
        captured.update({"host": host, "port": port, "timeout_seconds": timeout_seconds})
        return {"status": "ok", "ok": True, "required": True, "detail": "mock-ok"}

    monkeypatch.setattr("mytrip.core.readiness._check_tcp_connectivity", _fake_tcp)

    result = asyncio.run(collect_readiness_status())

    assert result["status"] == "ready"
    assert result["checks"]["tour_api"]["status"] == "ok"
    assert captured == {"host": "apis.data.go.kr", "port": 443, "timeout_seconds": 5}


def test_collect_readiness_status_not_ready_with_invalid_base_url(monkeypatch) -> None:
    _set_required_env(monkeypatch, TOUR_API_BASE_URL="not-a-url")

    result = asyncio.run(collect_readiness_status())

    assert result["status"] == "not_ready"
    assert result["checks"]["tour_api"]["status"] == "fail"
