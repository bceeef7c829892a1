"""관광 API 응답 봉투 검증 및 정규화."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from mytrip.core.errors import TourApiMalformedResponseError, TourApiUpstreamError
from mytrip.schemas.tour import TourApiHeader, TourApiPage

SUCCESS_RESULT_CODE = "0000"

ModelT = TypeVar("ModelT", bound=BaseModel)


def normalize_items(raw: Any) -> list[dict[str, Any]]:
    """`items.item`을 항상 리스트로 만든다.

    업스트림은 결과가 하나면 배열 대신 객체를, 없으면 빈 문자열이나 키 자체를
    생략한다.
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return [item for item in raw if isinstance(item, dict)]
    if isinstance(raw, dict):
        return [raw]
    return []


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def decode_json(response: requests.Response) -> Any:
    """응답 본문을 JSON으로 읽습니다. 실패하면 봉투 오류로 취급합니다."""
    try:
        return response.json()
    except ValueError as exc:
        # serviceKey 오류 등은 XML로 내려온다.
        body = (response.text or "")[:200]
        raise TourApiMalformedResponseError(f"API 응답 형식이 올바르지 않습니다: {body}") from exc


def parse_tour_api_response(
    payload: Any,
    model: type[ModelT],
    item_parser: Callable[[dict[str, Any]], ModelT] | None = None,
) -> TourApiPage[ModelT]:
    """봉투를 검증하고 item을 `model` 리스트로 변환합니다.

    `item_parser`를 주면 항목별로 하위 모델을 고를 수 있다(운영 정보 등).
    """
    parse_item = item_parser or model.model_validate
    envelope = payload.get("response") if isinstance(payload, dict) else None
    if not isinstance(envelope, dict):
        raise TourApiMalformedResponseError("API 응답 형식이 올바르지 않습니다.")

    try:
        header = TourApiHeader.model_validate(envelope.get("header") or {})
    except ValidationError as exc:
        raise TourApiMalformedResponseError("API 응답 헤더가 올바르지 않습니다.") from exc

    if header.result_code != SUCCESS_RESULT_CODE:
        raise TourApiUpstreamError(header.result_code, header.result_msg)

    body = envelope.get("body") or {}
    if not isinstance(body, dict):
        raise TourApiMalformedResponseError("API 응답 본문이 올바르지 않습니다.")

    items_container = body.get("items")
    raw_items = items_container.get("item") if isinstance(items_container, dict) else None

    try:
        items = [parse_item(item) for item in normalize_items(raw_items)]
    except ValidationError as exc:
        raise TourApiMalformedResponseError(f"API 응답 항목이 올바르지 않습니다: {exc.error_count()}개 오류") from exc

    return TourApiPage[model](
        header=header,
        items=items,
        total_count=_to_int(body.get("totalCount"), 0),
        page_no=_to_int(body.get("pageNo"), 1),
        num_of_rows=_to_int(body.get("numOfRows"), 0),
    )
