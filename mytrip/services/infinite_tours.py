"""무한 스크롤용 페이지 누적기.

첫 페이지(호출자 제공)에서 시작해 `load_more()`마다 다음 페이지를 받아 뒤에 붙인다.
단일 이벤트 루프를 가정하며, 동시 호출은 락이 아니라 첫 await 이전에 세우는
in-flight 플래그로 막는다. `reset()` 이전에 시작된 요청의 응답은 세대(generation)
번호로 걸러서 버린다.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from typing import Awaitable, Callable, Iterable

import requests

from mytrip.core.errors import TourApiHttpError, TourApiMalformedResponseError, TourApiNetworkError
from mytrip.core.logger import get_logger
from mytrip.core.timeout_policy import to_requests_timeout
from mytrip.schemas.enums import TourSort
from mytrip.schemas.tour import TourItem, TourListPage
from mytrip.services.tour_api_client import TourApiClient
from mytrip.services.tour_sort import sort_tours

logger = get_logger(__name__)

DEFAULT_NUM_OF_ROWS = 20
LOAD_MORE_ERROR_MESSAGE = "다음 페이지를 불러오는 중 오류가 발생했습니다."


@dataclass(frozen=True, slots=True)
class TourQuery:
    """필터/검색 키. 값이 바뀌면 누적 상태를 초기화해야 한다."""

    keyword: str | None = None
    area_code: str | None = None
    content_type_id: str | None = None

    @property
    def is_search(self) -> bool:
        return bool(self.keyword and self.keyword.strip())

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.is_search:
            params["keyword"] = self.keyword.strip()
        if self.area_code:
            params["areaCode"] = self.area_code
        if self.content_type_id:
            params["contentTypeId"] = self.content_type_id
        return params


PageFetcher = Callable[[TourQuery, int, int], Awaitable[TourListPage]]


class AggregatorStatus(StrEnum):
    """누적기 상태. ERROR는 마지막 요청이 실패했을 뿐 다시 시도할 수 있는 상태다."""

    IDLE = "idle"
    FETCHING = "fetching"
    EXHAUSTED = "exhausted"
    ERROR = "error"


class InfiniteTourAggregator:
    """관광지 목록 페이지를 순서대로 누적합니다."""

    def __init__(
        self,
        initial_items: Iterable[TourItem],
        total_count: int,
        fetch_page: PageFetcher,
        query: TourQuery | None = None,
        num_of_rows: int = DEFAULT_NUM_OF_ROWS,
    ) -> None:
        self._fetch_page = fetch_page
        self._num_of_rows = num_of_rows
        self._initial_items = list(initial_items)
        self._initial_total_count = int(total_count)
        self._query = query or TourQuery()
        self._generation = 0
        self._restore_initial_state()

    def _restore_initial_state(self) -> None:
        self._items: list[TourItem] = list(self._initial_items)
        self._total_count = self._initial_total_count
        self._page = 1
        self._error: str | None = None
        self._in_flight = False

    @property
    def items(self) -> list[TourItem]:
        return list(self._items)

    def sorted_items(self, sort: TourSort | str = TourSort.LATEST) -> list[TourItem]:
        """누적된 전체 목록을 정렬한 사본. 저장된 도착 순서는 바꾸지 않는다."""
        return sort_tours(self._items, sort)

    @property
    def total_count(self) -> int:
        return self._total_count

    @property
    def page(self) -> int:
        return self._page

    @property
    def query(self) -> TourQuery:
        return self._query

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._in_flight

    @property
    def has_more(self) -> bool:
        return len(self._items) < self._total_count

    @property
    def status(self) -> AggregatorStatus:
        if self._in_flight:
            return AggregatorStatus.FETCHING
        if not self.has_more:
            return AggregatorStatus.EXHAUSTED
        if self._error is not None:
            return AggregatorStatus.ERROR
        return AggregatorStatus.IDLE

    @property
    def can_load_more(self) -> bool:
        return not self._in_flight and self.has_more

    async def load_more(self) -> bool:
        """다음 페이지를 불러와 붙입니다. 실제로 붙였으면 True.

        이미 요청 중이거나 더 불러올 항목이 없으면 아무것도 하지 않는다.
        실패는 예외 대신 `error`에 메시지로 남긴다.
        """
        if not self.can_load_more:
            return False

        # 첫 await 전에 플래그를 세워야 같은 틱의 두 번째 호출이 막힌다.
        self._in_flight = True
        self._error = None
        generation = self._generation
        next_page = self._page + 1

        try:
            result = await self._fetch_page(self._query, next_page, self._num_of_rows)
        except asyncio.CancelledError:
            # 취소된 요청은 실패가 아니다. 같은 세대라면 다시 불러올 수 있게 풀어준다.
            if generation == self._generation:
                self._in_flight = False
                logger.info("Infinite scroll load cancelled: page=%d", next_page)
            raise
        except Exception as exc:
            if generation != self._generation:
                logger.info("Discarding stale load_more failure: page=%d error=%s", next_page, exc)
                return False
            self._error = str(exc) or LOAD_MORE_ERROR_MESSAGE
            self._in_flight = False
            logger.error("Infinite scroll load failed: page=%d query=%s error=%s", next_page, self._query, exc)
            return False

        if generation != self._generation:
            logger.info("Discarding stale page after reset: page=%d items=%d", next_page, len(result.items))
            return False

        self._items.extend(result.items)
        self._page = next_page
        self._total_count = result.total_count
        if not result.items:
            # 빈 페이지가 오면 total_count와 무관하게 더 이상 요청하지 않는다.
            self._total_count = len(self._items)
        self._in_flight = False
        logger.debug(
            "Infinite scroll page appended: page=%d accumulated=%d total_count=%d",
            self._page,
            len(self._items),
            self._total_count,
        )
        return True

    def reset(
        self,
        initial_items: Iterable[TourItem] | None = None,
        total_count: int | None = None,
        query: TourQuery | None = None,
    ) -> None:
        """누적 상태를 버리고 첫 페이지로 되돌립니다.

        필터/검색 키가 바뀌면 새 첫 페이지와 함께 호출한다. 진행 중인 요청은
        취소하지 않지만 그 응답은 반영되지 않는다.
        """
        if initial_items is not None:
            self._initial_items = list(initial_items)
        if total_count is not None:
            self._initial_total_count = int(total_count)
        if query is not None:
            self._query = query
        self._generation += 1
        self._restore_initial_state()


class SentinelObserver:
    """뷰포트 교차 신호를 받아 `load_more()`를 한 번에 하나씩 실행합니다.

    신호는 크기 1짜리 큐에 쌓이며, 이미 대기 중인 신호가 있으면 버린다.
    """

    def __init__(self, aggregator: InfiniteTourAggregator) -> None:
        self._aggregator = aggregator
        self._queue: asyncio.Queue[bool] = asyncio.Queue(maxsize=1)
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._consume())

    def notify(self, is_intersecting: bool) -> bool:
        """센티널 교차 상태를 전달합니다. 로드가 예약되면 True."""
        if not is_intersecting or not self._aggregator.can_load_more:
            return False
        try:
            self._queue.put_nowait(True)
        except asyncio.QueueFull:
            return False
        return True

    async def wait_idle(self) -> None:
        """예약된 로드가 모두 끝날 때까지 기다립니다."""
        await self._queue.join()

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _consume(self) -> None:
        while True:
            await self._queue.get()
            try:
                await self._aggregator.load_more()
            finally:
                self._queue.task_done()


def client_page_fetcher(client: TourApiClient) -> PageFetcher:
    """관광 API를 직접 호출하는 페이지 fetcher. 키워드가 있으면 검색을 쓴다."""

    async def _fetch(query: TourQuery, page_no: int, num_of_rows: int) -> TourListPage:
        if query.is_search:
            return await client.search_keyword(
                query.keyword, query.area_code, query.content_type_id, num_of_rows, page_no
            )
        return await client.get_area_based_list(query.area_code, query.content_type_id, num_of_rows, page_no)

    return _fetch


def http_page_fetcher(base_url: str, timeout_seconds: int = 10) -> PageFetcher:
    """로컬 `/api/tours` 엔드포인트를 호출하는 페이지 fetcher."""
    endpoint = f"{base_url.rstrip('/')}/api/tours"
    request_timeout = to_requests_timeout(timeout_seconds)

    async def _fetch(query: TourQuery, page_no: int, num_of_rows: int) -> TourListPage:
        request_params = {**query.to_params(), "numOfRows": str(num_of_rows), "pageNo": str(page_no)}

        def _send() -> requests.Response:
            return requests.get(endpoint, params=request_params, timeout=request_timeout)

        try:
            response = await asyncio.to_thread(_send)
        except requests.RequestException as exc:
            raise TourApiNetworkError(f"네트워크 에러: {exc}") from exc

        if not response.ok:
            try:
                error_body = response.json()
            except ValueError:
                error_body = {}
            message = error_body.get("error") if isinstance(error_body, dict) else None
            raise TourApiHttpError(
                message or f"HTTP {response.status_code}: {response.reason}",
                response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise TourApiMalformedResponseError("잘못된 응답 형식입니다.") from exc
        if not isinstance(data, dict) or not isinstance(data.get("items"), list):
            raise TourApiMalformedResponseError("잘못된 응답 형식입니다.")
        return TourListPage.model_validate(data)

    return _fetch
