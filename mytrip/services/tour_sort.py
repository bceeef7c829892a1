"""관광지 목록 정렬."""

from __future__ import annotations

from typing import Iterable

from mytrip.schemas.enums import TourSort
from mytrip.schemas.tour import TourItem


def sort_tours(items: Iterable[TourItem], sort: TourSort | str = TourSort.LATEST) -> list[TourItem]:
    """최신 수정순(latest) 또는 제목 가나다순(name)으로 정렬합니다."""
    order = TourSort(sort)
    if order is TourSort.NAME:
        return sorted(items, key=lambda item: item.title)
    # modifiedtime은 YYYYMMDDHHmmss 고정 폭이라 문자열 비교로 충분하다.
    return sorted(items, key=lambda item: item.modified_time, reverse=True)
