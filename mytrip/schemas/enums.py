"""관광 API 코드 값 열거형과 표시용 라벨."""

from enum import StrEnum


class ContentType(StrEnum):
    """관광 타입 ID (contentTypeId)."""

    ATTRACTION = "12"
    CULTURE = "14"
    FESTIVAL = "15"
    COURSE = "25"
    LEISURE = "28"
    LODGING = "32"
    SHOPPING = "38"
    RESTAURANT = "39"


class PetSize(StrEnum):
    """반려동물 크기 필터 옵션."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ALL = "all"


class TourSort(StrEnum):
    """목록 정렬 옵션."""

    LATEST = "latest"
    NAME = "name"


TOUR_TYPE_LABELS: dict[ContentType, str] = {
    ContentType.ATTRACTION: "관광지",
    ContentType.CULTURE: "문화시설",
    ContentType.FESTIVAL: "축제/행사",
    ContentType.COURSE: "여행코스",
    ContentType.LEISURE: "레포츠",
    ContentType.LODGING: "숙박",
    ContentType.SHOPPING: "쇼핑",
    ContentType.RESTAURANT: "음식점",
}

REGION_LABELS: dict[str, str] = {
    "1": "서울",
    "2": "인천",
    "3": "대전",
    "4": "대구",
    "5": "광주",
    "6": "부산",
    "7": "울산",
    "8": "세종",
    "31": "경기",
    "32": "강원",
    "33": "충북",
    "34": "충남",
    "35": "경북",
    "36": "경남",
    "37": "전북",
    "38": "전남",
    "39": "제주",
}
