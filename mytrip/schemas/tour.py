"""한국관광공사 API(KorService2) 응답을 표준화한 모델.

업스트림 필드명(contentid, addr1 ...)은 alias로 유지하고, 파이썬 속성은
snake_case를 사용한다. 응답 직렬화는 alias 기준이며 None 필드는 생략한다.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from mytrip.core.coordinate import katec_to_wgs84
from mytrip.core.geo import GeoPoint
from mytrip.schemas.enums import ContentType

_MODIFIED_TIME_FORMAT = "%Y%m%d%H%M%S"


class TourApiModel(BaseModel):
    """관광 API 레코드 공통 설정."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        coerce_numbers_to_str=True,
    )


class TourItem(TourApiModel):
    """관광지 목록 항목 (areaBasedList2, searchKeyword2)."""

    content_id: str = Field(..., alias="contentid", description="콘텐츠 ID")
    content_type_id: str = Field(..., alias="contenttypeid", description="관광 타입 ID")
    title: str = Field(..., description="제목")
    addr1: str = Field(..., description="주소")
    addr2: str | None = Field(default=None, description="상세주소")
    area_code: str | None = Field(default=None, alias="areacode", description="지역코드")
    first_image: str | None = Field(default=None, alias="firstimage", description="대표이미지")
    first_image2: str | None = Field(default=None, alias="firstimage2", description="대표이미지 썸네일")
    tel: str | None = Field(default=None, description="전화번호")
    cat1: str | None = Field(default=None, description="대분류")
    cat2: str | None = Field(default=None, description="중분류")
    cat3: str | None = Field(default=None, description="소분류")
    mapx: str = Field(default="", description="경도 (10^7 배율 정수 문자열)")
    mapy: str = Field(default="", description="위도 (10^7 배율 정수 문자열)")
    modified_time: str = Field(default="", alias="modifiedtime", description="수정일 (YYYYMMDDHHmmss)")

    def coordinates(self) -> GeoPoint:
        """지도 표시용 위경도를 반환합니다."""
        return katec_to_wgs84(self.mapx, self.mapy)

    def modified_at(self) -> datetime | None:
        try:
            return datetime.strptime(self.modified_time, _MODIFIED_TIME_FORMAT)
        except (TypeError, ValueError):
            return None


class TourDetail(TourItem):
    """관광지 상세 정보 (detailCommon2)."""

    overview: str | None = Field(default=None, description="개요")
    zipcode: str | None = Field(default=None, description="우편번호")
    homepage: str | None = Field(default=None, description="홈페이지 (HTML 조각)")


class TourIntro(TourApiModel):
    """운영 정보 (detailIntro2) 공통 필드. 타입별 필드는 하위 모델이 가진다."""

    content_id: str = Field(..., alias="contentid")
    content_type_id: str = Field(..., alias="contenttypeid")
    usetime: str | None = Field(default=None, description="이용시간")
    restdate: str | None = Field(default=None, description="휴무일")
    infocenter: str | None = Field(default=None, description="문의처")
    parking: str | None = Field(default=None, description="주차 가능 여부")
    chkpet: str | None = Field(default=None, description="반려동물 동반 가능 여부")


class AttractionIntro(TourIntro):
    expguide: str | None = None
    expagerange: str | None = None


class CultureIntro(TourIntro):
    usefee: str | None = None
    usetimeculture: str | None = None
    restdateculture: str | None = None


class FestivalIntro(TourIntro):
    playtime: str | None = None
    eventstartdate: str | None = None
    eventenddate: str | None = None
    eventplace: str | None = None
    eventhomepage: str | None = None


class CourseIntro(TourIntro):
    distance: str | None = None
    taketime: str | None = None


class LeisureIntro(TourIntro):
    usefeeleports: str | None = None
    usetimeleports: str | None = None


class LodgingIntro(TourIntro):
    checkintime: str | None = None
    checkouttime: str | None = None


class ShoppingIntro(TourIntro):
    opentime: str | None = None
    saleitem: str | None = None


class RestaurantIntro(TourIntro):
    firstmenu: str | None = None
    treatmenu: str | None = None
    opentimefood: str | None = None
    restdatefood: str | None = None


INTRO_MODELS: dict[ContentType, type[TourIntro]] = {
    ContentType.ATTRACTION: AttractionIntro,
    ContentType.CULTURE: CultureIntro,
    ContentType.FESTIVAL: FestivalIntro,
    ContentType.COURSE: CourseIntro,
    ContentType.LEISURE: LeisureIntro,
    ContentType.LODGING: LodgingIntro,
    ContentType.SHOPPING: ShoppingIntro,
    ContentType.RESTAURANT: RestaurantIntro,
}


def parse_intro(raw: dict[str, Any]) -> TourIntro:
    """contenttypeid에 맞는 운영 정보 모델로 변환합니다. 모르는 타입은 공통 모델."""
    try:
        model = INTRO_MODELS[ContentType(str(raw.get("contenttypeid", "")))]
    except ValueError:
        model = TourIntro
    return model.model_validate(raw)


class TourImage(TourApiModel):
    """관광지 이미지 (detailImage2)."""

    content_id: str = Field(..., alias="contentid")
    origin_img_url: str = Field(..., alias="originimgurl", description="원본 이미지 URL")
    small_image_url: str = Field(default="", alias="smallimageurl", description="썸네일 URL")
    img_name: str | None = Field(default=None, alias="imgname")
    serial_num: str | None = Field(default=None, alias="serialnum")


class PetTourInfo(TourApiModel):
    """반려동물 동반 여행 정보 (detailPetTour2)."""

    content_id: str = Field(..., alias="contentid")
    content_type_id: str | None = Field(default=None, alias="contenttypeid")
    chkpetleash: str | None = Field(default=None, description="동반 가능 여부 (Y/N)")
    chkpetsize: str | None = Field(default=None, description="동반 가능 크기")
    chkpetplace: str | None = Field(default=None, description="입장 가능 장소")
    chkpetfee: str | None = Field(default=None, description="추가 요금")
    petinfo: str | None = Field(default=None, description="기타 정보")


class AreaCode(TourApiModel):
    """지역 코드 (areaCode2)."""

    code: str = Field(..., description="지역코드")
    name: str = Field(..., description="지역명")
    rnum: int | None = Field(default=None, description="순번")


ItemT = TypeVar("ItemT", bound=BaseModel)


class TourApiHeader(BaseModel):
    result_code: str = Field(..., alias="resultCode")
    result_msg: str = Field(default="", alias="resultMsg")

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class TourApiPage(BaseModel, Generic[ItemT]):
    """파싱된 응답 봉투. items는 항상 리스트다."""

    header: TourApiHeader
    items: list[ItemT] = Field(default_factory=list)
    total_count: int = 0
    page_no: int = 1
    num_of_rows: int = 0


class TourListPage(BaseModel):
    """목록/검색 결과 한 페이지."""

    items: list[TourItem] = Field(default_factory=list, description="관광지 목록")
    total_count: int = Field(default=0, alias="totalCount", description="전체 개수")

    model_config = ConfigDict(populate_by_name=True)


class PlaceDetailResponse(BaseModel):
    """상세 페이지 묶음 응답. 부가 정보는 없으면 null/빈 배열이다."""

    detail: TourDetail
    coordinates: GeoPoint
    intro: SerializeAsAny[TourIntro] | None = None
    images: list[TourImage] = Field(default_factory=list)
    pet_tour: PetTourInfo | None = Field(default=None, alias="petTour")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """API 에러 응답 본문."""

    error: str = Field(..., description="사용자용 에러 메시지")
    code: str = Field(..., description="에러 코드")
    status_code: int = Field(..., alias="statusCode", description="HTTP 상태 코드")
    details: dict[str, Any] | None = Field(default=None, description="개발용 상세 정보")

    model_config = ConfigDict(populate_by_name=True)
