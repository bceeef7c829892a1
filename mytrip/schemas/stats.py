"""통계 대시보드 응답 모델."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegionStats(BaseModel):
    """지역별 관광지 수."""

    region_code: str = Field(..., alias="regionCode", description="지역코드 (예: 1 = 서울)")
    region_name: str = Field(..., alias="regionName", description="지역명")
    count: int = Field(..., ge=0, description="관광지 개수")

    model_config = ConfigDict(populate_by_name=True)


class TypeStats(BaseModel):
    """관광 타입별 관광지 수."""

    type_id: str = Field(..., alias="typeId", description="관광 타입 ID (예: 12 = 관광지)")
    type_name: str = Field(..., alias="typeName", description="타입명")
    count: int = Field(..., ge=0, description="관광지 개수")

    model_config = ConfigDict(populate_by_name=True)


class StatsSummary(BaseModel):
    """통계 요약."""

    total_count: int = Field(..., alias="totalCount", description="전체 관광지 수")
    top_regions: list[RegionStats] = Field(default_factory=list, alias="topRegions", description="상위 3개 지역")
    top_types: list[TypeStats] = Field(default_factory=list, alias="topTypes", description="상위 3개 타입")
    last_updated: datetime = Field(..., alias="lastUpdated", description="집계 시각")

    model_config = ConfigDict(populate_by_name=True)
