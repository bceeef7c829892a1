"""관광 API 키와 주요 오퍼레이션 호출을 수동으로 점검하는 스크립트."""

import asyncio
import os

from dotenv import load_dotenv

from mytrip.core.errors import TourApiError
from mytrip.services.tour_api_client import TourApiClient

# .env 파일 로드
load_dotenv()


async def _run() -> bool:
    client = TourApiClient.from_settings()

    areas = await client.get_area_codes(num_of_rows=5)
    print(f"✅ 지역코드 조회 성공: {[area.name for area in areas]}")

    page = await client.get_area_based_list(area_code="1", num_of_rows=3)
    print(f"✅ 서울 관광지 목록 조회 성공: 전체 {page.total_count}건")
    if not page.items:
        print("⚠️ 목록이 비어 있어 상세 조회를 건너뜁니다.")
        return True

    first = page.items[0]
    detail = await client.get_detail_common(first.content_id)
    point = detail.coordinates()
    print(f"✅ 상세 조회 성공: {detail.title} ({point.lat:.5f}, {point.lng:.5f})")

    pet_info = await client.get_detail_pet_tour(first.content_id)
    print(f"🐾 반려동물 정보: {'있음' if pet_info else '없음'}")
    return True


def main():
    print("🔑 관광 API 점검 시작...")

    if not os.getenv("TOUR_API_KEY"):
        print("❌ 실패: .env 파일에 TOUR_API_KEY가 없습니다!")
        return

    try:
        asyncio.run(_run())
    except TourApiError as exc:
        print(f"❌ 실패: [{exc.code}] {exc}")


if __name__ == "__main__":
    main()
