"""
수동 조회 테스트 - 실제 HFF WebOPAC에서 가용성 확인
"""
import asyncio

from src.crawlers.http_client import shutdown_shared_http_client
from src.engine import Query
from src.engine.factory import build_engine


async def check_real_catalog():
    """실제 카탈로그 조회 테스트"""
    test_films = [
        Query("Paris, Texas", "1984"),
        Query("Stalker"),
        Query("Nonexistent Film", "9999"),
    ]

    bundle = build_engine()
    try:
        for q in test_films:
            print(f"\n{'='*60}")
            print(f"검색: {q.title} ({q.year or '-'})")
            print('='*60)

            result = await bundle.engine.find_availability(q)
            if result.link:
                print(f"{'✅ 대출 가능' if result.available else '⚠️ 대출 불가'}")
                print(f"  - 제목: {result.title}")
                print(f"  - 점수: {result.match_score}")
                print(f"  - 링크: {result.link}")
            else:
                print(f"❌ {result.error or result.note or '결과 없음'}")
        print(f"\n세션 핸드셰이크 횟수: {bundle.session.handshake_count}")
    finally:
        await shutdown_shared_http_client()


if __name__ == "__main__":
    asyncio.run(check_real_catalog())
