"""헬스 체크 엔드포인트"""
from fastapi import APIRouter, Depends
from datetime import datetime

from src.api.routes.availability_routes import get_engine
from src.engine import AvailabilityEngine
from src.schemas.availability_schema import HealthResponse
from src import __version__

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(engine: AvailabilityEngine = Depends(get_engine)):
    """
    헬스 체크 엔드포인트

    - 서버 상태
    - 카탈로그 세션 상태 (세션이 없어도 다음 요청에서 다시 맺으므로 ok)
    - 캐시 항목 수 / 진행 중 요청 수
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(),
        version=__version__,
        session_active=engine.session.is_active,
        cache_entries=len(engine.cache),
        in_flight=engine.searcher.in_flight,
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "Film Availability Service",
        "version": __version__,
        "docs": "/docs"
    }
