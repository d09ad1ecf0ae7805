"""Availability Routes (Engine Layer)

HTTP Layer는 Engine Layer로 요청을 위임하는 단순한 Translator 역할만 수행합니다.
엔진은 앱 lifespan에서 한 번 생성되어 app.state에 보관됩니다.
"""

from fastapi import APIRouter, Depends, Request

from src.core.logging import logger, sanitize_for_log
from src.engine import AvailabilityEngine
from src.schemas.availability_schema import (
    AvailabilityRequest,
    AvailabilityResponse,
    BatchAvailabilityRequest,
    BatchAvailabilityResponse,
    CacheClearResponse,
)

router = APIRouter(prefix="/api/v1", tags=["availability"])


def get_engine(request: Request) -> AvailabilityEngine:
    """lifespan에서 만든 AvailabilityEngine"""
    return request.app.state.engine


@router.post(
    "/availability",
    response_model=AvailabilityResponse,
    response_model_exclude_none=True,
)
async def check_availability(
    request: AvailabilityRequest,
    engine: AvailabilityEngine = Depends(get_engine),
):
    """영화 가용성 조회 API

    Flow:
        1. HTTP Request 수신 (pydantic 검증)
        2. Engine에 위임 (Cache → Session → Throttled Fetch → Match)
        3. 결과를 HTTP Response로 변환 (엔진은 예외를 던지지 않음)
    """
    logger.info(f"[API] Availability request: '{sanitize_for_log(request.title, 80)}' ({request.year or 'no-year'})")
    result = await engine.find_availability(request.to_query())
    return AvailabilityResponse.from_result(result)


@router.post(
    "/availability/batch",
    response_model=BatchAvailabilityResponse,
    response_model_exclude_none=True,
)
async def check_availability_batch(
    request: BatchAvailabilityRequest,
    engine: AvailabilityEngine = Depends(get_engine),
):
    """일괄 조회 API - 동시 실행, 결과는 요청 순서대로"""
    logger.info(f"[API] Batch availability request: {len(request.queries)} queries")
    results = await engine.find_many([q.to_query() for q in request.queries])
    return BatchAvailabilityResponse(results=[AvailabilityResponse.from_result(r) for r in results])


@router.delete("/availability/cache", response_model=CacheClearResponse)
async def clear_availability_cache(engine: AvailabilityEngine = Depends(get_engine)):
    """결과 캐시 비우기 (카탈로그 소장 변경 후 재조회용)"""
    cleared = engine.cache.clear()
    return CacheClearResponse(cleared=cleared)
