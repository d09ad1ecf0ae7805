"""Engine factory - 설정으로부터 엔진 구성요소를 조립

세션/캐시 상태는 여기서 만든 인스턴스가 소유합니다 (모듈 전역 싱글톤 없음).
"""

from dataclasses import dataclass
from typing import Optional

from src.core.config import Settings, settings as default_settings
from src.crawlers.http_client import get_shared_http_client
from src.crawlers.opac import OpacHttpSearch, RequestThrottler, SessionManager
from src.scheduler.cache_sweeper import CacheSweeper
from src.services.impl.cache_service import CacheService

from .orchestrator import AvailabilityEngine


@dataclass
class EngineBundle:
    engine: AvailabilityEngine
    cache: CacheService
    session: SessionManager
    throttler: RequestThrottler
    sweeper: CacheSweeper


def build_engine(config: Optional[Settings] = None, client=None) -> EngineBundle:
    """설정값으로 엔진과 구성요소를 생성

    Args:
        config: 설정 (없으면 전역 settings)
        client: HTTP 클라이언트 (없으면 공유 curl_cffi 클라이언트)
    """
    cfg = config or default_settings
    http = client or get_shared_http_client()

    cache = CacheService(ttl_seconds=cfg.cache_ttl)
    session = SessionManager(
        http,
        base_url=cfg.opac_base_url,
        login_id=cfg.opac_login_id,
        ttl_s=cfg.session_ttl_s,
        request_timeout_s=cfg.opac_request_timeout_s,
    )
    throttler = RequestThrottler(
        max_concurrent=cfg.throttle_max_concurrent,
        min_interval_s=cfg.throttle_min_interval_ms / 1000.0,
    )
    searcher = OpacHttpSearch(
        http,
        base_url=cfg.opac_base_url,
        throttler=throttler,
        request_timeout_s=cfg.opac_request_timeout_s,
    )
    engine = AvailabilityEngine(
        cache=cache,
        session_manager=session,
        searcher=searcher,
        base_url=cfg.opac_base_url,
        query_timeout_s=cfg.query_timeout_s,
    )
    sweeper = CacheSweeper(cache, interval_s=cfg.cache_sweep_interval_s)
    return EngineBundle(engine=engine, cache=cache, session=session, throttler=throttler, sweeper=sweeper)
