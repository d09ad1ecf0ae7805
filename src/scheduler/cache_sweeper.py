"""결과 캐시 주기 정리 스케줄러

조회 활동과 무관하게 고정 주기로 CacheService.sweep()을 실행합니다.
sweep()은 동기 dict 정리라서 진행 중인 조회를 막지 않습니다.
"""

import asyncio
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.core.logging import logger
from src.services.impl.cache_service import CacheService


class CacheSweeper:
    """캐시 만료 항목 정리 작업 (APScheduler interval job)"""

    JOB_ID = "cache_sweep"

    def __init__(self, cache: CacheService, interval_s: float = 300.0):
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.cache = cache
        self.interval_s = interval_s
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """APScheduler를 사용한 스케줄링 설정 (실행 중인 이벤트 루프에서 호출)"""
        if self.is_running:
            return
        scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop())
        scheduler.add_job(
            self.run_sweep,
            trigger=IntervalTrigger(seconds=self.interval_s),
            id=self.JOB_ID,
            name="Result cache sweep",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(f"[Scheduler] Cache sweep scheduled every {self.interval_s:.0f}s")

    def stop(self) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("[Scheduler] Cache sweeper stopped")

    async def run_sweep(self) -> int:
        """스케줄러 job: 이벤트 루프 위에서 실행 (코루틴이라 스레드 풀로 가지 않음)"""
        try:
            return self.cache.sweep()
        except Exception as e:
            logger.error(f"[Scheduler] Cache sweep failed: {e}", exc_info=True)
            return 0
