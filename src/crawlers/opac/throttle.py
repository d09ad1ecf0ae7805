"""Request Throttler - 카탈로그 서버 보호용 동시성 제한 + 요청 간격 조절

- 동시에 진행 중인 요청은 최대 N개
- 대기열은 FIFO: 빈 슬롯은 가장 오래 기다린 호출자에게 바로 넘김
- 슬롯을 얻은 뒤 요청 시작 간 최소 간격을 보장 (동시성 폭과 무관하게 부하 분산)
- slot() 컨텍스트 매니저는 예외/취소를 포함한 모든 경로에서 슬롯을 반납
"""

from __future__ import annotations

import asyncio
from collections import deque
from contextlib import asynccontextmanager
from typing import AsyncIterator, Deque, Optional

from src.core.logging import logger


class RequestThrottler:
    """FIFO 세마포어 + 요청 시작 간격 조절기"""

    def __init__(self, max_concurrent: int = 8, min_interval_s: float = 0.1) -> None:
        """
        Args:
            max_concurrent: 동시 진행 가능한 요청 수 (N)
            min_interval_s: 요청 시작 사이 최소 간격 (초)
        """
        if max_concurrent <= 0:
            raise ValueError("max_concurrent must be positive")
        if min_interval_s < 0:
            raise ValueError("min_interval_s must be >= 0")

        self.max_concurrent = max_concurrent
        self.min_interval_s = min_interval_s

        self._active = 0
        self._waiters: Deque[asyncio.Future] = deque()
        self._next_start: Optional[float] = None
        self.peak_in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._active

    @property
    def waiting(self) -> int:
        return sum(1 for w in self._waiters if not w.done())

    async def acquire(self) -> None:
        """슬롯 확보 + 간격 대기. 취소되면 확보한 슬롯은 반납됨."""
        if self._active < self.max_concurrent and not self.waiting:
            self._active += 1
        else:
            waiter = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            logger.debug(f"[THROTTLE] Queued (in_flight={self._active}, waiting={self.waiting})")
            try:
                await waiter
            except asyncio.CancelledError:
                if waiter.done() and not waiter.cancelled():
                    # release()가 슬롯을 넘겨준 직후 취소됨
                    self.release()
                else:
                    try:
                        self._waiters.remove(waiter)
                    except ValueError:
                        pass
                raise

        self.peak_in_flight = max(self.peak_in_flight, self._active)

        try:
            await self._pace()
        except asyncio.CancelledError:
            self.release()
            raise

    def release(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                # 슬롯을 그대로 넘기므로 _active는 변하지 않음
                waiter.set_result(None)
                return
        self._active = max(0, self._active - 1)

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        await self.acquire()
        try:
            yield
        finally:
            self.release()

    async def _pace(self) -> None:
        if self.min_interval_s <= 0:
            return
        loop = asyncio.get_running_loop()
        now = loop.time()
        start = now if self._next_start is None else max(now, self._next_start)
        self._next_start = start + self.min_interval_s
        delay = start - now
        if delay > 0:
            await asyncio.sleep(delay)

    def __repr__(self) -> str:
        return (
            f"RequestThrottler(in_flight={self._active}/{self.max_concurrent}, "
            f"waiting={self.waiting}, min_interval={self.min_interval_s:.3f}s)"
        )
