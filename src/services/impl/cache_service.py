"""인메모리 결과 캐시 서비스 - 캐싱 로직만 담당

프로세스 수명 동안 유지되는 조회 결과 캐시입니다. 영구 저장소가 아니며,
보존 기간(기본 1시간)이 지난 항목은 주기적 sweep()으로 제거됩니다.
"""
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from src.core.logging import logger
from src.engine.result import QueryResult


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: QueryResult
    stored_at: float


class CacheService:
    """조회 결과 캐시 관리 서비스"""

    def __init__(self, ttl_seconds: float = 3600, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl_seconds: 보존 기간 (초)
            clock: 단조 시계 (테스트 주입용)
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at > self.ttl_seconds

    def get(self, key: str) -> Optional[QueryResult]:
        """
        캐시된 결과 조회

        보존 기간이 지났지만 아직 sweep되지 않은 항목은 미스로 취급합니다.

        Args:
            key: 정규화된 쿼리 키

        Returns:
            QueryResult 또는 None
        """
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"[CACHE] miss: {key}")
            return None
        if self._is_expired(entry, self._clock()):
            logger.debug(f"[CACHE] stale: {key}")
            return None
        logger.info(f"[CACHE] hit: {key}")
        return entry.value

    def set(self, key: str, value: QueryResult) -> bool:
        """
        결과 캐싱 (기존 항목은 새 항목으로 덮어씀)

        Returns:
            저장 여부 (일시적 실패 결과는 저장하지 않음)
        """
        if not value.is_cacheable:
            logger.debug(f"[CACHE] not caching {value.status.value} result for {key}")
            return False
        self._entries[key] = CacheEntry(key=key, value=value, stored_at=self._clock())
        logger.info(f"[CACHE] set: {key}, TTL: {self.ttl_seconds:.0f}s")
        return True

    def sweep(self) -> int:
        """보존 기간이 지난 항목 제거

        Returns:
            제거된 항목 수
        """
        now = self._clock()
        expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.info(f"[CACHE] swept {len(expired)} expired entries ({len(self._entries)} remain)")
        return len(expired)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"[CACHE] cleared {count} entries")
        return count
