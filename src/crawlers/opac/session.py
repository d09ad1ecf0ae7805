"""WebOPAC 세션 관리

카탈로그는 쿠키 기반 상태 세션이 있어야 검색을 처리합니다.

- ensure(): 살아있는 세션 보장. 동시에 여러 번 호출돼도 핸드셰이크는 하나만 진행
- invalidate(): 세션 폐기 → 다음 ensure()에서 다시 핸드셰이크
- 서버 측에서 먼저 세션을 버리기 전에 ttl(기본 5분)이 지나면 스스로 만료
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from src.core.exceptions import SessionFailureException, TransportException
from src.core.logging import logger
from src.utils.url import build_login_url


@dataclass(frozen=True)
class CatalogSession:
    cookies: str
    established_at: float
    ttl_s: float

    def is_expired(self, now: float) -> bool:
        return now - self.established_at >= self.ttl_s


def cookie_header_from(set_cookies: List[str]) -> str:
    """Set-Cookie 헤더 목록에서 Cookie 요청 헤더 값 생성

    >>> cookie_header_from(["JSESSIONID=abc; Path=/; HttpOnly", "lang=en"])
    'JSESSIONID=abc; lang=en'
    """
    pairs = []
    for raw in set_cookies:
        pair = raw.split(";", 1)[0].strip()
        if "=" in pair:
            pairs.append(pair)
    return "; ".join(pairs)


class SessionManager:
    """카탈로그 세션 수명 관리자"""

    def __init__(
        self,
        client,
        base_url: str,
        login_id: str,
        ttl_s: float = 300.0,
        request_timeout_s: float = 20.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            client: HTTP 클라이언트 (async get(url, timeout_s=..., headers=...) 구현)
            base_url: WebOPAC 베이스 URL
            login_id: start.do?Login= 값
            ttl_s: 세션 자체 만료 시간 (초)
            request_timeout_s: 핸드셰이크 요청 타임아웃 (초)
            clock: 단조 시계 (테스트 주입용)
        """
        self._client = client
        self._login_url = build_login_url(base_url, login_id)
        self._ttl_s = ttl_s
        self._request_timeout_s = request_timeout_s
        self._clock = clock

        self._session: Optional[CatalogSession] = None
        self._inflight: Optional[asyncio.Task] = None
        self.handshake_count = 0

    @property
    def is_active(self) -> bool:
        return self._session is not None and not self._session.is_expired(self._clock())

    @property
    def current(self) -> Optional[CatalogSession]:
        return self._session

    @property
    def cookie_header(self) -> Optional[str]:
        """현재 세션 쿠키 (세션이 없거나 만료되면 None)"""
        if not self.is_active:
            return None
        return self._session.cookies or None

    async def ensure(self) -> bool:
        """살아있는 세션 보장.

        진행 중인 핸드셰이크가 있으면 새로 열지 않고 그 결과를 함께 기다립니다.
        호출자 하나가 취소돼도 공유 핸드셰이크는 취소되지 않습니다.

        Returns:
            세션 확보 여부 (False면 검색하면 안 됨)
        """
        if self.is_active:
            return True

        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._handshake())
        return await asyncio.shield(self._inflight)

    def invalidate(self, stale: Optional[CatalogSession] = None) -> None:
        """세션 폐기

        stale을 넘기면 그 세션이 아직 현재 세션일 때만 폐기합니다.
        다른 조회가 이미 새 세션을 열었으면 그대로 둡니다.
        """
        if stale is not None and self._session is not stale:
            logger.debug("[SESSION] Expired session already replaced, keeping current one")
            return
        if self._session is not None:
            logger.info("[SESSION] Invalidated, will re-handshake on next request")
        self._session = None

    async def _handshake(self) -> bool:
        try:
            self.handshake_count += 1
            logger.info("[SESSION] Initializing catalog session...")
            try:
                resp = await self._client.get(self._login_url, timeout_s=self._request_timeout_s)
            except TransportException as e:
                raise SessionFailureException(e.message) from e

            if not resp.ok:
                raise SessionFailureException(f"handshake returned status {resp.status_code}")

            self._session = CatalogSession(
                cookies=cookie_header_from(resp.set_cookies),
                established_at=self._clock(),
                ttl_s=self._ttl_s,
            )
            if not self._session.cookies:
                logger.warning("[SESSION] Handshake succeeded without Set-Cookie, continuing cookieless")
            logger.info(f"[SESSION] Catalog session initialized (ttl={self._ttl_s:.0f}s)")
            return True
        except SessionFailureException as e:
            logger.error(f"[SESSION] {e}")
            self._session = None
            return False
        finally:
            self._inflight = None
