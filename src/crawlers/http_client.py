"""공유 HTTP 클라이언트 (curl_cffi)

- 요청마다 AsyncSession을 만들면 TLS/커넥션 오버헤드가 커지므로
  프로세스 단위로 세션을 재사용합니다.
- WebOPAC 세션 쿠키는 SessionManager가 소유합니다. 이 클라이언트의 쿠키 저장소는
  요청이 끝날 때마다 비워서 명시적으로 전달한 Cookie 헤더만 사용되도록 합니다.
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Optional, Dict, List

from curl_cffi.requests import AsyncSession

from src.core.config import settings
from src.core.exceptions import TransportException
from src.core.logging import logger, sanitize_for_log


@dataclass
class HttpResponse:
    status_code: int
    text: str
    set_cookies: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class SharedHttpClient:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=settings.opac_http_impersonate,
                headers=self.default_headers(),
                allow_redirects=True,
                max_clients=settings.opac_http_max_clients,
                trust_env=False,
            )
            return self._session

    def default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": settings.opac_user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": settings.opac_accept_language,
        }

    async def get(
        self,
        url: str,
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
    ) -> HttpResponse:
        """GET 요청.

        Raises:
            TransportException: 네트워크 오류 또는 타임아웃
        """
        sess = await self._ensure_session()
        try:
            resp = await sess.get(url, headers=headers, timeout=timeout_s)
            set_cookies = list(resp.headers.get_list("set-cookie"))
            if not set_cookies:
                # Set-Cookie on an intermediate redirect only lands in the jar
                set_cookies = [f"{k}={v}" for k, v in sess.cookies.items()]
        except Exception as e:
            logger.info(f"[HTTP_CLIENT] GET failed: {type(e).__name__}: {repr(e)}")
            raise TransportException("GET " + sanitize_for_log(url, 80), str(e) or type(e).__name__) from e
        finally:
            sess.cookies.clear()

        return HttpResponse(
            status_code=getattr(resp, "status_code", 0) or 0,
            text=getattr(resp, "text", "") or "",
            set_cookies=set_cookies,
        )

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.debug(f"[HTTP_CLIENT] close failed: {type(e).__name__}: {e}")
            self._session = None


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    await _shared_http_client.close()
