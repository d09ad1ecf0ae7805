"""WebOPAC HTTP 검색 (curl_cffi)

- 네트워크(fetch) 로직만 담당하고 파싱은 parsing.py에 둡니다.
- 모든 검색 요청은 RequestThrottler 슬롯 안에서 실행됩니다.
"""

from __future__ import annotations

from typing import Dict, Optional

from src.core.logging import logger, sanitize_for_log
from src.crawlers.http_client import HttpResponse
from src.utils.url import build_search_url

from .throttle import RequestThrottler


class OpacHttpSearch:
    """스로틀링된 카탈로그 검색 페이지 fetch"""

    def __init__(
        self,
        client,
        base_url: str,
        throttler: RequestThrottler,
        request_timeout_s: float = 20.0,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._throttler = throttler
        self._request_timeout_s = request_timeout_s

    @property
    def in_flight(self) -> int:
        return self._throttler.in_flight

    async def fetch(self, search_string: str, cookie_header: Optional[str]) -> HttpResponse:
        """검색 결과 페이지를 가져옴.

        Raises:
            TransportException: 네트워크 오류 / 타임아웃
        """
        url = build_search_url(self._base_url, search_string)
        headers: Dict[str, str] = {}
        if cookie_header:
            headers["Cookie"] = cookie_header

        async with self._throttler.slot():
            logger.info(
                f"[OPAC_HTTP] Fetching {sanitize_for_log(url, 160)} "
                f"(timeout={self._request_timeout_s:.1f}s, {self._throttler!r})"
            )
            resp = await self._client.get(url, timeout_s=self._request_timeout_s, headers=headers)

        logger.info(f"[OPAC_HTTP] status={resp.status_code} len={len(resp.text)}")
        return resp
