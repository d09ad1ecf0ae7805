"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 주입 (네트워크 없는 HTTP 클라이언트, 수동 시계)
- 테스트마다 새 엔진 인스턴스 (전역 상태 없음)

금지:
- 실제 카탈로그 접속 (manual 스크립트에서만)
"""

from __future__ import annotations

import asyncio
import os
import sys
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, Dict, List, Optional, Union

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("ENVIRONMENT", "test")

from src.crawlers.http_client import HttpResponse  # noqa: E402
from src.crawlers.opac import OpacHttpSearch, RequestThrottler, SessionManager  # noqa: E402
from src.engine import AvailabilityEngine  # noqa: E402
from src.services.impl.cache_service import CacheService  # noqa: E402
from tests.fixtures import OPAC_PAGES  # noqa: E402


TEST_BASE_URL = "https://opac.test/webOPACClient.hffsis"


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


class ManualClock:
    """수동으로 전진시키는 단조 시계"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


SearchReply = Union[HttpResponse, Exception]


@dataclass
class FakeOpacClient:
    """SharedHttpClient 대역

    - start.do?Login= 요청은 handshake 응답
    - search.do 요청은 search_replies 큐에서 하나씩 (비면 default_search)
    - 예외 인스턴스를 넣으면 raise
    """

    handshake: SearchReply = field(
        default_factory=lambda: HttpResponse(200, "<html>start</html>", ["JSESSIONID=abc123; Path=/; HttpOnly"])
    )
    default_search: SearchReply = field(default_factory=lambda: HttpResponse(200, OPAC_PAGES["paris_texas"]))
    search_replies: Deque[SearchReply] = field(default_factory=deque)
    handshake_delay_s: float = 0.0
    search_delay_s: float = 0.0
    calls: List[str] = field(default_factory=list)
    headers_seen: List[Dict[str, str]] = field(default_factory=list)

    @property
    def search_calls(self) -> int:
        return sum(1 for u in self.calls if "/search.do" in u)

    @property
    def handshake_calls(self) -> int:
        return sum(1 for u in self.calls if "/start.do?Login=" in u)

    def queue(self, *replies: SearchReply) -> None:
        self.search_replies.extend(replies)

    async def get(self, url: str, *, timeout_s: float, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        self.calls.append(url)
        self.headers_seen.append(dict(headers or {}))
        if "/start.do?Login=" in url:
            reply, delay = self.handshake, self.handshake_delay_s
        else:
            reply = self.search_replies.popleft() if self.search_replies else self.default_search
            delay = self.search_delay_s
        if delay:
            await asyncio.sleep(delay)
        if isinstance(reply, Exception):
            raise reply
        return reply


def page(name: str, status_code: int = 200) -> HttpResponse:
    return HttpResponse(status_code, OPAC_PAGES[name])


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def fake_client() -> FakeOpacClient:
    return FakeOpacClient()


@dataclass
class EngineRig:
    engine: AvailabilityEngine
    client: FakeOpacClient
    cache: CacheService
    session: SessionManager
    throttler: RequestThrottler


def make_rig(
    client: Optional[FakeOpacClient] = None,
    *,
    max_concurrent: int = 8,
    min_interval_s: float = 0.0,
    query_timeout_s: float = 5.0,
    clock=None,
) -> EngineRig:
    """실제 구성요소 + Fake HTTP 클라이언트로 엔진 조립"""
    client = client or FakeOpacClient()
    kwargs = {"clock": clock} if clock is not None else {}
    cache = CacheService(ttl_seconds=3600, **kwargs)
    session = SessionManager(client, base_url=TEST_BASE_URL, login_id="wohff", ttl_s=300, **kwargs)
    throttler = RequestThrottler(max_concurrent=max_concurrent, min_interval_s=min_interval_s)
    searcher = OpacHttpSearch(client, base_url=TEST_BASE_URL, throttler=throttler)
    engine = AvailabilityEngine(
        cache=cache,
        session_manager=session,
        searcher=searcher,
        base_url=TEST_BASE_URL,
        query_timeout_s=query_timeout_s,
    )
    return EngineRig(engine=engine, client=client, cache=cache, session=session, throttler=throttler)


@pytest.fixture
def rig(fake_client: FakeOpacClient) -> EngineRig:
    return make_rig(fake_client)


@pytest.fixture
def make_engine():
    """옵션을 바꿔 엔진을 조립하는 팩토리 픽스처"""
    return make_rig


@pytest.fixture
def opac_page():
    """이름으로 fixture HTML 응답 생성"""
    return page
