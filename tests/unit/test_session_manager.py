"""카탈로그 세션 관리 테스트"""

import asyncio

import pytest

from src.core.exceptions import TransportException
from src.crawlers.http_client import HttpResponse
from src.crawlers.opac import SessionManager
from src.crawlers.opac.session import CatalogSession, cookie_header_from


BASE = "https://opac.test/webOPACClient.hffsis"


def _manager(client, clock, ttl_s=300.0):
    return SessionManager(client, base_url=BASE, login_id="wohff", ttl_s=ttl_s, clock=clock)


def test_cookie_header_from_set_cookie_list():
    header = cookie_header_from(["JSESSIONID=abc; Path=/; HttpOnly", "lang=en", "garbage"])
    assert header == "JSESSIONID=abc; lang=en"


def test_catalog_session_expiry():
    session = CatalogSession(cookies="a=b", established_at=100.0, ttl_s=300.0)
    assert session.is_expired(399.9) is False
    assert session.is_expired(400.0) is True


@pytest.mark.asyncio
async def test_ensure_performs_handshake_once(fake_client, clock):
    manager = _manager(fake_client, clock)

    assert manager.is_active is False
    assert await manager.ensure() is True
    assert await manager.ensure() is True

    assert manager.handshake_count == 1
    assert fake_client.calls == [f"{BASE}/start.do?Login=wohff"]
    assert manager.cookie_header == "JSESSIONID=abc123"


@pytest.mark.asyncio
async def test_concurrent_ensure_shares_one_handshake(fake_client, clock):
    fake_client.handshake_delay_s = 0.05
    manager = _manager(fake_client, clock)

    results = await asyncio.gather(*(manager.ensure() for _ in range(10)))

    assert results == [True] * 10
    assert manager.handshake_count == 1
    assert fake_client.handshake_calls == 1


@pytest.mark.asyncio
async def test_session_expires_after_ttl(fake_client, clock):
    manager = _manager(fake_client, clock, ttl_s=300.0)
    await manager.ensure()

    clock.advance(299)
    assert manager.is_active is True

    clock.advance(2)
    assert manager.is_active is False
    assert manager.cookie_header is None

    assert await manager.ensure() is True
    assert manager.handshake_count == 2


@pytest.mark.asyncio
async def test_invalidate_forces_new_handshake(fake_client, clock):
    manager = _manager(fake_client, clock)
    await manager.ensure()

    manager.invalidate()
    assert manager.is_active is False

    await manager.ensure()
    assert manager.handshake_count == 2


@pytest.mark.asyncio
async def test_invalidate_stale_session_keeps_replacement(fake_client, clock):
    manager = _manager(fake_client, clock)
    await manager.ensure()
    first = manager.current

    manager.invalidate(first)
    await manager.ensure()
    replacement = manager.current
    assert replacement is not first

    manager.invalidate(first)
    assert manager.current is replacement
    assert manager.is_active is True
    assert manager.handshake_count == 2

    manager.invalidate(replacement)
    assert manager.current is None


@pytest.mark.asyncio
async def test_non_2xx_handshake_resolves_false(fake_client, clock):
    fake_client.handshake = HttpResponse(503, "Service Unavailable")
    manager = _manager(fake_client, clock)

    assert await manager.ensure() is False
    assert manager.is_active is False


@pytest.mark.asyncio
async def test_transport_error_resolves_false_and_recovers(fake_client, clock):
    fake_client.handshake = TransportException("GET start.do", "connection refused")
    manager = _manager(fake_client, clock)

    assert await manager.ensure() is False

    fake_client.handshake = HttpResponse(200, "ok", ["JSESSIONID=new; Path=/"])
    assert await manager.ensure() is True
    assert manager.cookie_header == "JSESSIONID=new"
    assert manager.handshake_count == 2


@pytest.mark.asyncio
async def test_handshake_without_cookies_is_still_active(fake_client, clock):
    fake_client.handshake = HttpResponse(200, "ok", [])
    manager = _manager(fake_client, clock)

    assert await manager.ensure() is True
    assert manager.is_active is True
    assert manager.cookie_header is None


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_handshake(fake_client, clock):
    fake_client.handshake_delay_s = 0.05
    manager = _manager(fake_client, clock)

    first = asyncio.ensure_future(manager.ensure())
    second = asyncio.ensure_future(manager.ensure())
    await asyncio.sleep(0.01)
    first.cancel()

    assert await second is True
    with pytest.raises(asyncio.CancelledError):
        await first
    assert manager.handshake_count == 1
