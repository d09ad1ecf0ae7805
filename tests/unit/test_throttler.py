"""요청 스로틀러 테스트 (FIFO 슬롯 + 요청 간격)"""

import asyncio

import pytest

from src.crawlers.opac import RequestThrottler


def test_rejects_invalid_configuration():
    with pytest.raises(ValueError):
        RequestThrottler(max_concurrent=0)
    with pytest.raises(ValueError):
        RequestThrottler(max_concurrent=1, min_interval_s=-0.1)


@pytest.mark.asyncio
async def test_never_exceeds_max_concurrent():
    throttler = RequestThrottler(max_concurrent=3, min_interval_s=0)
    active = 0
    peak = 0

    async def work():
        nonlocal active, peak
        async with throttler.slot():
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

    await asyncio.gather(*(work() for _ in range(12)))

    assert peak == 3
    assert throttler.peak_in_flight == 3
    assert throttler.in_flight == 0
    assert throttler.waiting == 0


@pytest.mark.asyncio
async def test_waiters_admitted_in_fifo_order():
    throttler = RequestThrottler(max_concurrent=1, min_interval_s=0)
    order = []

    await throttler.acquire()

    async def waiter(i):
        async with throttler.slot():
            order.append(i)

    tasks = []
    for i in range(5):
        tasks.append(asyncio.ensure_future(waiter(i)))
        await asyncio.sleep(0)

    assert throttler.waiting == 5
    throttler.release()
    await asyncio.gather(*tasks)

    assert order == [0, 1, 2, 3, 4]
    assert throttler.in_flight == 0


@pytest.mark.asyncio
async def test_slot_released_when_guarded_operation_fails():
    throttler = RequestThrottler(max_concurrent=1, min_interval_s=0)

    with pytest.raises(RuntimeError):
        async with throttler.slot():
            raise RuntimeError("boom")

    assert throttler.in_flight == 0
    async with throttler.slot():
        assert throttler.in_flight == 1


@pytest.mark.asyncio
async def test_cancelled_waiter_leaves_queue():
    throttler = RequestThrottler(max_concurrent=1, min_interval_s=0)
    await throttler.acquire()

    task = asyncio.ensure_future(throttler.acquire())
    await asyncio.sleep(0)
    assert throttler.waiting == 1

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert throttler.waiting == 0
    throttler.release()
    assert throttler.in_flight == 0


@pytest.mark.asyncio
async def test_cancel_after_handoff_returns_slot():
    throttler = RequestThrottler(max_concurrent=1, min_interval_s=0)
    await throttler.acquire()

    task = asyncio.ensure_future(throttler.acquire())
    await asyncio.sleep(0)

    # 슬롯을 넘겨받았지만 아직 재개되기 전에 취소
    throttler.release()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert throttler.in_flight == 0


@pytest.mark.asyncio
async def test_timeout_while_holding_slot_releases_it():
    throttler = RequestThrottler(max_concurrent=1, min_interval_s=0)

    async def slow():
        async with throttler.slot():
            await asyncio.sleep(10)

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(slow(), timeout=0.05)

    assert throttler.in_flight == 0


@pytest.mark.asyncio
async def test_minimum_spacing_between_request_starts():
    throttler = RequestThrottler(max_concurrent=4, min_interval_s=0.05)
    loop = asyncio.get_running_loop()
    starts = []

    async def work():
        async with throttler.slot():
            starts.append(loop.time())

    await asyncio.gather(*(work() for _ in range(4)))

    starts.sort()
    gaps = [b - a for a, b in zip(starts, starts[1:])]
    assert all(gap >= 0.045 for gap in gaps)


def test_repr_shows_state():
    throttler = RequestThrottler(max_concurrent=8, min_interval_s=0.1)
    assert "in_flight=0/8" in repr(throttler)
