# tests/test_balance_store.py
import asyncio
import math
import random
import pytest

from ledger.errors import InvalidAmount
from ledger.stores.balance_store import BalanceStore


@pytest.mark.asyncio
async def test_initial_read_is_zero():
    store = BalanceStore()
    assert await store.read() == 0.0


@pytest.mark.asyncio
async def test_apply_delta_returns_new_balance():
    store = BalanceStore()
    assert await store.apply_delta(62.32) == 62.32
    assert await store.read() == 62.32


@pytest.mark.asyncio
async def test_opposite_deltas_cancel_out():
    store = BalanceStore()
    await store.apply_delta(-12.98)
    await store.apply_delta(12.98)
    assert abs(await store.read()) < 1e-9


@pytest.mark.asyncio
async def test_concurrent_deltas_sum_exactly():
    """
    Integers are exact in floats, so any serial order gives the same total.
    """
    store = BalanceStore()
    deltas = [random.randint(-1000, 1000) for _ in range(500)]
    await asyncio.gather(*(store.apply_delta(d) for d in deltas))
    assert await store.read() == float(sum(deltas))


@pytest.mark.asyncio
async def test_results_are_consistent_with_a_serial_order():
    # every +1 sees a distinct predecessor, so the returned values are exactly 1..n
    store = BalanceStore()
    n = 200
    results = await asyncio.gather(*(store.apply_delta(1) for _ in range(n)))
    assert sorted(results) == [float(i) for i in range(1, n + 1)]


@pytest.mark.asyncio
async def test_lock_held_elsewhere_blocks_mutation():
    store = BalanceStore()
    async with store._lock:
        pending = asyncio.create_task(store.apply_delta(5))
        await asyncio.sleep(0.01)
        assert not pending.done()
        assert store._value == 0.0
    assert await pending == 5.0


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
async def test_non_finite_delta_rejected(bad):
    store = BalanceStore(10.0)
    with pytest.raises(InvalidAmount):
        await store.apply_delta(bad)
    assert await store.read() == 10.0


@pytest.mark.asyncio
async def test_overflowing_result_rejected_and_unchanged():
    store = BalanceStore(1.7e308)
    with pytest.raises(InvalidAmount) as ei:
        await store.apply_delta(1.7e308)
    assert "overflow" in str(ei.value)
    assert await store.read() == 1.7e308


def test_non_finite_initial_rejected():
    with pytest.raises(InvalidAmount):
        BalanceStore(math.nan)
