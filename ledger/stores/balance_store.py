# ledger/stores/balance_store.py
import asyncio
import math

from ..errors import InvalidAmount


class BalanceStore:
    """
    The single shared balance.

    Both operations run inside the same critical section, so concurrent
    callers are fully serialized. The lock only covers the arithmetic and
    is never held while a caller does socket I/O.
    """

    def __init__(self, initial: float = 0.0) -> None:
        if not math.isfinite(initial):
            raise InvalidAmount("initial balance must be finite", initial=initial)
        self._value: float = float(initial)
        self._lock = asyncio.Lock()

    async def read(self) -> float:
        async with self._lock:
            return self._value

    async def apply_delta(self, amount: float) -> float:
        """Add ``amount`` and return the resulting balance."""
        if not math.isfinite(amount):
            raise InvalidAmount("delta must be finite", amount=amount)
        async with self._lock:
            result = self._value + amount
            if not math.isfinite(result):
                raise InvalidAmount("balance would overflow", balance=self._value, amount=amount)
            self._value = result
            return result
