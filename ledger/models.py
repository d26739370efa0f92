# ledger/models.py
from dataclasses import dataclass
from typing import Optional
from ledger.enums import Method


@dataclass(frozen=True)
class Request:
    method: Method
    amount: Optional[float] = None   # only set for Method.UPDATE

    @classmethod
    def read(cls) -> "Request":
        return cls(Method.READ)

    @classmethod
    def update(cls, amount: float) -> "Request":
        return cls(Method.UPDATE, amount)


@dataclass(frozen=True)
class Response:
    balance: float
    body: str             # {"balance": <value>}
    content_length: int   # byte length of body
    raw: bytes            # full wire bytes, headers + body
