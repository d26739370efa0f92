# infra/balance_client.py
from __future__ import annotations

import asyncio
import contextlib
import json
import math
from typing import Dict, Optional

from infra.protocol import MAX_AMOUNT_LEN
from infra.response import STATUS_LINE
from utils.logger import logger


class BalanceClientError(Exception):
    def __init__(self, message: str, raw: bytes = b""):
        super().__init__(message)
        self.raw = raw


def format_amount(amount: float, max_len: int = MAX_AMOUNT_LEN) -> str:
    """
    Render a delta as the plain decimal the server accepts.

    repr() is used when it has no exponent, otherwise a fixed-point form.
    Raises ValueError when the text would not fit the server's amount window.
    """
    amount = float(amount)
    if not math.isfinite(amount):
        raise ValueError(f"amount must be finite, got {amount}")
    text = repr(amount)
    if "e" in text or "E" in text:
        text = f"{amount:.{max_len}f}".rstrip("0")
    if len(text) > max_len:
        raise ValueError(f"amount {text!r} longer than {max_len} chars")
    return text


def parse_response(raw: bytes) -> float:
    if not raw:
        raise BalanceClientError("connection closed without response")
    head, sep, body = raw.partition(b"\r\n\r\n")
    if not sep:
        raise BalanceClientError("incomplete response head", raw)

    try:
        lines = head.decode("ascii").split("\r\n")
    except UnicodeDecodeError:
        raise BalanceClientError("response head is not ascii", raw) from None
    if lines[0] != STATUS_LINE:
        raise BalanceClientError(f"unexpected status line {lines[0]!r}", raw)

    headers: Dict[str, str] = {}
    for line in lines[1:]:
        k, _, v = line.partition(":")
        headers[k.strip().lower()] = v.strip()

    try:
        length = int(headers["content-length"])
    except (KeyError, ValueError):
        raise BalanceClientError("missing or bad Content-Length", raw) from None
    if length != len(body):
        raise BalanceClientError(f"Content-Length {length} != body length {len(body)}", raw)

    try:
        return float(json.loads(body)["balance"])
    except (ValueError, KeyError, TypeError):
        raise BalanceClientError("bad response body", raw) from None


class BalanceClient:
    """One connection per call, same as the server expects."""

    def __init__(self, host: str = "127.0.0.1", port: int = 8181, timeout_s: float = 5.0) -> None:
        self.host = host
        self.port = port
        self.timeout_s = timeout_s

    async def get_balance(self, path: str = "/") -> float:
        return await self.send_raw(f"GET {path} HTTP/1.1\r\n\r\n".encode("ascii"))

    async def post_delta(self, amount: float) -> float:
        return await self.send_raw(f"POST /{format_amount(amount)} HTTP/1.1\r\n\r\n".encode("ascii"))

    async def send_raw(self, data: bytes) -> float:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(self.host, self.port), timeout=self.timeout_s
        )
        try:
            writer.write(data)
            await writer.drain()
            raw = await asyncio.wait_for(reader.read(), timeout=self.timeout_s)
        except ConnectionResetError as e:
            raise BalanceClientError(f"connection reset by server: {e}") from e
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()
        logger.debug(f"BalanceClient {self.host}:{self.port} sent={data!r} got={len(raw)}B")
        return parse_response(raw)
