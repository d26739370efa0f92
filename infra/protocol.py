# infra/protocol.py
from __future__ import annotations

import re

from ledger.errors import EncodingError, MalformedRequest
from ledger.models import Request

READ_PREFIX = b"GET "
UPDATE_PREFIX = b"POST"
PREFIX_LEN = 4
AMOUNT_OFFSET = len(b"POST /")
MAX_AMOUNT_LEN = 10

WHITESPACE = frozenset(b" \t\r\n\x0b\x0c")

# optional sign, digits with an optional point; no exponent, inf or nan
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")


def _amount_run(buf: bytes, max_len: int) -> bytes:
    window = buf[AMOUNT_OFFSET:AMOUNT_OFFSET + max_len]
    for i, b in enumerate(window):
        if b in WHITESPACE:
            return window[:i]
    return window


def parse_amount(run: bytes) -> float:
    """
    Decode the numeric run of an update request.

    Raises EncodingError for non-ASCII bytes and MalformedRequest when the
    text is not a plain signed decimal.
    """
    try:
        text = run.decode("ascii")
    except UnicodeDecodeError as e:
        raise EncodingError("amount is not ascii", raw=run, pos=e.start) from None
    if not text:
        raise MalformedRequest("empty amount")
    if not _DECIMAL_RE.fullmatch(text):
        raise MalformedRequest("amount is not a decimal number", amount=text)
    return float(text)


def parse_request(buf: bytes, max_amount_len: int = MAX_AMOUNT_LEN) -> Request:
    """
    Classify the first bytes read from a connection.

    Fixed-offset parsing: ``GET `` is a read, ``POST`` is an update whose
    amount starts right after ``POST /`` and runs to the first whitespace
    byte, the buffer end, or ``max_amount_len`` bytes.
    """
    if len(buf) < PREFIX_LEN:
        raise MalformedRequest("truncated request", received=len(buf))

    prefix = buf[:PREFIX_LEN]
    if prefix == READ_PREFIX:
        return Request.read()
    if prefix == UPDATE_PREFIX:
        return Request.update(parse_amount(_amount_run(buf, max_amount_len)))
    raise MalformedRequest("unknown method", prefix=prefix)
