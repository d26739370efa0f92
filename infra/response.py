# infra/response.py
import json
import math

from ledger.errors import InvalidAmount
from ledger.models import Response

STATUS_LINE = "HTTP/1.1 200 OK"
CONTENT_TYPE = "application/json"


def render_body(balance: float) -> str:
    if not math.isfinite(balance):
        raise InvalidAmount("cannot render non-finite balance", balance=balance)
    # default separators give {"balance": 62.32}
    return json.dumps({"balance": float(balance)})


def render_response(balance: float) -> Response:
    body = render_body(balance)
    length = len(body.encode("utf-8"))
    head = (
        f"{STATUS_LINE}\r\n"
        f"Content-Type: {CONTENT_TYPE}\r\n"
        f"Content-Length: {length}\r\n"
        "\r\n"
    )
    return Response(
        balance=balance,
        body=body,
        content_length=length,
        raw=(head + body).encode("utf-8"),
    )
