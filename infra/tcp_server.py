# infra/tcp_server.py
from __future__ import annotations

import asyncio
import contextlib
import itertools
from typing import Dict, Optional, Protocol, Set, Tuple

from infra.protocol import parse_request
from infra.response import render_response
from ledger.config import ServerSettings
from ledger.enums import Method
from ledger.errors import LedgerError
from ledger.models import Request
from utils.logger import logger


class BalancePort(Protocol):
    async def read(self) -> float: ...
    async def apply_delta(self, amount: float) -> float: ...


class BalanceServer:
    """
    Accepts connections forever and serves each one in its own task.

    One request per connection: read a single window of bytes, parse it,
    touch the shared store, write the response, close. Any failure stays
    inside that connection's task; the listening socket keeps accepting.
    """

    def __init__(self,
                 store: BalancePort,
                 settings: Optional[ServerSettings] = None,
                 *,
                 shutdown_grace_s: float = 2.0,
                 ) -> None:
        self.store = store
        self.settings = settings or ServerSettings()
        self.shutdown_grace_s = shutdown_grace_s

        self._server: Optional[asyncio.AbstractServer] = None
        self._active: Set[asyncio.Task] = set()
        self._conn_ids = itertools.count(1)
        self._stats: Dict[str, int] = {"accepted": 0, "served": 0, "rejected": 0, "failed": 0}

    # ---- lifecycle -------------------------------------------------------------
    async def start(self) -> "BalanceServer":
        if self._server is not None:
            return self
        host, port = self.settings.host, self.settings.port
        try:
            self._server = await asyncio.start_server(self.handle_connection, host, port)
        except OSError as e:
            logger.error(f"Balance server bind failed on {host}:{port}: {e}")
            raise
        bound_host, bound_port = self.address
        logger.info(f"Balance server listening on {bound_host}:{bound_port} "
                    f"read_buffer={self.settings.read_buffer_size}B")
        return self

    async def serve_forever(self) -> None:
        await self.start()
        await self._server.serve_forever()

    async def stop(self) -> None:
        if self._server is None:
            return
        server, self._server = self._server, None
        server.close()

        pending = set(self._active)
        if pending:
            _, still_running = await asyncio.wait(pending, timeout=self.shutdown_grace_s)
            for t in still_running:
                t.cancel()
            await asyncio.gather(*still_running, return_exceptions=True)

        await server.wait_closed()
        logger.info(f"Balance server stopped stats={self.stats()}")

    async def __aenter__(self) -> "BalanceServer":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    @property
    def address(self) -> Tuple[str, int]:
        if self._server is None or not self._server.sockets:
            raise RuntimeError("server is not listening")
        sockname = self._server.sockets[0].getsockname()
        return sockname[0], sockname[1]

    def stats(self) -> Dict[str, int]:
        return {**self._stats, "active": len(self._active)}

    # ---- per connection --------------------------------------------------------
    async def handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        conn_id = next(self._conn_ids)
        peer = writer.get_extra_info("peername")
        task = asyncio.current_task()
        if task is not None:
            self._active.add(task)
        self._stats["accepted"] += 1
        try:
            buf = await reader.read(self.settings.read_buffer_size)
            req = parse_request(buf, self.settings.max_amount_len)
            balance = await self._dispatch(req)
            resp = render_response(balance)
            writer.write(resp.raw)
            await writer.drain()
            self._stats["served"] += 1
            logger.debug(f"conn#{conn_id} {peer} {req.method.value} amount={req.amount} -> {resp.body}")
        except asyncio.CancelledError:
            raise
        except LedgerError as e:
            self._stats["rejected"] += 1
            logger.warning(f"conn#{conn_id} {peer} dropped: {type(e).__name__}: {e}")
        except OSError as e:
            self._stats["failed"] += 1
            logger.warning(f"conn#{conn_id} {peer} io error: {type(e).__name__} ({e})")
        except Exception:
            self._stats["failed"] += 1
            logger.exception(f"conn#{conn_id} {peer} handler: exception")
        finally:
            if task is not None:
                self._active.discard(task)
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()

    async def _dispatch(self, req: Request) -> float:
        if req.method is Method.READ:
            return await self.store.read()
        return await self.store.apply_delta(req.amount)
