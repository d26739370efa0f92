# infra/__init__.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from infra.balance_client import BalanceClient, BalanceClientError
from infra.tcp_server import BalanceServer
from ledger.config import ServerSettings
from ledger.stores.balance_store import BalanceStore


class ServerContainer:
    """
    Composition root for the balance service.
    - builds the one BalanceStore and hands it to the server
    - the entry point holds the container and stops it on shutdown
    """
    def __init__(self, store: BalanceStore, server: BalanceServer) -> None:
        self.store = store
        self.server = server

    @classmethod
    async def start(cls,
                    cfg: Optional[Mapping[str, Any]] = None,
                    *,
                    settings: Optional[ServerSettings] = None,
                    ) -> "ServerContainer":
        settings = settings or ServerSettings.from_cfg(cfg)
        store = BalanceStore(settings.initial_balance)
        server = BalanceServer(store, settings)
        await server.start()
        return cls(store, server)

    async def stop(self) -> None:
        await self.server.stop()


async def balance_healthcheck(host: str, port: int, timeout_s: float = 2.0) -> bool:
    try:
        await BalanceClient(host, port, timeout_s=timeout_s).get_balance()
        return True
    except (BalanceClientError, OSError):
        return False


__all__ = [
    "BalanceClient",
    "BalanceClientError",
    "BalanceServer",
    "ServerContainer",
    "balance_healthcheck",
]
