# tests/conftest.py
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest
import pytest_asyncio

from infra import BalanceClient, ServerContainer
from ledger.config import ServerSettings


@pytest.fixture
def settings():
    # port 0: let the OS pick a free port
    return ServerSettings(host="127.0.0.1", port=0)


@pytest_asyncio.fixture
async def container(settings):
    """
    Running balance server on an ephemeral port, stopped after the test.
    """
    c = await ServerContainer.start(settings=settings)
    try:
        yield c
    finally:
        await c.stop()


@pytest.fixture
def client(container):
    host, port = container.server.address
    return BalanceClient(host, port, timeout_s=5.0)
