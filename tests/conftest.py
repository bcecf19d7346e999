"""Shared test fixtures for the ark-wallet test suite."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import pytest

from ark_wallet.client.connection import ConnectionBinding
from ark_wallet.client.node import NodeClient
from ark_wallet.client.transport import NodeTransport
from ark_wallet.config.settings import ApiVersion, NetworkConfig
from ark_wallet.state.memory import MemoryWalletState
from ark_wallet.state.models import Profile

if TYPE_CHECKING:
    from collections.abc import Callable

TEST_EPOCH = datetime(2017, 3, 21, 13, 0, 0, tzinfo=UTC)


def inject_transport(transport: NodeTransport, handler: Callable) -> None:
    """Replace the internal httpx client with one using a mock transport."""
    transport._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def networks() -> list[NetworkConfig]:
    return [
        NetworkConfig(
            id="mainnet",
            name="Main",
            server="https://main.example.com",
            api_version=ApiVersion.V2,
            epoch=TEST_EPOCH,
        ),
        NetworkConfig(
            id="devnet",
            name="Dev",
            server="http://dev.example.com:4002",
            api_version=ApiVersion.V1,
            epoch=TEST_EPOCH,
        ),
    ]


@pytest.fixture
def state(networks) -> MemoryWalletState:
    """Wallet state with one profile per network, none active."""
    wallet_state = MemoryWalletState(networks)
    wallet_state.add_profile(Profile(id="p-main", name="Main profile", network_id="mainnet"))
    wallet_state.add_profile(Profile(id="p-dev", name="Dev profile", network_id="devnet"))
    return wallet_state


@pytest.fixture
async def make_client(state):
    """Build a NodeClient bound to ``host`` whose requests go to ``handler``."""
    clients: list[NodeClient] = []

    def _make(
        handler: Callable,
        *,
        api_version: ApiVersion = ApiVersion.V2,
        host: str = "http://node.test:4003",
    ) -> NodeClient:
        transport = NodeTransport()
        inject_transport(transport, handler)
        client = NodeClient(ConnectionBinding(host, api_version), transport, state=state)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.close()
