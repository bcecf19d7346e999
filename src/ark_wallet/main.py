#!/usr/bin/env python3
"""ARK wallet client CLI — query a node in either API version.

The node is taken from the configuration (``ARKWALLET_NODE__HOST`` and
``ARKWALLET_NODE__API_VERSION`` or a YAML file via ``ARKWALLET_CONFIG_PATH``):

    # Read the network configuration of a server before using it
    ark-wallet probe <server> [api_version] [timeout]

    # Show a wallet, its vote and its latest transactions
    ark-wallet wallet <address>
    ark-wallet transactions <address> [page] [limit]

    # List delegates, or discover peers (optionally from a network's seeds)
    ark-wallet delegates
    ark-wallet peers [network]
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import TYPE_CHECKING, Any

from ark_wallet.client.connection import ConnectionBinding
from ark_wallet.client.node import NodeClient
from ark_wallet.client.transport import NodeTransport
from ark_wallet.config.settings import AppConfig
from ark_wallet.logging_setup import configure_logging

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


def _load_config() -> AppConfig:
    path = os.getenv("ARKWALLET_CONFIG_PATH", "")
    return AppConfig.from_yaml(path) if path else AppConfig()


def _print(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _run(config: AppConfig, action: Callable[[NodeClient], Awaitable[Any]]) -> None:
    async def _go() -> None:
        binding = ConnectionBinding(config.node.host, config.node.api_version)
        transport = NodeTransport(timeout=config.node.timeout)
        async with NodeClient(binding, transport, discovery=config.discovery) as client:
            _print(await action(client))

    asyncio.run(_go())


async def _wallet(client: NodeClient, address: str) -> dict[str, Any] | None:
    wallet = await client.fetch_wallet(address)
    if wallet is None:
        return None
    payload = wallet.to_dict()
    payload["vote"] = await client.fetch_wallet_vote(address)
    return payload


async def _transactions(
    client: NodeClient, address: str, page: int, limit: int
) -> dict[str, Any]:
    result = await client.fetch_transactions(address, page=page, limit=limit)
    return {
        "totalCount": result.total_count,
        "transactions": [tx.to_dict() for tx in result.transactions],
    }


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(__doc__)
        sys.exit(1)

    config = _load_config()
    configure_logging(config.logging)
    cmd = args[0].lower()

    if cmd == "probe":
        if len(args) < 2:
            print("Usage: ark-wallet probe <server> [api_version] [timeout]")
            sys.exit(1)
        api_version = int(args[2]) if len(args) > 2 else int(config.node.api_version)
        timeout = float(args[3]) if len(args) > 3 else config.node.probe_timeout
        _print(
            asyncio.run(
                NodeClient.fetch_network_config(args[1], api_version, timeout=timeout)
            )
        )
    elif cmd == "wallet":
        if len(args) < 2:
            print("Usage: ark-wallet wallet <address>")
            sys.exit(1)
        _run(config, lambda client: _wallet(client, args[1]))
    elif cmd == "transactions":
        if len(args) < 2:
            print("Usage: ark-wallet transactions <address> [page] [limit]")
            sys.exit(1)
        page = int(args[2]) if len(args) > 2 else 1
        limit = int(args[3]) if len(args) > 3 else 50
        _run(config, lambda client: _transactions(client, args[1], page, limit))
    elif cmd == "delegates":

        async def _delegates(client: NodeClient) -> list[dict[str, Any]]:
            return [d.to_dict() for d in await client.fetch_delegates()]

        _run(config, _delegates)
    elif cmd == "peers":
        network = args[1] if len(args) > 1 else None

        async def _peers(client: NodeClient) -> list[dict[str, Any]]:
            return [p.to_dict() for p in await client.fetch_peers(network)]

        _run(config, _peers)
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
