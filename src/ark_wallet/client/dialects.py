"""API dialects — one strategy per node API version.

Each dialect knows the endpoints and payload layout of its API version and
turns raw bodies into the canonical shapes of ``normalizer``. The node client
picks the dialect from the target it snapshots for an operation, so no method
branches on the version itself.

Legacy (v1) answers signal failure with ``success: false``; dialects report
those as ``SoftResult.failed`` instead of raising.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ark_wallet.client.normalizer import (
    Delegate,
    Peer,
    SoftResult,
    TransactionPage,
    Wallet,
    delegate_from_v1,
    delegate_from_v2,
    enrich_transaction,
    soft_result,
    transaction_from_v1,
    transaction_from_v2,
    vote_from_v2,
    wallet_from_v1,
    wallet_from_v2,
)
from ark_wallet.config.settings import ApiVersion

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from ark_wallet.client.connection import ConnectionTarget
    from ark_wallet.client.transport import NodeTransport


class NodeDialect(ABC):
    """Resource queries for one node API version."""

    api_version: ApiVersion

    #: Resource probed to read a server's network configuration.
    network_config_path: str

    #: Resource listing a node's peers.
    peers_path: str = "peers"

    @abstractmethod
    def extract_network_config(self, body: dict[str, Any]) -> dict[str, Any]:
        """Pick the network configuration out of a probe answer."""

    @abstractmethod
    def extract_peers(self, body: dict[str, Any]) -> list[dict[str, Any]]:
        """Pick the raw peer entries out of a peer-list answer."""

    @abstractmethod
    async def peer_status(
        self, transport: NodeTransport, target: ConnectionTarget
    ) -> dict[str, Any]:
        """Node status; its semantics differ per version and pass through."""

    @abstractmethod
    async def delegates(
        self, transport: NodeTransport, target: ConnectionTarget
    ) -> SoftResult[list[Delegate]]:
        """All delegates in the canonical shape."""

    @abstractmethod
    async def delegate_forged(
        self, transport: NodeTransport, target: ConnectionTarget, public_key: str
    ) -> SoftResult[int]:
        """Total forged by the delegate with ``public_key``."""

    @abstractmethod
    async def transactions(
        self,
        transport: NodeTransport,
        target: ConnectionTarget,
        address: str,
        *,
        page: int,
        limit: int,
        order_by: str,
        epoch: datetime,
    ) -> SoftResult[TransactionPage]:
        """One page of the transactions sent or received by ``address``."""

    @abstractmethod
    async def wallet(
        self, transport: NodeTransport, target: ConnectionTarget, address: str
    ) -> SoftResult[Wallet]:
        """The wallet at ``address``."""

    @abstractmethod
    async def wallet_vote(
        self, transport: NodeTransport, target: ConnectionTarget, address: str
    ) -> SoftResult[str | None]:
        """Public key of the delegate ``address`` votes for, ``None`` if none."""

    @abstractmethod
    async def broadcast(
        self,
        transport: NodeTransport,
        target: ConnectionTarget,
        transactions: Sequence[Any],
    ) -> dict[str, Any]:
        """Submit signed transactions; the answer is returned untouched."""


def _enrich_page(page: TransactionPage, address: str) -> TransactionPage:
    return TransactionPage(
        transactions=[enrich_transaction(tx, address) for tx in page.transactions],
        total_count=page.total_count,
    )


# ---------------------------------------------------------------------------
# v1
# ---------------------------------------------------------------------------


class V1Dialect(NodeDialect):
    """Legacy API: flat payloads with a ``success`` flag."""

    api_version = ApiVersion.V1
    network_config_path = "loader/status"

    def extract_network_config(self, body: dict[str, Any]) -> dict[str, Any]:
        return body["network"]

    def extract_peers(self, body: dict[str, Any]) -> list[dict[str, Any]]:
        return body.get("peers", []) if body.get("success") else []

    async def peer_status(self, transport, target):
        return await transport.get(target, "loader/autoconfigure")

    async def delegates(self, transport, target):
        data = await transport.get(target, "delegates")
        rows = data.get("delegates", []) if data.get("success") else []
        return soft_result(data, [delegate_from_v1(row) for row in rows])

    async def delegate_forged(self, transport, target, public_key):
        data = await transport.get(
            target,
            "delegates/forging/getForgedByAccount",
            params={"generatorPublicKey": public_key},
        )
        return soft_result(data, int(data.get("forged", 0)))

    async def transactions(self, transport, target, address, *, page, limit, order_by, epoch):
        # Page 0 gives a negative offset; sent as-is.
        data = await transport.get(
            target,
            "transactions",
            params={
                "recipientId": address,
                "senderId": address,
                "orderBy": order_by,
                "offset": (page - 1) * limit,
                "limit": limit,
            },
        )
        if not data.get("success"):
            return soft_result(data, TransactionPage(transactions=[], total_count=0))
        result = TransactionPage(
            transactions=[transaction_from_v1(tx, epoch) for tx in data.get("transactions", [])],
            total_count=int(data.get("count", 0)),
        )
        return SoftResult.ok(_enrich_page(result, address))

    async def wallet(self, transport, target, address):
        data = await transport.get(target, "accounts", params={"address": address})
        if not data.get("success"):
            return soft_result(data, None)
        return SoftResult.ok(wallet_from_v1(data["account"]))

    async def wallet_vote(self, transport, target, address):
        data = await transport.get(target, "accounts/delegates", params={"address": address})
        delegates = data.get("delegates") or []
        return soft_result(data, delegates[0]["publicKey"] if delegates else None)

    async def broadcast(self, transport, target, transactions):
        return await transport.post(
            target, "peer/transactions", json={"transactions": list(transactions)}
        )


# ---------------------------------------------------------------------------
# v2
# ---------------------------------------------------------------------------


class V2Dialect(NodeDialect):
    """Current API: payloads wrapped in ``data`` (and ``meta`` for pages)."""

    api_version = ApiVersion.V2
    network_config_path = "node/configuration"

    def extract_network_config(self, body: dict[str, Any]) -> dict[str, Any]:
        return body["data"]

    def extract_peers(self, body: dict[str, Any]) -> list[dict[str, Any]]:
        return body.get("data", [])

    async def peer_status(self, transport, target):
        data = await transport.get(target, "node/syncing")
        return data["data"]

    async def delegates(self, transport, target):
        data = await transport.get(target, "delegates")
        return SoftResult.ok([delegate_from_v2(row) for row in data.get("data", [])])

    async def delegate_forged(self, transport, target, public_key):
        data = await transport.get(target, f"delegates/{public_key}")
        forged = data["data"].get("forged") or {}
        return SoftResult.ok(int(forged.get("total", 0)))

    async def transactions(self, transport, target, address, *, page, limit, order_by, epoch):
        # TODO: forward order_by once the v2 wallet transactions endpoint sorts on request.
        data = await transport.get(
            target,
            f"wallets/{address}/transactions",
            params={"limit": limit, "page": page},
        )
        result = TransactionPage(
            transactions=[transaction_from_v2(tx) for tx in data.get("data", [])],
            total_count=int(data.get("meta", {}).get("totalCount", 0)),
        )
        return SoftResult.ok(_enrich_page(result, address))

    async def wallet(self, transport, target, address):
        data = await transport.get(target, f"wallets/{address}")
        return SoftResult.ok(wallet_from_v2(data["data"]))

    async def wallet_vote(self, transport, target, address):
        data = await transport.get(target, f"wallets/{address}/votes")
        votes = data.get("data") or []
        return SoftResult.ok(vote_from_v2(votes[0]) if votes else None)

    async def broadcast(self, transport, target, transactions):
        return await transport.post(target, "transactions", json={"transactions": list(transactions)})


_DIALECTS: dict[ApiVersion, NodeDialect] = {
    ApiVersion.V1: V1Dialect(),
    ApiVersion.V2: V2Dialect(),
}


def dialect_for(api_version: ApiVersion | int) -> NodeDialect:
    """Return the dialect spoken by nodes of ``api_version``.

    Raises:
        ValueError: For versions other than 1 and 2.
    """
    return _DIALECTS[ApiVersion(api_version)]
