"""Node client — one version-agnostic query and command surface.

Composes the connection binding, the per-version dialects, the transaction
builder and peer discovery. Every operation snapshots the bound target once
when it is issued, picks the dialect for that target, and returns the
canonical shapes of ``normalizer`` whatever version the node speaks.

Error policy:
- transport failures raise ``NodeAPIError`` and are never retried here
- legacy ``success: false`` answers become ``[]``, ``0`` or ``None``
  (the node cannot tell "not found" from "failed" apart either)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self, TypeVar

from ark_wallet.client.connection import ConnectionBinding, ConnectionTarget
from ark_wallet.client.dialects import NodeDialect, dialect_for
from ark_wallet.client.discovery import find_peers
from ark_wallet.client.normalizer import Delegate, SoftResult, TransactionPage
from ark_wallet.client.peer_address import parse_peer_address
from ark_wallet.client.transport import NodeTransport
from ark_wallet.config.settings import ARK_EPOCH, ApiVersion, DiscoveryConfig
from ark_wallet.transactions.builder import TransactionBuilder

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from types import TracebackType

    import httpx

    from ark_wallet.client.normalizer import Peer, Wallet
    from ark_wallet.state.base import WalletState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NodeClient:
    """Version-aware client for the bound node.

    Usage::

        async with NodeClient(binding, state=state) as client:
            wallet = await client.fetch_wallet("AXYZ...")
            page = await client.fetch_transactions("AXYZ...", page=1)
    """

    def __init__(
        self,
        binding: ConnectionBinding | None = None,
        transport: NodeTransport | None = None,
        *,
        state: WalletState | None = None,
        discovery: DiscoveryConfig | None = None,
    ) -> None:
        """Initialize the node client.

        Args:
            binding: Connection binding shared with the profile watcher.
            transport: HTTP transport; a default one is created if omitted.
            state: Wallet state container, read for the session network epoch.
            discovery: Peer discovery settings.
        """
        self._binding = binding or ConnectionBinding()
        self._transport = transport or NodeTransport()
        self._state = state
        self._discovery = discovery or DiscoveryConfig()

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def connect(self) -> None:
        """Open the underlying transport."""
        await self._transport.connect()

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    @property
    def binding(self) -> ConnectionBinding:
        return self._binding

    @property
    def host(self) -> str:
        return self._binding.host

    @host.setter
    def host(self, host: str) -> None:
        self._binding.set_host(host)

    @property
    def version(self) -> ApiVersion:
        return self._binding.version

    @version.setter
    def version(self, api_version: ApiVersion | int) -> None:
        self._binding.set_version(api_version)

    def _snapshot(self) -> tuple[ConnectionTarget, NodeDialect]:
        target = self._binding.target
        return target, dialect_for(target.api_version)

    def _epoch(self) -> datetime:
        network = self._state.session_network() if self._state else None
        return network.epoch if network else ARK_EPOCH

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    async def fetch_network_config(
        server: str,
        api_version: ApiVersion | int,
        timeout: float | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> dict[str, Any]:
        """Read the network configuration of a candidate server.

        Runs on a one-off client, independent of the bound target.

        Args:
            server: Base URL of the server to probe.
            api_version: API version to probe with.
            timeout: Overrides the default timeout for this probe only.
            transport: Optional httpx transport (tests use a mock).
        """
        dialect = dialect_for(api_version)
        body = await NodeTransport.probe(
            server,
            api_version,
            dialect.network_config_path,
            timeout=timeout,
            transport=transport,
        )
        return dialect.extract_network_config(body)

    async def fetch_peer_status(self) -> dict[str, Any]:
        """Status of the bound node, passed through as the node reports it."""
        target, dialect = self._snapshot()
        return await dialect.peer_status(self._transport, target)

    async def fetch_delegates(self) -> list[Delegate]:
        """All delegates; empty when a legacy node reports failure."""
        target, dialect = self._snapshot()
        result = await dialect.delegates(self._transport, target)
        return self._collapse(result, [], "fetch_delegates")

    async def fetch_delegate_forged(self, delegate: Delegate | Mapping[str, Any]) -> int:
        """Total forged by ``delegate``.

        Uses the total already carried by the delegate when present. ``0`` is
        also returned when a legacy node reports failure.
        """
        if isinstance(delegate, Delegate):
            if delegate.forged is not None:
                return delegate.forged.total
            public_key = delegate.public_key
        else:
            if delegate.get("forged"):
                return int(delegate["forged"]["total"])
            public_key = delegate["publicKey"]

        target, dialect = self._snapshot()
        result = await dialect.delegate_forged(self._transport, target, public_key)
        return self._collapse(result, 0, "fetch_delegate_forged")

    async def fetch_transactions(
        self,
        address: str,
        *,
        page: int = 0,
        limit: int = 50,
        order_by: str = "timestamp:desc",
    ) -> TransactionPage:
        """One page of transactions sent or received by ``address``.

        Legacy nodes take an offset of ``(page - 1) * limit``; v2 nodes ignore
        ``order_by``.
        """
        target, dialect = self._snapshot()
        result = await dialect.transactions(
            self._transport,
            target,
            address,
            page=page,
            limit=limit,
            order_by=order_by,
            epoch=self._epoch(),
        )
        return self._collapse(
            result,
            TransactionPage(transactions=[], total_count=0),
            "fetch_transactions",
        )

    async def fetch_wallet(self, address: str) -> Wallet | None:
        """The wallet at ``address``; ``None`` when a legacy node reports failure."""
        target, dialect = self._snapshot()
        result = await dialect.wallet(self._transport, target, address)
        return self._collapse(result, None, "fetch_wallet")

    async def fetch_wallet_vote(self, address: str) -> str | None:
        """Public key of the delegate ``address`` votes for, ``None`` if it has not voted."""
        target, dialect = self._snapshot()
        result = await dialect.wallet_vote(self._transport, target, address)
        return self._collapse(result, None, "fetch_wallet_vote")

    async def fetch_peers(
        self,
        network: str | None = None,
        peers: Sequence[str | dict[str, Any]] | None = None,
    ) -> list[Peer]:
        """Discover peers speaking the bound API version.

        A ``network`` forces seed-based discovery and ignores ``peers``.
        Without either, the bound host is the only peer asked.
        """
        target, _ = self._snapshot()
        if network:
            peers = self._known_seeds(network)
        elif not peers:
            peers = [parse_peer_address(target.host).to_peer()]
        return await find_peers(
            self._transport,
            network,
            target.api_version,
            peers,
            config=self._discovery,
        )

    def _known_seeds(self, network: str) -> list[str] | None:
        """Seeds configured for ``network``; ``None`` means download them."""
        if self._state is None:
            return None
        try:
            seeds = self._state.network_by_id(network).seeds
        except KeyError:
            return None
        return list(seeds) or None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _builder(self) -> TransactionBuilder:
        return TransactionBuilder(epoch=self._epoch())

    async def build_vote(
        self,
        *,
        votes: list[str],
        passphrase: str | None = None,
        second_passphrase: str | None = None,
        wif: str | None = None,
    ) -> Mapping[str, Any]:
        """Build a signed vote transaction."""
        return self._builder().build_vote(
            votes=votes,
            passphrase=passphrase,
            second_passphrase=second_passphrase,
            wif=wif,
        )

    async def build_delegate_registration(
        self,
        *,
        username: str,
        passphrase: str | None = None,
        second_passphrase: str | None = None,
        wif: str | None = None,
    ) -> Mapping[str, Any]:
        """Build a signed delegate registration."""
        return self._builder().build_delegate_registration(
            username=username,
            passphrase=passphrase,
            second_passphrase=second_passphrase,
            wif=wif,
        )

    async def build_transfer(
        self,
        *,
        amount: int,
        recipient_id: str,
        vendor_field: str | None = None,
        passphrase: str | None = None,
        second_passphrase: str | None = None,
        wif: str | None = None,
    ) -> Mapping[str, Any]:
        """Build a signed transfer."""
        return self._builder().build_transfer(
            amount=amount,
            recipient_id=recipient_id,
            vendor_field=vendor_field,
            passphrase=passphrase,
            second_passphrase=second_passphrase,
            wif=wif,
        )

    async def build_second_signature_registration(
        self,
        *,
        second_passphrase: str,
        passphrase: str | None = None,
        wif: str | None = None,
    ) -> Mapping[str, Any]:
        """Build a signed second-signature registration."""
        return self._builder().build_second_signature_registration(
            second_passphrase=second_passphrase,
            passphrase=passphrase,
            wif=wif,
        )

    async def broadcast_transaction(
        self,
        transactions: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    ) -> dict[str, Any]:
        """Submit one or many signed transactions to the bound node.

        Returns the node's answer untouched.
        """
        if isinstance(transactions, Mapping):
            transactions = [transactions]
        target, dialect = self._snapshot()
        return await dialect.broadcast(
            self._transport,
            target,
            [dict(tx) for tx in transactions],
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _collapse(result: SoftResult[T], default: T, operation: str) -> T:
        if result.is_failed:
            logger.warning("%s: node reported failure (%s)", operation, result.failure)
        return result.unwrap_or(default)
