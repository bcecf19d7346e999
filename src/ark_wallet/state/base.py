"""Wallet state container interface.

The node client never owns profiles, networks or peers; it reads and changes
them only through this interface. Watches fire synchronously with the new
value; ``watch_profile`` also fires once on subscription by default.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from ark_wallet.client.normalizer import Peer
    from ark_wallet.state.models import Network, Profile


class WalletState(ABC):
    """Getters, watches and actions the client relies on."""

    # -- Getters -----------------------------------------------------------

    @abstractmethod
    def active_profile(self) -> Profile | None:
        """The profile the session runs under, if any."""

    @abstractmethod
    def session_network(self) -> Network | None:
        """Network of the active profile."""

    @abstractmethod
    def network_by_id(self, network_id: str) -> Network:
        """Look up a network.

        Raises:
            KeyError: If the network is unknown.
        """

    @abstractmethod
    def current_peer(self) -> Peer | None:
        """The selected peer, ``None`` when no peer is selected."""

    @abstractmethod
    def current_is_custom(self) -> bool:
        """Whether the selected peer was pinned by the user."""

    # -- Watches -----------------------------------------------------------

    @abstractmethod
    def watch_profile(
        self,
        callback: Callable[[Profile | None], None],
        *,
        immediate: bool = True,
    ) -> Callable[[], None]:
        """Call ``callback`` on every active-profile change; returns an unsubscribe."""

    @abstractmethod
    def watch_current_peer(
        self,
        callback: Callable[[Peer | None], None],
        *,
        immediate: bool = False,
    ) -> Callable[[], None]:
        """Call ``callback`` on every selected-peer change; returns an unsubscribe."""

    # -- Actions -----------------------------------------------------------

    @abstractmethod
    async def set_current_peer(self, peer: Peer, *, custom: bool = False) -> None:
        """Select ``peer``; ``custom`` marks a peer pinned by the user."""

    @abstractmethod
    async def clear_current_peer(self) -> None:
        """Drop the peer selection."""

    @abstractmethod
    async def clear_peers(self) -> None:
        """Empty the peer pool."""

    @abstractmethod
    async def refresh_peers(self) -> None:
        """Reload the peer pool for the session network."""

    @abstractmethod
    async def update_peer(self, peer: Peer) -> Peer:
        """Re-check ``peer`` and return its fresh status.

        Raises:
            Exception: Whatever the check raises when the peer is unusable.
        """

    @abstractmethod
    async def connect_to_best(self, *, skip_if_custom: bool = True) -> Peer | None:
        """Select the best peer of the pool.

        With ``skip_if_custom`` a user-pinned selection is left alone.
        """
