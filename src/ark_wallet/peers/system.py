"""Peer system recovery — fall back to a known-good peer set.

``update`` re-checks the selected peer. While it stays valid the refreshed
peer is committed again; when there is no peer, or re-checking it fails for
any reason, the peer pool and selection are cleared and the system
reconnects to the best available peer, pinned or not.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ark_wallet.client.normalizer import Peer
    from ark_wallet.state.base import WalletState

logger = logging.getLogger(__name__)


class PeerSystemState(enum.StrEnum):
    """Stable: a valid peer is selected. Recovering: falling back to seeds."""

    STABLE = "stable"
    RECOVERING = "recovering"


class PeerSystem:
    """Checks the selected peer and recovers when it is gone or invalid."""

    def __init__(self, state: WalletState) -> None:
        self._state = state
        self._status = PeerSystemState.STABLE

    @property
    def status(self) -> PeerSystemState:
        return self._status

    async def update(self) -> Peer | None:
        """Re-check the selected peer, recovering if it is unusable.

        Never raises: a failed check and a failed recovery are both logged.
        A peer pinned by the user stays pinned when it is committed again.

        Returns:
            The refreshed peer when it is still valid, else ``None``.
        """
        peer = self._state.current_peer()

        if peer is None:
            await self._recover()
            return None

        try:
            pinned = self._state.current_is_custom()
            peer = await self._state.update_peer(peer)
            await self._state.set_current_peer(peer, custom=pinned)
        except Exception:
            logger.exception("Peer %s:%s failed its refresh", peer.ip, peer.port)
            await self._recover()
            return None

        self._status = PeerSystemState.STABLE
        return peer

    async def clear(self) -> None:
        """Drop the peer pool and selection, then reconnect to the best peer."""
        await self._state.clear_peers()
        await self._state.clear_current_peer()
        await self._state.connect_to_best(skip_if_custom=False)

    async def _recover(self) -> None:
        self._status = PeerSystemState.RECOVERING
        try:
            await self.clear()
            await self._state.refresh_peers()
        except Exception:
            logger.exception("Peer recovery failed")
            return
        if self._state.current_peer() is not None:
            self._status = PeerSystemState.STABLE
