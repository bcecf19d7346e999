"""In-process wallet state container.

Holds profiles, networks and the peer pool in memory. Peer discovery and peer
checks are delegated to injectable coroutines so the container itself never
talks to the network.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ark_wallet.state.base import WalletState

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from ark_wallet.client.normalizer import Peer
    from ark_wallet.state.models import Network, Profile

    PeerSource = Callable[[Network], Awaitable[list[Peer]]]
    PeerProbe = Callable[[Peer], Awaitable[Peer]]

logger = logging.getLogger(__name__)


def _best_peer(peers: Iterable[Peer]) -> Peer | None:
    """Highest height first, then lowest latency (unknown latency last)."""
    ranked = sorted(
        peers,
        key=lambda p: (-p.height, p.latency if p.latency is not None else float("inf")),
    )
    return ranked[0] if ranked else None


class MemoryWalletState(WalletState):
    """Wallet state kept in memory.

    Args:
        networks: Known networks.
        peer_source: Loads the peer pool of a network (used by refresh).
        peer_probe: Re-checks a single peer; raises when it is unusable.
    """

    def __init__(
        self,
        networks: Iterable[Network],
        *,
        peer_source: PeerSource | None = None,
        peer_probe: PeerProbe | None = None,
    ) -> None:
        self._networks: dict[str, Network] = {n.id: n for n in networks}
        self._profiles: dict[str, Profile] = {}
        self._active_profile_id: str | None = None
        self._peers: list[Peer] = []
        self._current_peer: Peer | None = None
        self._current_is_custom = False
        self._peer_source = peer_source
        self._peer_probe = peer_probe
        self._profile_watchers: list[Callable[[Profile | None], None]] = []
        self._peer_watchers: list[Callable[[Peer | None], None]] = []

    # -- Profiles ----------------------------------------------------------

    def add_profile(self, profile: Profile) -> None:
        self._profiles[profile.id] = profile

    def set_active_profile(self, profile_id: str | None) -> None:
        """Switch the session profile, notifying profile watchers on change."""
        if profile_id is not None and profile_id not in self._profiles:
            raise KeyError(profile_id)
        if profile_id == self._active_profile_id:
            return
        self._active_profile_id = profile_id
        profile = self.active_profile()
        for callback in list(self._profile_watchers):
            callback(profile)

    # -- Getters -----------------------------------------------------------

    def active_profile(self) -> Profile | None:
        if self._active_profile_id is None:
            return None
        return self._profiles[self._active_profile_id]

    def session_network(self) -> Network | None:
        profile = self.active_profile()
        if profile is None:
            return None
        return self._networks.get(profile.network_id)

    def network_by_id(self, network_id: str) -> Network:
        return self._networks[network_id]

    def current_peer(self) -> Peer | None:
        return self._current_peer

    @property
    def peers(self) -> list[Peer]:
        return list(self._peers)

    def current_is_custom(self) -> bool:
        return self._current_is_custom

    # -- Watches -----------------------------------------------------------

    def watch_profile(self, callback, *, immediate=True):
        self._profile_watchers.append(callback)
        if immediate:
            callback(self.active_profile())
        return lambda: self._discard(self._profile_watchers, callback)

    def watch_current_peer(self, callback, *, immediate=False):
        self._peer_watchers.append(callback)
        if immediate:
            callback(self._current_peer)
        return lambda: self._discard(self._peer_watchers, callback)

    @staticmethod
    def _discard(watchers: list, callback) -> None:
        if callback in watchers:
            watchers.remove(callback)

    # -- Actions -----------------------------------------------------------

    def set_peers(self, peers: Iterable[Peer]) -> None:
        self._peers = list(peers)

    async def set_current_peer(self, peer: Peer, *, custom: bool = False) -> None:
        self._current_is_custom = custom
        self._select(peer)

    async def clear_current_peer(self) -> None:
        self._current_is_custom = False
        self._select(None)

    async def clear_peers(self) -> None:
        self._peers = []

    async def refresh_peers(self) -> None:
        network = self.session_network()
        if network is None or self._peer_source is None:
            return
        self._peers = list(await self._peer_source(network))
        logger.info("Refreshed %d peers for %s", len(self._peers), network.id)

    async def update_peer(self, peer: Peer) -> Peer:
        if self._peer_probe is None:
            return peer
        return await self._peer_probe(peer)

    async def connect_to_best(self, *, skip_if_custom: bool = True) -> Peer | None:
        if skip_if_custom and self._current_is_custom and self._current_peer is not None:
            return self._current_peer
        if not self._peers:
            await self.refresh_peers()
        best = _best_peer(self._peers)
        if best is None:
            logger.warning("No peer available to connect to")
            return None
        self._current_is_custom = False
        self._select(best)
        return best

    def _select(self, peer: Peer | None) -> None:
        if peer == self._current_peer:
            return
        self._current_peer = peer
        for callback in list(self._peer_watchers):
            callback(peer)
