"""Profile watcher — keep the connection binding on the active profile's node.

On every change of the active profile (and once right away on ``start``),
and on every change of the selected peer:

- no active profile: nothing happens
- a peer is selected: bind to ``http://{ip}:{port}``, API version from the
  peer's software version (``2.x`` speaks v2, anything else v1)
- otherwise: bind to the server and API version of the profile's network

Each rebind is followed by exactly one ``client:changed`` notification.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ark_wallet.config.settings import ApiVersion
from ark_wallet.notifications import EventType, default_bus

if TYPE_CHECKING:
    from collections.abc import Callable

    from ark_wallet.client.connection import ConnectionBinding, ConnectionTarget
    from ark_wallet.client.normalizer import Peer
    from ark_wallet.notifications import EventBus
    from ark_wallet.state.base import WalletState
    from ark_wallet.state.models import Profile

logger = logging.getLogger(__name__)


class ProfileWatcher:
    """Rebinds a ``ConnectionBinding`` whenever the session target changes."""

    def __init__(
        self,
        state: WalletState,
        binding: ConnectionBinding,
        bus: EventBus | None = None,
    ) -> None:
        self._state = state
        self._binding = binding
        self._bus = bus or default_bus
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def is_watching(self) -> bool:
        return bool(self._unsubscribers)

    def start(self) -> None:
        """Subscribe to profile and peer changes; rebinds immediately."""
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self._state.watch_profile(self._on_profile, immediate=True),
            self._state.watch_current_peer(self._on_peer, immediate=False),
        ]

    def stop(self) -> None:
        """Drop the subscriptions; the binding keeps its last target."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_profile(self, profile: Profile | None) -> None:
        self.sync(profile)

    def _on_peer(self, _peer: Peer | None) -> None:
        self.sync(self._state.active_profile())

    def sync(self, profile: Profile | None) -> ConnectionTarget | None:
        """Bind to the node serving ``profile`` and announce the change.

        Returns:
            The new target, or ``None`` when there is no active profile.
        """
        if profile is None:
            return None

        network = self._state.network_by_id(profile.network_id)
        peer = self._state.current_peer()

        if peer is not None and peer.ip:
            target = self._binding.rebind(
                f"http://{peer.ip}:{peer.port}",
                ApiVersion.from_peer_version(peer.version),
            )
        else:
            target = self._binding.rebind(network.server, network.api_version)

        logger.info("Profile %s bound to %s (v%d)", profile.id, target.host, target.api_version)
        self._bus.emit(EventType.CLIENT_CHANGED)
        return target
