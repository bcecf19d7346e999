"""State models shared between the wallet state container and the client."""

from __future__ import annotations

from dataclasses import dataclass

from ark_wallet.config.settings import NetworkConfig

# Networks held by the state container are the configured ones.
Network = NetworkConfig


@dataclass(frozen=True)
class Profile:
    """A user profile, bound to one network."""

    id: str
    name: str
    network_id: str
