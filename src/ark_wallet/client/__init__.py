"""Node client — connection binding, dialects, discovery and profile watching."""

from ark_wallet.client.connection import ConnectionBinding, ConnectionTarget
from ark_wallet.client.node import NodeClient
from ark_wallet.client.peer_address import PeerAddress, parse_peer_address
from ark_wallet.client.transport import NodeTransport
from ark_wallet.client.watcher import ProfileWatcher

__all__ = [
    "ConnectionBinding",
    "ConnectionTarget",
    "NodeClient",
    "NodeTransport",
    "PeerAddress",
    "ProfileWatcher",
    "parse_peer_address",
]
