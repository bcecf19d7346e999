"""Error hierarchy for the wallet client."""

from ark_wallet.errors.node_errors import (
    NodeAPIError,
    PeerAddressError,
    PeerDiscoveryError,
    SigningError,
)
from ark_wallet.errors.wallet_errors import ArkWalletError

__all__ = [
    "ArkWalletError",
    "NodeAPIError",
    "PeerAddressError",
    "PeerDiscoveryError",
    "SigningError",
]
