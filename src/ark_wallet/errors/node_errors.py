"""Node, peer and signing errors."""

from __future__ import annotations

from ark_wallet.errors.wallet_errors import ArkWalletError


class NodeAPIError(ArkWalletError):
    """Transport-level failure talking to a node (HTTP error, bad body, unreachable)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str = "node-api-error",
    ) -> None:
        super().__init__(message, code=code)
        self.status_code = status_code


class PeerDiscoveryError(ArkWalletError):
    """No seed or peer answered a discovery request."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="peer-discovery-error")


class PeerAddressError(ArkWalletError, ValueError):
    """A host URL could not be parsed into scheme/ip/port."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="peer-address-error")


class SigningError(ArkWalletError):
    """Invalid key material handed to the transaction signer."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="signing-error")
