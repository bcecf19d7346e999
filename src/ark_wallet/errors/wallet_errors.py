"""ArkWalletError — base exception class for all ark-wallet errors."""

from __future__ import annotations


class ArkWalletError(Exception):
    """Base error for all wallet client operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "ark-wallet-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code
