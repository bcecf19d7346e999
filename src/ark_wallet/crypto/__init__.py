"""Keys and transaction drafts used to sign wallet transactions."""

from ark_wallet.crypto.keys import KeyPair, verify_signature
from ark_wallet.crypto.transaction import (
    DEFAULT_FEES,
    Draft,
    TransactionType,
    transaction_builder,
)

__all__ = [
    "DEFAULT_FEES",
    "Draft",
    "KeyPair",
    "TransactionType",
    "transaction_builder",
    "verify_signature",
]
