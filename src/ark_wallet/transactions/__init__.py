"""Transaction building pipeline."""

from ark_wallet.transactions.builder import TransactionBuilder

__all__ = ["TransactionBuilder"]
