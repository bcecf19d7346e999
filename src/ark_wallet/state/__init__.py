"""Wallet state container: interface and in-memory implementation."""

from ark_wallet.state.base import WalletState
from ark_wallet.state.memory import MemoryWalletState
from ark_wallet.state.models import Network, Profile

__all__ = ["MemoryWalletState", "Network", "Profile", "WalletState"]
