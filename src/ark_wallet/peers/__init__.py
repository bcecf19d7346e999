"""Peer system maintenance."""

from ark_wallet.peers.system import PeerSystem, PeerSystemState

__all__ = ["PeerSystem", "PeerSystemState"]
