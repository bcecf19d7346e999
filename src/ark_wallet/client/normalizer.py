"""Response normalization — canonical shapes for v1 and v2 node payloads.

Pure functions, no I/O. Every public query of the node client returns one of
the dataclasses defined here, whatever API version the node speaks:

- ``Wallet`` — v1 ``accounts`` / v2 ``wallets``
- ``Delegate`` — v1 flat delegate rows / v2 nested delegate objects
- ``Transaction`` and ``TransactionPage`` — transaction history
- ``Peer`` — peer lists from either version
- ``SoftResult`` — v1 ``success: false`` answers made explicit
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Generic, TypeVar

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Soft failures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SoftResult(Generic[T]):
    """Either a normalized value or a "not found or failed" marker.

    Legacy nodes answer HTTP 200 with ``success: false`` both when a record
    does not exist and when the request failed; the two cannot be told apart.
    """

    value: T | None = None
    failure: str | None = None

    @classmethod
    def ok(cls, value: T) -> SoftResult[T]:
        return cls(value=value)

    @classmethod
    def failed(cls, reason: str = "") -> SoftResult[T]:
        return cls(failure=reason or "request unsuccessful")

    @property
    def is_failed(self) -> bool:
        return self.failure is not None

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` when the node reported a soft failure."""
        if self.failure is not None or self.value is None:
            return default
        return self.value


def soft_result(data: dict[str, Any], value: T) -> SoftResult[T]:
    """Wrap ``value`` according to the ``success`` flag of a v1 payload."""
    if data.get("success"):
        return SoftResult.ok(value)
    return SoftResult.failed(str(data.get("error", "")))


# ---------------------------------------------------------------------------
# Wallet
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Wallet:
    """Canonical wallet shape.

    Attributes:
        address: Wallet address.
        public_key: Public key, ``None`` until the wallet has sent a transaction.
        second_public_key: Second-signature public key, if registered.
        balance: Balance in arktoshi, always an ``int``.
        is_delegate: Whether the wallet registered a delegate.
        username: Delegate username, if any.
        vote: Public key of the delegate voted for, when the node reports it.
    """

    address: str
    public_key: str | None = None
    second_public_key: str | None = None
    balance: int = 0
    is_delegate: bool = False
    username: str | None = None
    vote: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "publicKey": self.public_key,
            "secondPublicKey": self.second_public_key,
            "balance": self.balance,
            "isDelegate": self.is_delegate,
            "username": self.username,
            "vote": self.vote,
        }


def wallet_from_v1(account: dict[str, Any]) -> Wallet:
    """Map a v1 ``account`` object.

    Legacy-only fields (``unconfirmedBalance``, ``unconfirmedSignature``,
    ``secondSignature``, ``multisignatures``, ``u_multisignatures``) have no
    place in the canonical shape and are dropped.
    """
    username = account.get("username")
    return Wallet(
        address=account["address"],
        public_key=account.get("publicKey"),
        second_public_key=account.get("secondPublicKey"),
        balance=int(account.get("balance", 0)),
        is_delegate=username is not None,
        username=username,
    )


def wallet_from_v2(data: dict[str, Any]) -> Wallet:
    """Map a v2 ``wallets/{id}`` object."""
    return Wallet(
        address=data["address"],
        public_key=data.get("publicKey"),
        second_public_key=data.get("secondPublicKey"),
        balance=int(data.get("balance", 0)),
        is_delegate=bool(data.get("isDelegate", False)),
        username=data.get("username"),
        vote=data.get("vote"),
    )


# ---------------------------------------------------------------------------
# Delegate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DelegateBlocks:
    produced: int = 0
    missed: int = 0


@dataclass(frozen=True)
class DelegateProduction:
    approval: float = 0.0
    productivity: float = 0.0


@dataclass(frozen=True)
class DelegateForged:
    fees: int = 0
    rewards: int = 0
    total: int = 0


@dataclass(frozen=True)
class Delegate:
    """Canonical delegate shape (the v2 nesting)."""

    username: str
    address: str
    public_key: str
    rank: int = 0
    votes: int = 0
    blocks: DelegateBlocks = field(default_factory=DelegateBlocks)
    production: DelegateProduction = field(default_factory=DelegateProduction)
    forged: DelegateForged | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "address": self.address,
            "publicKey": self.public_key,
            "rank": self.rank,
            "votes": self.votes,
            "blocks": dataclasses.asdict(self.blocks),
            "production": dataclasses.asdict(self.production),
            "forged": dataclasses.asdict(self.forged) if self.forged else None,
        }


def delegate_from_v1(row: dict[str, Any]) -> Delegate:
    """Remap a flat v1 delegate row into the nested v2 shape."""
    return Delegate(
        username=row.get("username", ""),
        address=row.get("address", ""),
        public_key=row.get("publicKey", ""),
        rank=int(row.get("rate", 0)),
        votes=int(row.get("vote", 0)),
        blocks=DelegateBlocks(
            produced=int(row.get("producedblocks", 0)),
            missed=int(row.get("missedblocks", 0)),
        ),
        production=DelegateProduction(
            approval=float(row.get("approval", 0.0)),
            productivity=float(row.get("productivity", 0.0)),
        ),
    )


def delegate_from_v2(data: dict[str, Any]) -> Delegate:
    blocks = data.get("blocks") or {}
    production = data.get("production") or {}
    forged = data.get("forged")
    return Delegate(
        username=data.get("username", ""),
        address=data.get("address", ""),
        public_key=data.get("publicKey", ""),
        rank=int(data.get("rank", 0)),
        votes=int(data.get("votes", 0)),
        blocks=DelegateBlocks(
            produced=int(blocks.get("produced", 0)),
            missed=int(blocks.get("missed", 0)),
        ),
        production=DelegateProduction(
            approval=float(production.get("approval", 0.0)),
            productivity=float(production.get("productivity", 0.0)),
        ),
        forged=(
            DelegateForged(
                fees=int(forged.get("fees", 0)),
                rewards=int(forged.get("rewards", 0)),
                total=int(forged.get("total", 0)),
            )
            if forged
            else None
        ),
    )


# ---------------------------------------------------------------------------
# Transaction
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Transaction:
    """Canonical transaction shape.

    ``is_sender``, ``is_receiver`` and ``total_amount`` are filled in by
    ``enrich_transaction`` relative to the queried address.
    """

    id: str
    type: int
    sender: str
    recipient: str | None
    amount: int
    fee: int
    timestamp: datetime
    vendor_field: str | None = None
    confirmations: int = 0
    total_amount: int = 0
    is_sender: bool = False
    is_receiver: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "sender": self.sender,
            "recipient": self.recipient,
            "amount": self.amount,
            "fee": self.fee,
            "totalAmount": self.total_amount,
            "timestamp": self.timestamp.isoformat(),
            "vendorField": self.vendor_field,
            "confirmations": self.confirmations,
            "isSender": self.is_sender,
            "isReceiver": self.is_receiver,
        }


@dataclass(frozen=True)
class TransactionPage:
    transactions: list[Transaction]
    total_count: int


def transaction_from_v1(tx: dict[str, Any], epoch: datetime) -> Transaction:
    """Map a v1 transaction row.

    v1 timestamps are seconds relative to the network epoch.
    """
    return Transaction(
        id=tx.get("id", ""),
        type=int(tx.get("type", 0)),
        sender=tx.get("senderId", ""),
        recipient=tx.get("recipientId"),
        amount=int(tx.get("amount", 0)),
        fee=int(tx.get("fee", 0)),
        timestamp=epoch + timedelta(milliseconds=tx["timestamp"] * 1000),
        vendor_field=tx.get("vendorField"),
        confirmations=int(tx.get("confirmations", 0)),
    )


def transaction_from_v2(tx: dict[str, Any]) -> Transaction:
    """Map a v2 transaction; its timestamp already carries a human date."""
    return Transaction(
        id=tx.get("id", ""),
        type=int(tx.get("type", 0)),
        sender=tx.get("sender", ""),
        recipient=tx.get("recipient"),
        amount=int(tx.get("amount", 0)),
        fee=int(tx.get("fee", 0)),
        timestamp=datetime.fromisoformat(tx["timestamp"]["human"]),
        vendor_field=tx.get("vendorField"),
        confirmations=int(tx.get("confirmations", 0)),
    )


def enrich_transaction(tx: Transaction, address: str) -> Transaction:
    """Compute direction flags and total relative to ``address``."""
    return dataclasses.replace(
        tx,
        is_sender=tx.sender == address,
        is_receiver=tx.recipient == address,
        total_amount=tx.amount + tx.fee,
    )


# ---------------------------------------------------------------------------
# Vote
# ---------------------------------------------------------------------------


def vote_from_v2(vote: dict[str, Any]) -> str:
    """Extract the delegate public key from a v2 vote transaction.

    Vote assets look like ``"+<publicKey>"``; the one-character prefix is
    the vote direction.
    """
    return vote["asset"]["votes"][0][1:]


# ---------------------------------------------------------------------------
# Peer
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Peer:
    """Candidate node endpoint."""

    ip: str
    port: int
    version: str = ""
    height: int = 0
    status: str = ""
    latency: int | None = None

    @property
    def url(self) -> str:
        return f"http://{self.ip}:{self.port}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Peer:
        """Build from a v1 (``delay``) or v2 (``latency``) peer entry."""
        latency = data.get("latency", data.get("delay"))
        return cls(
            ip=data["ip"],
            port=int(data["port"]),
            version=data.get("version") or "",
            height=int(data.get("height") or 0),
            status=str(data.get("status", "")),
            latency=int(latency) if latency is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "ip": self.ip,
            "port": self.port,
            "version": self.version,
            "height": self.height,
            "status": self.status,
            "latency": self.latency,
        }
