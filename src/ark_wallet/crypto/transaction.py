"""Transaction drafts — fluent assembly, signing and struct extraction.

Each transaction kind has a draft accumulating its asset payload. Signing is
applied on the serialized bytes:

    type (1) | timestamp (4 LE) | sender public key (33) | recipient (21)
    | vendor field (64) | amount (8 LE) | fee (8 LE) | asset
    | [signature] | [second signature]

The first signature covers everything up to the asset, the second signature
also covers the first, and the id is SHA-256 of the fully signed bytes.
"""

from __future__ import annotations

import enum
import struct
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Self

from ark_wallet.config.settings import ARK_EPOCH
from ark_wallet.crypto.keys import KeyPair, base58check_decode, sha256

if TYPE_CHECKING:
    from collections.abc import Mapping

_RECIPIENT_LENGTH = 21
_VENDOR_FIELD_LENGTH = 64


class TransactionType(enum.IntEnum):
    TRANSFER = 0
    SECOND_SIGNATURE = 1
    DELEGATE_REGISTRATION = 2
    VOTE = 3


# Static fees in arktoshi (1 ARK = 10^8 arktoshi)
DEFAULT_FEES: dict[TransactionType, int] = {
    TransactionType.TRANSFER: 10_000_000,
    TransactionType.SECOND_SIGNATURE: 500_000_000,
    TransactionType.DELEGATE_REGISTRATION: 2_500_000_000,
    TransactionType.VOTE: 100_000_000,
}


def _recipient_bytes(recipient_id: str | None) -> bytes:
    if not recipient_id:
        return b"\x00" * _RECIPIENT_LENGTH
    try:
        raw = base58check_decode(recipient_id)
    except ValueError:
        # Not an address; serialized verbatim so the node can reject it.
        raw = recipient_id.encode("utf-8")
    return raw[:_RECIPIENT_LENGTH].ljust(_RECIPIENT_LENGTH, b"\x00")


def _vendor_field_bytes(vendor_field: str | None) -> bytes:
    raw = (vendor_field or "").encode("utf-8")
    return raw[:_VENDOR_FIELD_LENGTH].ljust(_VENDOR_FIELD_LENGTH, b"\x00")


class Draft:
    """An unsigned transaction being assembled.

    Usage::

        struct = (
            TransferDraft()
            .amount(100)
            .recipient_id("AXYZ...")
            .sign("my passphrase")
            .get_struct()
        )
    """

    type: TransactionType

    def __init__(self, *, epoch: datetime = ARK_EPOCH, now: datetime | None = None) -> None:
        moment = now or datetime.now(UTC)
        self._timestamp = int((moment - epoch).total_seconds())
        self._fee = DEFAULT_FEES[self.type]
        self._amount = 0
        self._recipient_id: str | None = None
        self._vendor_field: str | None = None
        self._sender_public_key: bytes | None = None
        self._signature: bytes | None = None
        self._second_signature: bytes | None = None

    # -- Common fields -----------------------------------------------------

    def fee(self, fee: int) -> Self:
        self._fee = fee
        return self

    def timestamp(self, timestamp: int) -> Self:
        """Override the epoch-relative timestamp (seconds)."""
        self._timestamp = timestamp
        return self

    # -- Signing -----------------------------------------------------------

    def sign(self, passphrase: str) -> Self:
        """Sign with the key pair derived from ``passphrase``."""
        return self._sign(KeyPair.from_passphrase(passphrase))

    def sign_with_wif(self, wif: str) -> Self:
        """Sign with the private key encoded in ``wif``."""
        return self._sign(KeyPair.from_wif(wif))

    def second_sign(self, second_passphrase: str) -> Self:
        """Add the second signature over the first-signed bytes."""
        keys = KeyPair.from_passphrase(second_passphrase)
        self._second_signature = keys.sign(sha256(self.to_bytes(skip_second_signature=True)))
        return self

    def _sign(self, keys: KeyPair) -> Self:
        self._sender_public_key = keys.public_key
        self._signature = keys.sign(
            sha256(self.to_bytes(skip_signature=True, skip_second_signature=True))
        )
        return self

    # -- Serialization -----------------------------------------------------

    def asset_bytes(self) -> bytes:
        return b""

    def asset(self) -> dict[str, Any]:
        return {}

    def to_bytes(
        self,
        *,
        skip_signature: bool = False,
        skip_second_signature: bool = False,
    ) -> bytes:
        """Serialize the draft, optionally leaving out the signatures."""
        parts = [
            struct.pack("<BI", self.type, self._timestamp),
            self._sender_public_key or b"\x00" * 33,
            _recipient_bytes(self._recipient_id),
            _vendor_field_bytes(self._vendor_field),
            struct.pack("<QQ", self._amount, self._fee),
            self.asset_bytes(),
        ]
        if self._signature and not skip_signature:
            parts.append(self._signature)
        if self._second_signature and not skip_second_signature:
            parts.append(self._second_signature)
        return b"".join(parts)

    @property
    def id(self) -> str:
        return sha256(self.to_bytes()).hex()

    def get_struct(self) -> Mapping[str, Any]:
        """Finalized, read-only transaction body ready for broadcast."""
        body: dict[str, Any] = {
            "id": self.id,
            "type": int(self.type),
            "timestamp": self._timestamp,
            "amount": self._amount,
            "fee": self._fee,
            "recipientId": self._recipient_id,
            "senderPublicKey": (
                self._sender_public_key.hex() if self._sender_public_key else None
            ),
            "asset": self.asset(),
        }
        if self._vendor_field is not None:
            body["vendorField"] = self._vendor_field
        if self._signature is not None:
            body["signature"] = self._signature.hex()
        if self._second_signature is not None:
            body["signSignature"] = self._second_signature.hex()
        return MappingProxyType(body)


class TransferDraft(Draft):
    type = TransactionType.TRANSFER

    def amount(self, amount: int) -> Self:
        self._amount = int(amount)
        return self

    def recipient_id(self, recipient_id: str) -> Self:
        self._recipient_id = recipient_id
        return self

    def vendor_field(self, vendor_field: str | None) -> Self:
        self._vendor_field = vendor_field
        return self


class VoteDraft(Draft):
    type = TransactionType.VOTE

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._votes: list[str] = []

    def votes_asset(self, votes: list[str]) -> Self:
        """Votes as ``"+<publicKey>"`` (vote) or ``"-<publicKey>"`` (unvote)."""
        self._votes = list(votes)
        return self

    def asset_bytes(self) -> bytes:
        return "".join(self._votes).encode("utf-8")

    def asset(self) -> dict[str, Any]:
        return {"votes": list(self._votes)}


class DelegateRegistrationDraft(Draft):
    type = TransactionType.DELEGATE_REGISTRATION

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._username = ""

    def username_asset(self, username: str) -> Self:
        self._username = username
        return self

    def asset_bytes(self) -> bytes:
        return self._username.encode("utf-8")

    def asset(self) -> dict[str, Any]:
        return {"delegate": {"username": self._username}}


class SecondSignatureDraft(Draft):
    type = TransactionType.SECOND_SIGNATURE

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._second_public_key = b""

    def signature_asset(self, second_passphrase: str) -> Self:
        """Register the public key derived from ``second_passphrase``."""
        self._second_public_key = KeyPair.from_passphrase(second_passphrase).public_key
        return self

    def asset_bytes(self) -> bytes:
        return self._second_public_key

    def asset(self) -> dict[str, Any]:
        return {"signature": {"publicKey": self._second_public_key.hex()}}


class TransactionBuilderFactory:
    """Entry point creating one fresh draft per transaction kind."""

    def __init__(self, *, epoch: datetime = ARK_EPOCH) -> None:
        self._epoch = epoch

    def transfer(self) -> TransferDraft:
        return TransferDraft(epoch=self._epoch)

    def vote(self) -> VoteDraft:
        return VoteDraft(epoch=self._epoch)

    def delegate_registration(self) -> DelegateRegistrationDraft:
        return DelegateRegistrationDraft(epoch=self._epoch)

    def second_signature(self) -> SecondSignatureDraft:
        return SecondSignatureDraft(epoch=self._epoch)


transaction_builder = TransactionBuilderFactory()
