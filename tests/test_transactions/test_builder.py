"""Tests for the transaction builder."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from ark_wallet.crypto.keys import KeyPair
from ark_wallet.crypto.transaction import DEFAULT_FEES, TransactionType
from ark_wallet.errors import SigningError
from ark_wallet.transactions import TransactionBuilder

FIRST = "first passphrase"
SECOND = "second passphrase"


@pytest.fixture
def builder() -> TransactionBuilder:
    return TransactionBuilder()


class TestTransfer:
    def test_signed_with_passphrase(self, builder) -> None:
        tx = builder.build_transfer(amount=1000, recipient_id="R1", passphrase="secret")
        assert tx["type"] == TransactionType.TRANSFER
        assert tx["amount"] == 1000
        assert tx["recipientId"] == "R1"
        assert tx["fee"] == DEFAULT_FEES[TransactionType.TRANSFER]
        assert tx["signature"]
        assert "signSignature" not in tx

    def test_second_signed(self, builder) -> None:
        tx = builder.build_transfer(
            amount=1, recipient_id="R1", passphrase=FIRST, second_passphrase=SECOND
        )
        assert tx["signSignature"]

    def test_passphrase_wins_over_wif(self, builder) -> None:
        other_wif = KeyPair.from_passphrase("someone else").to_wif(170)
        tx = builder.build_transfer(amount=1, recipient_id="R1", passphrase=FIRST, wif=other_wif)
        assert tx["senderPublicKey"] == KeyPair.from_passphrase(FIRST).public_key_hex

    def test_wif_when_no_passphrase(self, builder) -> None:
        keys = KeyPair.from_passphrase(FIRST)
        tx = builder.build_transfer(amount=1, recipient_id="R1", wif=keys.to_wif(170))
        assert tx["senderPublicKey"] == keys.public_key_hex
        assert tx["signature"]

    def test_invalid_wif_raises(self, builder) -> None:
        with pytest.raises(SigningError):
            builder.build_transfer(amount=1, recipient_id="R1", wif="garbage")

    def test_unsigned_without_credentials(self, builder, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="ark_wallet.transactions.builder"):
            tx = builder.build_transfer(amount=1, recipient_id="R1")
        assert "signature" not in tx
        assert tx["senderPublicKey"] is None
        assert "unsigned transfer" in caplog.text

    def test_vendor_field(self, builder) -> None:
        tx = builder.build_transfer(
            amount=1, recipient_id="R1", vendor_field="thanks", passphrase=FIRST
        )
        assert tx["vendorField"] == "thanks"

    def test_epoch(self) -> None:
        epoch = datetime.now(UTC)
        tx = TransactionBuilder(epoch=epoch).build_transfer(
            amount=1, recipient_id="R1", passphrase=FIRST
        )
        assert 0 <= tx["timestamp"] < 60


class TestVote:
    def test_asset(self, builder) -> None:
        tx = builder.build_vote(votes=["+02abc"], passphrase=FIRST)
        assert tx["type"] == TransactionType.VOTE
        assert tx["asset"] == {"votes": ["+02abc"]}
        assert tx["fee"] == DEFAULT_FEES[TransactionType.VOTE]

    def test_second_signed(self, builder) -> None:
        tx = builder.build_vote(votes=["-02abc"], passphrase=FIRST, second_passphrase=SECOND)
        assert "signSignature" in tx


class TestDelegateRegistration:
    def test_asset(self, builder) -> None:
        tx = builder.build_delegate_registration(username="alice", passphrase=FIRST)
        assert tx["type"] == TransactionType.DELEGATE_REGISTRATION
        assert tx["asset"] == {"delegate": {"username": "alice"}}
        assert "signSignature" not in tx


class TestSecondSignatureRegistration:
    def test_never_second_signed(self, builder) -> None:
        tx = builder.build_second_signature_registration(
            second_passphrase=SECOND, passphrase=FIRST
        )
        assert tx["type"] == TransactionType.SECOND_SIGNATURE
        assert tx["asset"]["signature"]["publicKey"] == KeyPair.from_passphrase(SECOND).public_key_hex
        assert tx["signature"]
        assert "signSignature" not in tx
