"""Tests for response normalization — pure v1/v2 payload mapping."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from ark_wallet.client.normalizer import (
    DelegateBlocks,
    DelegateForged,
    Peer,
    SoftResult,
    Transaction,
    enrich_transaction,
    soft_result,
    transaction_from_v1,
    transaction_from_v2,
    vote_from_v2,
    wallet_from_v1,
    wallet_from_v2,
    delegate_from_v1,
    delegate_from_v2,
)

EPOCH = datetime(2017, 3, 21, 13, 0, 0, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Wallet
# ---------------------------------------------------------------------------

_V1_ACCOUNT = {
    "address": "ADDR1",
    "unconfirmedBalance": "5",
    "balance": "100",
    "publicKey": None,
    "unconfirmedSignature": 0,
    "secondSignature": 0,
    "secondPublicKey": None,
    "multisignatures": [],
    "u_multisignatures": [],
    "username": "bob",
}


class TestWallet:
    def test_v1_strips_legacy_fields(self) -> None:
        payload = wallet_from_v1(_V1_ACCOUNT).to_dict()
        for key in (
            "unconfirmedBalance",
            "unconfirmedSignature",
            "secondSignature",
            "multisignatures",
            "u_multisignatures",
        ):
            assert key not in payload
        assert payload["address"] == "ADDR1"
        assert payload["balance"] == 100
        assert payload["isDelegate"] is True

    def test_v1_without_username_is_not_delegate(self) -> None:
        account = {**_V1_ACCOUNT, "username": None}
        assert wallet_from_v1(account).is_delegate is False

    def test_v1_missing_username_is_not_delegate(self) -> None:
        account = {k: v for k, v in _V1_ACCOUNT.items() if k != "username"}
        assert wallet_from_v1(account).is_delegate is False

    @pytest.mark.parametrize("balance", ["243884095406", 243884095406])
    def test_balance_always_int(self, balance) -> None:
        v1 = wallet_from_v1({**_V1_ACCOUNT, "balance": balance})
        v2 = wallet_from_v2({"address": "A", "balance": balance, "isDelegate": False})
        assert v1.balance == v2.balance == 243884095406
        assert isinstance(v1.balance, int)
        assert isinstance(v2.balance, int)

    def test_v2(self) -> None:
        wallet = wallet_from_v2(
            {
                "address": "DPFPtDfexMrSiZEB1o3TiJTUYBnnHrzFrD",
                "publicKey": None,
                "secondPublicKey": None,
                "balance": 1,
                "isDelegate": False,
            }
        )
        assert wallet.address == "DPFPtDfexMrSiZEB1o3TiJTUYBnnHrzFrD"
        assert wallet.balance == 1
        assert wallet.is_delegate is False

    def test_same_keys_for_both_versions(self) -> None:
        v1 = wallet_from_v1(_V1_ACCOUNT).to_dict()
        v2 = wallet_from_v2({"address": "A", "balance": 1, "isDelegate": True}).to_dict()
        assert v1.keys() == v2.keys()


# ---------------------------------------------------------------------------
# Delegate
# ---------------------------------------------------------------------------


class TestDelegate:
    def test_v1_remapped_into_nested_shape(self) -> None:
        delegate = delegate_from_v1(
            {
                "username": "genesis_1",
                "address": "AAA",
                "publicKey": "03abc",
                "vote": "9000",
                "producedblocks": 120,
                "missedblocks": 3,
                "rate": 7,
                "approval": 1.2,
                "productivity": 97.5,
            }
        )
        assert delegate.rank == 7
        assert delegate.votes == 9000
        assert delegate.blocks == DelegateBlocks(produced=120, missed=3)
        assert delegate.production.approval == 1.2
        assert delegate.production.productivity == 97.5
        assert delegate.forged is None

    def test_v2(self) -> None:
        delegate = delegate_from_v2(
            {
                "username": "genesis_2",
                "address": "BBB",
                "publicKey": "02def",
                "votes": 10,
                "rank": 2,
                "blocks": {"produced": 5, "missed": 1, "last": {}},
                "production": {"approval": 0.5, "productivity": 90},
                "forged": {"fees": 1, "rewards": 2, "total": 3},
            }
        )
        assert delegate.rank == 2
        assert delegate.forged == DelegateForged(fees=1, rewards=2, total=3)

    def test_both_versions_share_shape(self) -> None:
        v1 = delegate_from_v1({"username": "a", "rate": 1}).to_dict()
        v2 = delegate_from_v2({"username": "a", "rank": 1}).to_dict()
        assert v1 == v2


# ---------------------------------------------------------------------------
# Transaction
# ---------------------------------------------------------------------------


class TestTransaction:
    def test_v1_timestamp_relative_to_epoch(self) -> None:
        tx = transaction_from_v1(
            {
                "id": "t1",
                "type": 0,
                "amount": 100,
                "fee": 10,
                "senderId": "S",
                "recipientId": "R",
                "timestamp": 3600,
            },
            EPOCH,
        )
        assert tx.timestamp == EPOCH + timedelta(milliseconds=3600 * 1000)
        assert tx.sender == "S"
        assert tx.recipient == "R"

    def test_v2_parses_human_timestamp(self) -> None:
        tx = transaction_from_v2(
            {
                "id": "t2",
                "type": 0,
                "amount": 1,
                "fee": 2,
                "sender": "S",
                "recipient": "R",
                "timestamp": {"epoch": 1, "unix": 1490101201, "human": "2018-05-23T10:36:00.000Z"},
            }
        )
        assert tx.timestamp == datetime(2018, 5, 23, 10, 36, tzinfo=UTC)

    @pytest.mark.parametrize(
        ("sender", "recipient", "is_sender", "is_receiver"),
        [
            ("ME", "OTHER", True, False),
            ("OTHER", "ME", False, True),
            ("ME", "ME", True, True),
            ("X", "Y", False, False),
        ],
    )
    def test_enrich(self, sender, recipient, is_sender, is_receiver) -> None:
        base = Transaction(
            id="t",
            type=0,
            sender=sender,
            recipient=recipient,
            amount=100,
            fee=7,
            timestamp=EPOCH,
        )
        tx = enrich_transaction(base, "ME")
        assert tx.is_sender is is_sender
        assert tx.is_receiver is is_receiver
        assert tx.total_amount == 107

    def test_to_dict(self) -> None:
        tx = Transaction(id="t", type=0, sender="S", recipient=None, amount=1, fee=1, timestamp=EPOCH)
        payload = tx.to_dict()
        assert payload["timestamp"] == EPOCH.isoformat()
        assert payload["recipient"] is None


# ---------------------------------------------------------------------------
# Vote, peer, soft results
# ---------------------------------------------------------------------------


class TestVote:
    def test_strips_direction_prefix(self) -> None:
        assert vote_from_v2({"asset": {"votes": ["+02abcdef"]}}) == "02abcdef"


class TestPeer:
    def test_v1_delay(self) -> None:
        peer = Peer.from_dict(
            {"ip": "1.1.1.1", "port": "4001", "version": "1.0.0", "height": 10, "status": "OK", "delay": 12}
        )
        assert peer.port == 4001
        assert peer.latency == 12
        assert peer.url == "http://1.1.1.1:4001"

    def test_v2_latency(self) -> None:
        peer = Peer.from_dict(
            {"ip": "2.2.2.2", "port": 4003, "version": "2.0.0", "height": 5, "status": 200, "latency": 4}
        )
        assert peer.status == "200"
        assert peer.latency == 4

    def test_missing_optional_fields(self) -> None:
        peer = Peer.from_dict({"ip": "3.3.3.3", "port": 1})
        assert peer.version == ""
        assert peer.latency is None


class TestSoftResult:
    def test_ok(self) -> None:
        result = SoftResult.ok([1])
        assert not result.is_failed
        assert result.unwrap_or([]) == [1]

    def test_failed(self) -> None:
        result = SoftResult.failed("Account not found")
        assert result.is_failed
        assert result.failure == "Account not found"
        assert result.unwrap_or(0) == 0

    def test_failed_without_reason(self) -> None:
        assert SoftResult.failed().failure

    def test_from_v1_payload(self) -> None:
        assert soft_result({"success": True}, 5).unwrap_or(0) == 5
        failed = soft_result({"success": False, "error": "nope"}, 5)
        assert failed.is_failed
        assert failed.failure == "nope"
