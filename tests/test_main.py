"""Tests for the ark-wallet CLI entry point."""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ark_wallet.client.normalizer import Transaction, TransactionPage, Wallet
from ark_wallet.main import _transactions, _wallet, main


@pytest.fixture(autouse=True)
def _no_config(monkeypatch):
    monkeypatch.delenv("ARKWALLET_CONFIG_PATH", raising=False)
    with patch("ark_wallet.main.configure_logging"):
        yield


class TestDispatch:
    def test_no_args_prints_usage(self, capsys) -> None:
        with pytest.raises(SystemExit):
            main([])
        assert "ark-wallet probe" in capsys.readouterr().out

    def test_unknown_command(self, capsys) -> None:
        with pytest.raises(SystemExit):
            main(["frobnicate"])
        assert "Unknown command: frobnicate" in capsys.readouterr().out

    @pytest.mark.parametrize("command", ["probe", "wallet", "transactions"])
    def test_missing_argument(self, command, capsys) -> None:
        with pytest.raises(SystemExit):
            main([command])
        assert "Usage:" in capsys.readouterr().out

    def test_probe(self, capsys) -> None:
        fetch = AsyncMock(return_value={"nethash": "abc"})
        with patch("ark_wallet.main.NodeClient.fetch_network_config", fetch):
            main(["probe", "https://node.test", "1"])
        fetch.assert_awaited_once_with("https://node.test", 1, timeout=None)
        assert json.loads(capsys.readouterr().out) == {"nethash": "abc"}

    def test_probe_timeout_argument(self) -> None:
        fetch = AsyncMock(return_value={})
        with patch("ark_wallet.main.NodeClient.fetch_network_config", fetch):
            main(["probe", "https://node.test", "2", "7.5"])
        fetch.assert_awaited_once_with("https://node.test", 2, timeout=7.5)

    def test_probe_timeout_from_config(self, monkeypatch) -> None:
        monkeypatch.setenv("ARKWALLET_NODE__PROBE_TIMEOUT", "3")
        fetch = AsyncMock(return_value={})
        with patch("ark_wallet.main.NodeClient.fetch_network_config", fetch):
            main(["probe", "https://node.test", "1"])
        fetch.assert_awaited_once_with("https://node.test", 1, timeout=3.0)

    @pytest.mark.parametrize(
        "command",
        [["wallet", "A"], ["transactions", "A", "2"], ["delegates"], ["peers", "devnet"]],
    )
    def test_client_commands_run(self, command) -> None:
        with patch("ark_wallet.main._run") as run:
            main(command)
        run.assert_called_once()


class TestActions:
    async def test_wallet_includes_vote(self) -> None:
        client = MagicMock()
        client.fetch_wallet = AsyncMock(return_value=Wallet(address="A", balance=5))
        client.fetch_wallet_vote = AsyncMock(return_value="02abc")
        payload = await _wallet(client, "A")
        assert payload["balance"] == 5
        assert payload["vote"] == "02abc"

    async def test_unknown_wallet(self) -> None:
        client = MagicMock()
        client.fetch_wallet = AsyncMock(return_value=None)
        assert await _wallet(client, "A") is None

    async def test_transactions(self) -> None:
        tx = Transaction(
            id="t",
            type=0,
            sender="A",
            recipient="B",
            amount=1,
            fee=1,
            timestamp=datetime(2018, 1, 1, tzinfo=UTC),
        )
        client = MagicMock()
        client.fetch_transactions = AsyncMock(return_value=TransactionPage([tx], 1))
        payload = await _transactions(client, "A", 2, 10)
        client.fetch_transactions.assert_awaited_once_with("A", page=2, limit=10)
        assert payload["totalCount"] == 1
        assert payload["transactions"][0]["id"] == "t"

    def test_transactions_command_passes_page_and_limit(self) -> None:
        client = MagicMock()
        client.fetch_transactions = AsyncMock(return_value=TransactionPage([], 0))

        def run(config, action) -> None:
            asyncio.run(action(client))

        with patch("ark_wallet.main._run", side_effect=run):
            main(["transactions", "A", "3", "20"])
        client.fetch_transactions.assert_awaited_once_with("A", page=3, limit=20)
