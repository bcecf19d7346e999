"""Tests for the profile watcher."""

from __future__ import annotations

import pytest

from ark_wallet.client.connection import ConnectionBinding, ConnectionTarget
from ark_wallet.client.normalizer import Peer
from ark_wallet.client.watcher import ProfileWatcher
from ark_wallet.config.settings import ApiVersion
from ark_wallet.notifications import EventBus, EventType


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def events(bus) -> list[str]:
    seen: list[str] = []
    bus.subscribe(EventType.CLIENT_CHANGED, lambda: seen.append(EventType.CLIENT_CHANGED))
    return seen


@pytest.fixture
def binding() -> ConnectionBinding:
    return ConnectionBinding()


class TestProfileWatcher:
    def test_no_profile_does_nothing(self, state, binding, bus, events) -> None:
        watcher = ProfileWatcher(state, binding, bus)
        watcher.start()
        assert binding.host == "http://"
        assert events == []

    def test_binds_network_server_without_peer(self, state, binding, bus, events) -> None:
        state.set_active_profile("p-dev")
        watcher = ProfileWatcher(state, binding, bus)
        watcher.start()
        assert binding.target == ConnectionTarget("http://dev.example.com:4002", ApiVersion.V1)
        assert events == [EventType.CLIENT_CHANGED]

    def test_follows_profile_switch(self, state, binding, bus, events) -> None:
        watcher = ProfileWatcher(state, binding, bus)
        watcher.start()
        state.set_active_profile("p-main")
        assert binding.target == ConnectionTarget("https://main.example.com", ApiVersion.V2)
        state.set_active_profile("p-dev")
        assert binding.version == ApiVersion.V1
        assert len(events) == 2

    @pytest.mark.parametrize(
        ("peer_version", "expected"),
        [("2.1.0", ApiVersion.V2), ("1.0.0", ApiVersion.V1)],
    )
    async def test_peer_selected(self, state, binding, bus, events, peer_version, expected) -> None:
        state.set_active_profile("p-main")
        await state.set_current_peer(Peer(ip="1.2.3.4", port=4003, version=peer_version))
        watcher = ProfileWatcher(state, binding, bus)
        watcher.start()
        assert binding.target == ConnectionTarget("http://1.2.3.4:4003", expected)
        assert events == [EventType.CLIENT_CHANGED]

    async def test_peer_change_rebinds(self, state, binding, bus, events) -> None:
        state.set_active_profile("p-main")
        watcher = ProfileWatcher(state, binding, bus)
        watcher.start()
        await state.set_current_peer(Peer(ip="5.6.7.8", port=4001, version="1.2.0"))
        assert binding.target == ConnectionTarget("http://5.6.7.8:4001", ApiVersion.V1)
        await state.clear_current_peer()
        assert binding.target == ConnectionTarget("https://main.example.com", ApiVersion.V2)
        assert len(events) == 3

    def test_start_is_idempotent(self, state, binding, bus, events) -> None:
        state.set_active_profile("p-main")
        watcher = ProfileWatcher(state, binding, bus)
        watcher.start()
        watcher.start()
        assert events == [EventType.CLIENT_CHANGED]
        assert watcher.is_watching

    def test_stop(self, state, binding, bus, events) -> None:
        watcher = ProfileWatcher(state, binding, bus)
        watcher.start()
        watcher.stop()
        assert not watcher.is_watching
        state.set_active_profile("p-main")
        assert binding.host == "http://"
        assert events == []

    def test_sync_returns_target(self, state, binding, bus) -> None:
        state.set_active_profile("p-main")
        watcher = ProfileWatcher(state, binding, bus)
        target = watcher.sync(state.active_profile())
        assert target == binding.target
        assert watcher.sync(None) is None
