"""Tests for the event channel."""

from __future__ import annotations

from ark_wallet.notifications import EventBus, EventType


class TestEventBus:
    def test_delivery_in_order(self) -> None:
        bus = EventBus()
        seen: list[int] = []
        bus.subscribe(EventType.CLIENT_CHANGED, lambda: seen.append(1))
        bus.subscribe(EventType.CLIENT_CHANGED, lambda: seen.append(2))
        bus.emit(EventType.CLIENT_CHANGED)
        assert seen == [1, 2]

    def test_event_name(self) -> None:
        assert EventType.CLIENT_CHANGED == "client:changed"

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        seen: list[int] = []

        def callback() -> None:
            seen.append(1)

        bus.subscribe("client:changed", callback)
        bus.unsubscribe("client:changed", callback)
        bus.unsubscribe("client:changed", callback)
        bus.emit(EventType.CLIENT_CHANGED)
        assert seen == []

    def test_failing_subscriber_does_not_stop_others(self, caplog) -> None:
        bus = EventBus()
        seen: list[int] = []

        def broken() -> None:
            raise RuntimeError("boom")

        bus.subscribe(EventType.CLIENT_CHANGED, broken)
        bus.subscribe(EventType.CLIENT_CHANGED, lambda: seen.append(1))
        bus.emit(EventType.CLIENT_CHANGED)
        assert seen == [1]
        assert "Event subscriber failed" in caplog.text

    def test_emit_without_subscribers(self) -> None:
        EventBus().emit("nothing")
