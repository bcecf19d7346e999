"""Notifications — the client event channel.

Provides:
- ``EventType`` — named events (``client:changed``)
- ``EventBus`` — synchronous fan-out to subscribers
- ``default_bus`` — the process-wide channel
"""

from __future__ import annotations

from ark_wallet.notifications.bus import EventBus, default_bus
from ark_wallet.notifications.events import EventType

__all__ = ["EventBus", "EventType", "default_bus"]
