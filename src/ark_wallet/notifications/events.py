"""Event names published on the client event channel."""

from __future__ import annotations

import enum


class EventType(enum.StrEnum):
    """Named notifications; none of them carries a payload."""

    CLIENT_CHANGED = "client:changed"
