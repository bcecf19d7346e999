"""Connection binding — the single source of truth for host and API version.

The bound ``ConnectionTarget`` is an immutable value replaced in one swap, so
a reader never observes a new host paired with the old version. Operations
take a snapshot of the target when they are issued and use it for every
request they make, so a rebind never retargets a call already in flight.

Concurrent rebinds are last-write-wins: whichever ``rebind`` runs last
decides the target, with no queueing.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from ark_wallet.config.settings import ApiVersion

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

PLACEHOLDER_HOST = "http://"


@dataclass(frozen=True)
class ConnectionTarget:
    """Where to talk and in which dialect."""

    host: str
    api_version: ApiVersion


class ConnectionBinding:
    """Holds the current ``ConnectionTarget`` and swaps it atomically.

    No URL validation happens here: a malformed host surfaces as a transport
    failure on the next call.

    Usage::

        binding = ConnectionBinding()
        binding.rebind("http://1.2.3.4:4003", ApiVersion.V2)
        target = binding.target  # snapshot for one operation
    """

    def __init__(
        self,
        host: str = PLACEHOLDER_HOST,
        api_version: ApiVersion | int = ApiVersion.V2,
    ) -> None:
        self._lock = threading.Lock()
        self._target = ConnectionTarget(host=host, api_version=ApiVersion(api_version))
        self._listeners: list[Callable[[ConnectionTarget, ConnectionTarget], None]] = []

    @property
    def target(self) -> ConnectionTarget:
        """Snapshot of the bound target."""
        return self._target

    @property
    def host(self) -> str:
        return self._target.host

    @property
    def version(self) -> ApiVersion:
        return self._target.api_version

    def set_host(self, host: str) -> ConnectionTarget:
        """Bind a new host, keeping the API version."""
        with self._lock:
            old, new = self._swap(replace(self._target, host=host))
        return self._notify(old, new)

    def set_version(self, api_version: ApiVersion | int) -> ConnectionTarget:
        """Bind a new API version, keeping the host.

        Raises:
            ValueError: If ``api_version`` is neither 1 nor 2.
        """
        version = ApiVersion(api_version)
        with self._lock:
            old, new = self._swap(replace(self._target, api_version=version))
        return self._notify(old, new)

    def rebind(self, host: str, api_version: ApiVersion | int) -> ConnectionTarget:
        """Replace host and API version together."""
        target = ConnectionTarget(host=host, api_version=ApiVersion(api_version))
        with self._lock:
            old, new = self._swap(target)
        return self._notify(old, new)

    def add_listener(self, callback: Callable[[ConnectionTarget, ConnectionTarget], None]) -> None:
        """Call ``callback(old, new)`` after every swap."""
        self._listeners.append(callback)

    def _swap(self, target: ConnectionTarget) -> tuple[ConnectionTarget, ConnectionTarget]:
        old, self._target = self._target, target
        return old, target

    def _notify(self, old: ConnectionTarget, target: ConnectionTarget) -> ConnectionTarget:
        if old != target:
            logger.info(
                "Connection rebound: %s (v%d) -> %s (v%d)",
                old.host,
                old.api_version,
                target.host,
                target.api_version,
            )
        for callback in self._listeners:
            callback(old, target)
        return target
