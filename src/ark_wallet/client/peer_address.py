"""Parse a connection URL into scheme, ip and port."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ark_wallet.errors import PeerAddressError

_HOST_PATTERN = re.compile(r"(https?://)([a-zA-Z0-9._-]+)(?::([0-9]+))?")

_DEFAULT_PORTS = {"https://": 443, "http://": 80}


@dataclass(frozen=True)
class PeerAddress:
    """Endpoint of a peer, as found in a host URL."""

    scheme: str
    ip: str
    port: int

    @property
    def url(self) -> str:
        return f"{self.scheme}{self.ip}:{self.port}"

    def to_peer(self) -> dict[str, str | int]:
        """Peer-list entry understood by the discovery routine."""
        return {"ip": self.ip, "port": self.port}


def parse_peer_address(url: str) -> PeerAddress:
    """Extract scheme, ip and port from ``url``.

    A missing port falls back to 443 for https and 80 for http.

    Raises:
        PeerAddressError: If ``url`` does not start with an http(s) host.
    """
    matches = _HOST_PATTERN.match(url or "")
    if matches is None:
        msg = f"Cannot parse peer address from {url!r}"
        raise PeerAddressError(msg)
    scheme, ip, port = matches.groups()
    return PeerAddress(
        scheme=scheme,
        ip=ip,
        port=int(port) if port else _DEFAULT_PORTS[scheme],
    )
