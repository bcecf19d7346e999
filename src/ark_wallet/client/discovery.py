"""Peer discovery — find responsive peers through seeds or known peers.

Seeds are tried in random order; the first one answering its ``peers``
resource provides the candidate list. Candidates are kept when they report a
healthy status and speak the requested API version, fastest first.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from ark_wallet.client.connection import ConnectionTarget
from ark_wallet.client.dialects import dialect_for
from ark_wallet.client.normalizer import Peer
from ark_wallet.config.settings import ApiVersion, DiscoveryConfig
from ark_wallet.errors import NodeAPIError, PeerDiscoveryError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ark_wallet.client.transport import NodeTransport

logger = logging.getLogger(__name__)

_HEALTHY_STATUSES = frozenset({"OK", "200"})


def _seed_entry(seed: str | dict[str, Any]) -> dict[str, Any]:
    """Accept ``"ip:port"`` strings as well as ``{"ip", "port"}`` mappings."""
    if isinstance(seed, dict):
        return seed
    ip, _, port = seed.rpartition(":")
    return {"ip": ip, "port": int(port)}


async def load_seeds(
    transport: NodeTransport,
    network: str,
    config: DiscoveryConfig,
) -> list[dict[str, Any]]:
    """Download the published seed list of ``network``."""
    body = await transport.fetch_json(config.seeds_url.format(network=network))
    if not isinstance(body, list):
        msg = f"Seed list for {network} is not a list"
        raise PeerDiscoveryError(msg)
    return [_seed_entry(seed) for seed in body]


def _usable(peer: Peer, api_version: ApiVersion) -> bool:
    return (
        peer.status in _HEALTHY_STATUSES
        and ApiVersion.from_peer_version(peer.version) == api_version
    )


async def find_peers(
    transport: NodeTransport,
    network: str | None,
    api_version: ApiVersion | int,
    peers: Sequence[str | dict[str, Any]] | None,
    *,
    config: DiscoveryConfig | None = None,
) -> list[Peer]:
    """Discover peers speaking ``api_version``.

    Args:
        transport: Connected node transport.
        network: Network id whose published seeds are used when ``peers`` is None.
        api_version: API version the returned peers must speak.
        peers: Known peers to ask; ``None`` forces seed-based discovery.
        config: Discovery settings (seed URL, limits).

    Raises:
        PeerDiscoveryError: When no network and no peers are given, or when
            none of the candidates answers.
    """
    config = config or DiscoveryConfig()
    version = ApiVersion(api_version)
    dialect = dialect_for(version)

    if peers is None:
        if not network:
            msg = "Peer discovery needs a network or a list of peers"
            raise PeerDiscoveryError(msg)
        candidates = await load_seeds(transport, network, config)
    else:
        candidates = [_seed_entry(peer) for peer in peers]

    candidates = list(candidates)
    random.shuffle(candidates)

    for candidate in candidates:
        target = ConnectionTarget(
            host=f"http://{candidate['ip']}:{candidate['port']}",
            api_version=version,
        )
        try:
            body = await transport.get(target, dialect.peers_path, timeout=config.timeout)
        except NodeAPIError as exc:
            logger.warning("Peer %s did not answer discovery: %s", target.host, exc)
            continue

        found = [Peer.from_dict(entry) for entry in dialect.extract_peers(body)]
        usable = sorted(
            (peer for peer in found if _usable(peer, version)),
            key=lambda p: p.latency if p.latency is not None else float("inf"),
        )
        logger.info("Discovered %d usable peers via %s", len(usable), target.host)
        return usable[: config.max_peers]

    msg = f"No peer answered discovery ({len(candidates)} tried)"
    raise PeerDiscoveryError(msg)
