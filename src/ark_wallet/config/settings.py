"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``ARKWALLET_``, nested via ``__``)
2. YAML config file (``--config path`` or ``ARKWALLET_CONFIG_PATH`` env var)
3. Defaults defined here
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Genesis time of the public ARK networks; v1 timestamps are seconds after it.
ARK_EPOCH = datetime(2017, 3, 21, 13, 0, 0, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class ApiVersion(enum.IntEnum):
    """Node API major version."""

    V1 = 1
    V2 = 2

    @classmethod
    def from_peer_version(cls, version: str | None) -> ApiVersion:
        """Derive the API version from a peer's software version string.

        ``"2.x.y"`` speaks v2, anything else (including ``None``) v1.
        """
        if version and version.startswith("2."):
            return cls.V2
        return cls.V1


class LogLevel(enum.StrEnum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class NodeConfig(BaseSettings):
    """Default connection target and transport settings."""

    model_config = SettingsConfigDict(
        env_prefix="ARKWALLET_NODE__",
        case_sensitive=False,
    )

    host: str = Field(
        default="http://",
        description="Placeholder host used until a profile or peer is bound",
    )
    api_version: ApiVersion = ApiVersion.V2
    timeout: float = 30.0
    probe_timeout: float | None = None


class DiscoveryConfig(BaseSettings):
    """Seed-based peer discovery settings."""

    model_config = SettingsConfigDict(
        env_prefix="ARKWALLET_DISCOVERY__",
        case_sensitive=False,
    )

    seeds_url: str = "https://raw.githubusercontent.com/ArkEcosystem/peers/master/{network}.json"
    timeout: float = 5.0
    max_peers: int = 50


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(
        env_prefix="ARKWALLET_LOGGING__",
        case_sensitive=False,
    )

    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class NetworkConfig(BaseModel):
    """A network the wallet can bind profiles to."""

    id: str
    name: str = ""
    server: str
    api_version: ApiVersion = ApiVersion.V2
    epoch: datetime = ARK_EPOCH
    wif: int = 170
    seeds: list[str] = Field(default_factory=list)


def _default_networks() -> list[NetworkConfig]:
    return [
        NetworkConfig(
            id="mainnet",
            name="Ark Mainnet",
            server="https://wallets.ark.io",
            api_version=ApiVersion.V2,
            wif=170,
        ),
        NetworkConfig(
            id="devnet",
            name="Ark Devnet",
            server="https://dexplorer.ark.io",
            api_version=ApiVersion.V1,
            wif=170,
        ),
    ]


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``ARKWALLET_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARKWALLET_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    config_path: str = ""

    node: NodeConfig = Field(default_factory=NodeConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    networks: list[NetworkConfig] = Field(default_factory=_default_networks)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

    def network(self, network_id: str) -> NetworkConfig:
        """Look up a configured network by id.

        Raises:
            KeyError: If no network with that id is configured.
        """
        for network in self.networks:
            if network.id == network_id:
                return network
        raise KeyError(network_id)
