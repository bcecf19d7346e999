"""Configuration models."""

from ark_wallet.config.settings import ApiVersion, AppConfig, NetworkConfig

__all__ = ["ApiVersion", "AppConfig", "NetworkConfig"]
