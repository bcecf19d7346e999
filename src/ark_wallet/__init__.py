"""Version-aware ARK node client for wallet applications."""

__version__ = "0.1.0"
