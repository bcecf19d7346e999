"""Logging configuration for command-line use."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ark_wallet.config.settings import LoggingConfig


def configure_logging(config: LoggingConfig) -> None:
    """Apply the configured level and format to the root logger."""
    logging.basicConfig(level=config.level.value, format=config.format, force=True)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))
