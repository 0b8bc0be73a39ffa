from __future__ import annotations

from .config import LoggingConfig
from .core import (
    ROOT_LOGGER_NAME,
    configure_logging,
    get_logger,
    shutdown_logging,
)

__all__ = [
    "LoggingConfig",
    "ROOT_LOGGER_NAME",
    "configure_logging",
    "get_logger",
    "shutdown_logging",
]
