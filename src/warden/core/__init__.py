"""Core Warden utilities.

This module exports configuration and logging helpers used throughout the
application.
"""

from warden.core.config import Settings, get_settings
from warden.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "bind_correlation_id",
    "clear_context",
    "new_correlation_id",
]
