"""Core MBC CMS utilities.

This module exports core utilities for use throughout the application.
"""

from mbc_cms.core.config import Settings, get_settings
from mbc_cms.core.exceptions import (
    AuthorizationError,
    BootstrapError,
    MbcError,
    StoreError,
)
from mbc_cms.core.logging import (
    LoggingContext,
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "AuthorizationError",
    "BootstrapError",
    "LoggingContext",
    "MbcError",
    "Settings",
    "StoreError",
    "bind_correlation_id",
    "clear_context",
    "configure_logging",
    "get_logger",
    "get_settings",
]
