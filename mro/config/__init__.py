"""Configuration module."""

from mro.config.logging import (
    bind_tenant_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from mro.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "bind_tenant_context",
    "clear_request_context",
]
