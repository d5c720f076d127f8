"""Core application functionality."""

from dsiot_gateway.core.cache import StatusCache
from dsiot_gateway.core.config import Settings, setup_logging

__all__ = [
    "StatusCache",
    "Settings",
    "setup_logging",
]
