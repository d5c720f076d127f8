"""Application configuration using pydantic-settings."""

import logging
import sys

from pydantic_settings import BaseSettings, SettingsConfigDict

from dsiot_gateway.protocol.constants import DISCOVERY_DEVICE_PORT, DISCOVERY_LISTEN_PORT


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    prefixed with DSIOT_ (e.g., DSIOT_DEVICE_HOST).
    """

    device_host: str = "192.168.1.10"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    request_timeout: float = 5.0
    cache_ttl: float = 5.0
    discovery_timeout: float = 3.0
    discovery_broadcast: str = "255.255.255.255"
    discovery_port: int = DISCOVERY_DEVICE_PORT
    discovery_listen_port: int = DISCOVERY_LISTEN_PORT

    model_config = SettingsConfigDict(env_prefix="DSIOT_")


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
