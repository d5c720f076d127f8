"""Network transports (HTTP requests and UDP discovery)."""

from dsiot_gateway.transport.discovery import DiscoveredDevice, discover
from dsiot_gateway.transport.http import HttpTransport

__all__ = ["HttpTransport", "DiscoveredDevice", "discover"]
