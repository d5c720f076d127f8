"""UDP broadcast discovery of devices on the local network."""

import asyncio
import logging
from dataclasses import dataclass

from dsiot_gateway.protocol.constants import (
    DISCOVERY_BUFFER_SIZE,
    DISCOVERY_DEVICE_PORT,
    DISCOVERY_LISTEN_PORT,
    DISCOVERY_PAYLOAD,
)
from dsiot_gateway.protocol.info import DeviceInfo

logger = logging.getLogger(__name__)

_QUEUE_MAXSIZE = 64


@dataclass
class DiscoveredDevice:
    """A device that answered the discovery broadcast."""

    host: str
    info: DeviceInfo


class DiscoveryProtocol(asyncio.DatagramProtocol):
    """Collects parsed discovery replies on an asyncio.Queue."""

    def __init__(self) -> None:
        self._transport: asyncio.DatagramTransport | None = None
        self._queue: asyncio.Queue[DiscoveredDevice] = asyncio.Queue(maxsize=_QUEUE_MAXSIZE)

    def connection_made(self, transport: asyncio.DatagramTransport) -> None:  # type: ignore[override]
        self._transport = transport

    def connection_lost(self, exc: Exception | None) -> None:
        self._transport = None

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        host = addr[0]
        if len(data) >= DISCOVERY_BUFFER_SIZE:
            logger.warning("Discovery reply from %s too large (%d bytes), ignoring", host, len(data))
            return

        try:
            info = DeviceInfo.from_basic_info(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            logger.warning("Failed to parse device info from %s: %s", host, e)
            return

        logger.info("Found device at %s: %s", host, info.name)
        try:
            self._queue.put_nowait(DiscoveredDevice(host=host, info=info))
        except asyncio.QueueFull:
            logger.warning("Discovery queue full, dropping reply from %s", host)

    def error_received(self, exc: Exception) -> None:
        logger.debug("Discovery socket error: %s", exc)

    async def next_device(self, timeout: float) -> DiscoveredDevice | None:
        """Wait for the next reply; None when nothing arrives in time."""
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except TimeoutError:
            return None


async def discover(
    timeout: float = 3.0,
    broadcast_address: str = "255.255.255.255",
    port: int = DISCOVERY_DEVICE_PORT,
    listen_port: int = DISCOVERY_LISTEN_PORT,
) -> list[DiscoveredDevice]:
    """
    Broadcast a discovery request and collect replies.

    Replies are collected until none arrives within ``timeout`` seconds.
    Unparsable replies are logged and skipped.

    Args:
        timeout: Seconds to wait for each further reply
        broadcast_address: Destination of the broadcast
        port: Device discovery port
        listen_port: Local port replies are sent back to

    Returns:
        Discovered devices in arrival order (one entry per host)
    """
    loop = asyncio.get_running_loop()
    transport, protocol = await loop.create_datagram_endpoint(
        DiscoveryProtocol,
        local_addr=("0.0.0.0", listen_port),
        allow_broadcast=True,
    )

    devices: dict[str, DiscoveredDevice] = {}
    try:
        logger.debug("Discovering devices from :%d to %s:%d", listen_port, broadcast_address, port)
        transport.sendto(DISCOVERY_PAYLOAD, (broadcast_address, port))

        while True:
            device = await protocol.next_device(timeout)
            if device is None:
                logger.debug("Discovery finished after %.1fs without replies", timeout)
                break
            devices.setdefault(device.host, device)
    finally:
        transport.close()

    return list(devices.values())
