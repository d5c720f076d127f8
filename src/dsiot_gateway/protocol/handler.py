"""Protocol handler for a single DSIOT device.

Orchestrates the HTTP transport and the status cache: reading status and
device info, and writing changed status fields back.
"""

import logging

from dsiot_gateway.core.cache import StatusCache
from dsiot_gateway.protocol.envelope import ResponseEnvelope
from dsiot_gateway.protocol.info import READ_INFO_REQUEST, DeviceInfo
from dsiot_gateway.protocol.status import READ_STATUS_REQUEST, DeviceStatus
from dsiot_gateway.transport.http import HttpTransport

logger = logging.getLogger(__name__)


class ProtocolHandler:
    """High-level read/write operations against one device."""

    def __init__(self, transport: HttpTransport, cache: StatusCache | None = None):
        """
        Initialize the handler.

        Args:
            transport: Transport bound to the device
            cache: Status cache (a 5 second cache is created if omitted)
        """
        self.transport = transport
        self.cache = cache if cache is not None else StatusCache()
        self._reachable = False

    @property
    def reachable(self) -> bool:
        """Whether the last exchange with the device succeeded."""
        return self._reachable

    async def _exchange(self, payload: dict) -> ResponseEnvelope:
        try:
            body = await self.transport.send(payload)
        except Exception:
            self._reachable = False
            raise
        self._reachable = True
        return ResponseEnvelope.from_dict(body)

    async def fetch_status(self) -> DeviceStatus:
        """Read the status from the device, bypassing the cache."""
        response = await self._exchange(READ_STATUS_REQUEST.to_dict())
        status = DeviceStatus.from_response(response)
        logger.debug("Fetched status: %r", status)
        return status

    async def get_status(self) -> DeviceStatus:
        """Get the current status (cached for the cache's freshness window)."""
        return await self.cache.get_or_fetch(self.fetch_status)

    async def get_info(self) -> DeviceInfo:
        """Read device identity (never cached)."""
        response = await self._exchange(READ_INFO_REQUEST.to_dict())
        return DeviceInfo.from_response(response)

    async def update(self, status: DeviceStatus) -> bool:
        """
        Write the fields changed on ``status`` to the device.

        On success the written status becomes the cached status.

        Returns:
            True if a request was sent, False if nothing had changed

        Raises:
            EnvelopeRejectedError: If the device rejected the write
            httpx.HTTPError: On transport failure
        """
        request = status.to_request()
        if len(request) == 0:
            logger.debug("No status fields changed, skipping write")
            return False

        fields = status.pending_fields()
        await self._exchange(request.to_dict())
        logger.info("Updated status fields: %s", ", ".join(fields))

        self.cache.put(status)
        status.mark_clean()
        return True
