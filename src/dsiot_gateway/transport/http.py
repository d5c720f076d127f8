"""HTTP transport for the DSIOT multireq endpoint."""

import logging
from typing import Any

import httpx

from dsiot_gateway.protocol.constants import MULTIREQ_PATH

logger = logging.getLogger(__name__)


class HttpTransport:
    """Posts JSON envelopes to a device and returns the decoded reply.

    Errors (connection failures, timeouts, non-2xx replies, invalid JSON)
    are raised to the caller unchanged; no retries are attempted.
    """

    def __init__(
        self,
        host: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the transport.

        Args:
            host: Device IP address or hostname
            timeout: Request timeout in seconds
            client: Optional pre-built client (used by tests)
        """
        self.host = host
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @property
    def base_url(self) -> str:
        return f"http://{self.host}"

    async def send(self, payload: dict[str, Any], path: str = MULTIREQ_PATH) -> dict[str, Any]:
        """
        POST ``payload`` to ``path`` on the device.

        Returns:
            Decoded JSON body

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
            ValueError: If the body is not JSON
        """
        url = f"{self.base_url}{path}"
        logger.debug("POST %s %s", url, payload)
        response = await self._client.post(url, json=payload)
        response.raise_for_status()
        body = response.json()
        logger.debug("Reply from %s: %s", url, body)
        return body

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
