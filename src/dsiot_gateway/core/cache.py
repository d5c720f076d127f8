"""Time-windowed status cache for a single device."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime

from dsiot_gateway.protocol.status import DeviceStatus

logger = logging.getLogger(__name__)


class StatusCache:
    """Holds the most recent device status for a fixed freshness window.

    Reads return a copy so callers can mutate their status freely.
    Concurrent misses through ``get_or_fetch()`` are coalesced: the first
    caller fetches while the others wait on the lock and then reuse its
    result.
    """

    def __init__(self, ttl: float = 5.0) -> None:
        """Initialize empty cache.

        Args:
            ttl: Freshness window in seconds
        """
        self.ttl = ttl
        self._lock = asyncio.Lock()
        self._status: DeviceStatus | None = None
        self._stored_at: float | None = None
        self._last_update: datetime | None = None

    def _fresh(self) -> DeviceStatus | None:
        if self._status is None or self._stored_at is None:
            return None
        if time.monotonic() - self._stored_at >= self.ttl:
            return None
        return self._status.copy()

    def get(self) -> DeviceStatus | None:
        """Return the cached status if it is still fresh, else None."""
        return self._fresh()

    def put(self, status: DeviceStatus) -> None:
        """Store a status snapshot and restart the freshness window."""
        snapshot = status.copy()
        snapshot.mark_clean()
        self._status = snapshot
        self._stored_at = time.monotonic()
        self._last_update = datetime.now()

    def invalidate(self) -> None:
        """Drop the cached status."""
        self._status = None
        self._stored_at = None

    async def get_or_fetch(self, fetch: Callable[[], Awaitable[DeviceStatus]]) -> DeviceStatus:
        """Return the cached status, fetching a fresh one on a miss.

        Args:
            fetch: Coroutine function reading the status from the device

        Returns:
            A copy of the fresh status
        """
        status = self._fresh()
        if status is not None:
            return status

        async with self._lock:
            # Another caller may have refreshed while we waited
            status = self._fresh()
            if status is not None:
                return status

            logger.debug("Status cache miss, fetching")
            fetched = await fetch()
            self.put(fetched)
            return fetched.copy()

    @property
    def last_update(self) -> datetime | None:
        """Get timestamp of last cache update."""
        return self._last_update

    @property
    def has_status(self) -> bool:
        return self._status is not None
