"""Device identification (name, MAC, firmware version, EDID)."""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

from dsiot_gateway.protocol.codec import MalformedHexError, decode_edid
from dsiot_gateway.protocol.constants import INFO_ADAPTER_ROUTE, INFO_DEVICE_ROUTE
from dsiot_gateway.protocol.envelope import Request, RequestEnvelope, ResponseEnvelope
from dsiot_gateway.protocol.item import Item
from dsiot_gateway.protocol.property import Leaf

logger = logging.getLogger(__name__)

READ_INFO_REQUEST = RequestEnvelope(
    [
        Request.read(INFO_ADAPTER_ROUTE),
        Request.read(INFO_DEVICE_ROUTE),
    ]
)

_BASIC_INFO_REQUIRED = ("name", "mac", "ver", "edid")


def _format_version(raw: str) -> str:
    return raw.replace("_", ".")


@dataclass
class DeviceInfo:
    """Identity of a device as reported by its adapter."""

    name: str
    mac: str
    version: str
    edid: int

    @classmethod
    def from_response(cls, response: ResponseEnvelope) -> "DeviceInfo":
        """
        Extract device info from the adapter/device info responses.

        Missing values default to an empty string (or 0 for the EDID).
        """

        def text(route: str, name: str) -> str:
            node = response.get(route, (name,))
            if not isinstance(node, Leaf):
                return ""
            return Item.from_leaf(node).get_string() or ""

        edid_hex = text(INFO_ADAPTER_ROUTE, "edid")
        try:
            edid = decode_edid(edid_hex)
        except MalformedHexError:
            logger.debug("Invalid EDID %r, using 0", edid_hex)
            edid = 0

        return cls(
            name=text(INFO_DEVICE_ROUTE, "name"),
            mac=text(INFO_ADAPTER_ROUTE, "mac"),
            version=_format_version(text(INFO_ADAPTER_ROUTE, "ver")),
            edid=edid,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeviceInfo":
        """Parse and validate a raw info response body."""
        return cls.from_response(ResponseEnvelope.from_dict(data))

    @classmethod
    def from_basic_info(cls, text: str) -> "DeviceInfo":
        """
        Parse a discovery reply.

        Replies are comma-separated ``key=value`` pairs with percent-encoded
        values, e.g. ``ret=OK,...,ver=2_7_0,mac=00005E005342,name=%64%69...``.

        Raises:
            ValueError: If a required key is missing or the EDID is invalid
        """
        fields: dict[str, str] = {}
        for pair in text.strip().split(","):
            key, sep, value = pair.partition("=")
            if sep:
                fields[key.strip()] = unquote(value)

        missing = [key for key in _BASIC_INFO_REQUIRED if key not in fields]
        if missing:
            raise ValueError(f"Basic info missing keys: {', '.join(missing)}")

        return cls(
            name=fields["name"],
            mac=fields["mac"],
            version=_format_version(fields["ver"]),
            edid=decode_edid(fields["edid"]),
        )
