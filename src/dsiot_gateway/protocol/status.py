"""Device status model: the fixed set of properties making up AC state.

Reads span two routes (indoor unit ``adr_0100`` and outdoor unit
``adr_0200``); writes always go to the indoor route.
"""

import copy
import logging
from enum import IntEnum
from typing import Any, NamedTuple

from dsiot_gateway.protocol.constants import (
    OUTDOOR_ROUTE,
    READ_FILTER,
    STATUS_ROUTE,
    WRITE_ROOT,
    WRITE_ROUTE,
    AutoModeWindSpeed,
    HorizontalDirection,
    Mode,
    VerticalDirection,
    WindSpeed,
)
from dsiot_gateway.protocol.envelope import Request, RequestEnvelope, ResponseEnvelope
from dsiot_gateway.protocol.codec import MalformedHexError
from dsiot_gateway.protocol.item import Item
from dsiot_gateway.protocol.property import Leaf, Tree

logger = logging.getLogger(__name__)


class StatusField(NamedTuple):
    """Location and type of one status property."""

    route: str
    path: tuple[str, ...]
    kind: type[IntEnum] | None
    writable: bool


# Field name -> location in the response tree (path below the payload root)
STATUS_FIELDS: dict[str, StatusField] = {
    "power": StatusField(STATUS_ROUTE, ("e_1002", "e_A002", "p_01"), None, True),
    "mode": StatusField(STATUS_ROUTE, ("e_1002", "e_3001", "p_01"), Mode, True),
    "indoor_temperature": StatusField(STATUS_ROUTE, ("e_1002", "e_A00B", "p_01"), None, False),
    "indoor_humidity": StatusField(STATUS_ROUTE, ("e_1002", "e_A00B", "p_02"), None, False),
    "outdoor_temperature": StatusField(OUTDOOR_ROUTE, ("e_1003", "e_A00D", "p_01"), None, False),
    "cooling_temperature": StatusField(STATUS_ROUTE, ("e_1002", "e_3001", "p_02"), None, True),
    "heating_temperature": StatusField(STATUS_ROUTE, ("e_1002", "e_3001", "p_03"), None, True),
    "auto_temperature": StatusField(STATUS_ROUTE, ("e_1002", "e_3001", "p_1F"), None, True),
    "fan_speed": StatusField(STATUS_ROUTE, ("e_1002", "e_3001", "p_09"), WindSpeed, True),
    "auto_fan_speed": StatusField(STATUS_ROUTE, ("e_1002", "e_3001", "p_26"), AutoModeWindSpeed, True),
    "vertical_direction": StatusField(STATUS_ROUTE, ("e_1002", "e_3001", "p_05"), VerticalDirection, True),
    "horizontal_direction": StatusField(STATUS_ROUTE, ("e_1002", "e_3001", "p_06"), HorizontalDirection, True),
}

READ_STATUS_REQUEST = RequestEnvelope(
    [
        Request.read(STATUS_ROUTE + READ_FILTER),
        Request.read(OUTDOOR_ROUTE + READ_FILTER),
    ]
)


class DeviceStatus:
    """
    Snapshot of the device's readable and writable properties.

    Each attribute named in ``STATUS_FIELDS`` is an ``Item``. Properties
    absent from the response are missing-item sentinels whose getters
    return None.
    """

    power: Item
    mode: Item[Mode]
    indoor_temperature: Item
    indoor_humidity: Item
    outdoor_temperature: Item
    cooling_temperature: Item
    heating_temperature: Item
    auto_temperature: Item
    fan_speed: Item[WindSpeed]
    auto_fan_speed: Item[AutoModeWindSpeed]
    vertical_direction: Item[VerticalDirection]
    horizontal_direction: Item[HorizontalDirection]

    def __init__(self, items: dict[str, Item] | None = None):
        items = items or {}
        for name, field in STATUS_FIELDS.items():
            setattr(self, name, items.get(name) or Item.missing(field.kind))

    @classmethod
    def from_response(cls, response: ResponseEnvelope) -> "DeviceStatus":
        """Extract every status field from a validated response envelope."""
        items: dict[str, Item] = {}
        for name, field in STATUS_FIELDS.items():
            node = response.get(field.route, field.path)
            if isinstance(node, Leaf):
                items[name] = Item.from_leaf(node, field.kind)
            else:
                logger.debug("Status field %s not found at %s %s", name, field.route, "/".join(field.path))
                items[name] = Item.missing(field.kind)
        return cls(items)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeviceStatus":
        """Parse and validate a raw response body."""
        return cls.from_response(ResponseEnvelope.from_dict(data))

    def items(self) -> dict[str, Item]:
        """Field name -> item, in table order."""
        return {name: getattr(self, name) for name in STATUS_FIELDS}

    def touched_fields(self) -> list[str]:
        return [name for name, item in self.items().items() if item.touched]

    def pending_fields(self) -> list[str]:
        """Touched fields that ``to_request`` will actually write."""
        return [
            name
            for name, item in self.items().items()
            if item.touched and item.present and STATUS_FIELDS[name].writable
        ]

    def mark_clean(self) -> None:
        """Forget which fields were changed."""
        for item in self.items().values():
            item.touched = False

    def to_request(self, only_touched: bool = True) -> RequestEnvelope:
        """
        Build the write request for this status.

        All fields are written to the indoor route in a single entry,
        whichever route they were read from. No validation of mode/power
        combinations is performed.

        Args:
            only_touched: Write only fields changed through ``set_value``;
                when False, write every present writable field

        Returns:
            Envelope with one write entry, or an empty envelope if there is
            nothing to write
        """
        root = Tree(WRITE_ROOT)
        for name, field in STATUS_FIELDS.items():
            item: Item = getattr(self, name)
            if not field.writable:
                if item.touched:
                    logger.warning("Ignoring change to read-only status field %s", name)
                continue
            if only_touched and not item.touched:
                continue
            if not item.present:
                logger.warning("Skipping status field %s: not reported by device", name)
                continue
            root.set_path(field.path, copy.deepcopy(item.value))

        if not root.children:
            return RequestEnvelope()
        return RequestEnvelope([Request.write(WRITE_ROUTE, root)])

    def copy(self) -> "DeviceStatus":
        return copy.deepcopy(self)

    def as_dict(self) -> dict[str, Any]:
        """
        Decoded values keyed by field name (for logging and debugging).

        Values that are not valid hex are shown as the raw wire value.
        """
        result: dict[str, Any] = {}
        for name, item in self.items().items():
            try:
                if item.kind is not None:
                    code = item.get_enum()
                    result[name] = code.name if code is not None else None
                else:
                    result[name] = item.get_numeric()
            except MalformedHexError:
                result[name] = item.value
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeviceStatus):
            return NotImplemented
        return self.items() == other.items()

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self.as_dict().items())
        return f"DeviceStatus({fields})"
