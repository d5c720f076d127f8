"""DSIOT protocol implementation."""

from dsiot_gateway.protocol.codec import (
    MalformedHexError,
    decode_edid,
    decode_int,
    decode_range,
    decode_step,
    decode_value,
    encode_value,
)
from dsiot_gateway.protocol.constants import (
    AutoModeWindSpeed,
    HorizontalDirection,
    Mode,
    OpCode,
    VerticalDirection,
    WindSpeed,
)
from dsiot_gateway.protocol.constraints import ValueConstraints
from dsiot_gateway.protocol.envelope import (
    EnvelopeRejectedError,
    Request,
    RequestEnvelope,
    Response,
    ResponseEnvelope,
)
from dsiot_gateway.protocol.info import DeviceInfo
from dsiot_gateway.protocol.item import Item, UnsupportedWriteError
from dsiot_gateway.protocol.property import Leaf, Metadata, Property, Tree
from dsiot_gateway.protocol.status import DeviceStatus

# ProtocolHandler imported lazily to avoid circular import with core.cache
# (core.cache -> protocol.status -> protocol.__init__ -> handler -> core.cache)


def __getattr__(name: str):
    if name == "ProtocolHandler":
        from dsiot_gateway.protocol.handler import ProtocolHandler

        return ProtocolHandler
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ProtocolHandler",
    "DeviceStatus",
    "DeviceInfo",
    "Item",
    "Property",
    "Leaf",
    "Tree",
    "Metadata",
    "Request",
    "RequestEnvelope",
    "Response",
    "ResponseEnvelope",
    "ValueConstraints",
    "decode_int",
    "decode_step",
    "decode_range",
    "decode_value",
    "decode_edid",
    "encode_value",
    "MalformedHexError",
    "EnvelopeRejectedError",
    "UnsupportedWriteError",
    "OpCode",
    "Mode",
    "WindSpeed",
    "AutoModeWindSpeed",
    "VerticalDirection",
    "HorizontalDirection",
]
