"""Typed accessor over a single property leaf."""

import copy
import logging
from enum import IntEnum
from typing import Generic, TypeVar

from dsiot_gateway.protocol.codec import MalformedHexError, decode_int, encode_value, hex_width
from dsiot_gateway.protocol.constraints import ValueConstraints
from dsiot_gateway.protocol.property import (
    BinaryEnum,
    BinaryStep,
    Leaf,
    Metadata,
    PropertyType,
    PropValue,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=IntEnum)


class UnsupportedWriteError(TypeError):
    """Raised when a value is written to a leaf whose metadata cannot encode it."""


class Item(Generic[T]):
    """
    Read/write view of one leaf, bound to a domain type.

    The item owns a copy of the leaf's name, value and metadata; changes
    made through ``set_value`` do not reach back into the source tree.
    ``kind`` is the enum used by ``get_enum``; numeric items leave it unset.

    Attributes:
        name: Leaf name ("" for a missing leaf)
        value: Wire value
        metadata: Decoding metadata
        kind: Enum type for enum-coded leaves
        touched: True once ``set_value`` has been called
    """

    def __init__(
        self,
        name: str,
        value: PropValue = None,
        metadata: Metadata | None = None,
        kind: type[T] | None = None,
    ):
        self.name = name
        self.value = value
        self.metadata = metadata if metadata is not None else Metadata.undefined()
        self.kind = kind
        self.touched = False

    @classmethod
    def from_leaf(cls, leaf: Leaf, kind: type[T] | None = None) -> "Item[T]":
        """Snapshot a leaf."""
        return cls(leaf.name, copy.deepcopy(leaf.value), copy.deepcopy(leaf.metadata), kind)

    @classmethod
    def missing(cls, kind: type[T] | None = None) -> "Item[T]":
        """Sentinel for a path that was not present in the response."""
        return cls("", None, Metadata.undefined(), kind)

    @property
    def present(self) -> bool:
        """Whether this item was bound to a real leaf."""
        return bool(self.name) or self.metadata.type is not PropertyType.UNDEFINED

    @property
    def constraints(self) -> ValueConstraints | None:
        return ValueConstraints.from_metadata(self.metadata)

    # -- getters -------------------------------------------------------------

    def get_numeric(self) -> float | None:
        """Physical value of a step-scaled leaf, else None."""
        step = self.metadata.binary
        if not isinstance(step, BinaryStep) or not isinstance(self.value, str):
            return None
        return decode_int(self.value) * step.effective_coefficient

    def get_enum(self) -> T | None:
        """
        Domain code of an enum-coded leaf, else None.

        Codes outside the known set resolve to the enum's UNKNOWN member.
        """
        if self.kind is None:
            return None
        if not self.metadata.is_enum or not isinstance(self.value, str):
            return None
        return self.kind(decode_int(self.value))

    def get_string(self) -> str | None:
        """
        Text of a string leaf.

        Plain string metadata returns the value as is. Hex-packed strings are
        decoded as UTF-8, reversed and stripped of trailing NULs; this is the
        byte order observed on devices and is kept as-is until confirmed
        against more captures.
        """
        if not isinstance(self.value, str):
            return None
        if self.metadata.type is PropertyType.STRING:
            return self.value
        if self.metadata.is_binary_string:
            try:
                text = bytes.fromhex(self.value).decode("utf-8")
            except ValueError:
                logger.debug("Undecodable string value for %s: %r", self.name, self.value)
                return None
            return text[::-1].rstrip("\0")
        return None

    def get_integer(self) -> int | None:
        """Value of a plain integer leaf, else None."""
        if self.metadata.type is not PropertyType.INTEGER:
            return None
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            return None
        return self.value

    # -- setter --------------------------------------------------------------

    def set_value(self, value: float | T) -> None:
        """
        Encode ``value`` according to the leaf's metadata.

        Step leaves keep their byte width and coefficient; enum leaves keep
        the width of their ``mx`` field. Leaves without encodable metadata
        are cleared to None.

        Raises:
            UnsupportedWriteError: If the leaf holds plain string metadata
            MalformedHexError: If the metadata's width field is unusable
        """
        binary = self.metadata.binary
        if self.metadata.type is PropertyType.INTEGER:
            self.value = int(value)
        elif self.metadata.type is PropertyType.STRING:
            raise UnsupportedWriteError(f"String property {self.name!r} cannot be written")
        elif isinstance(binary, BinaryStep):
            self.value = encode_value(float(value), _width(binary.max), binary.effective_coefficient)
        elif isinstance(binary, BinaryEnum):
            self.value = encode_value(int(value), _width(binary.max))
        else:
            logger.debug("No encodable metadata for %r, clearing value", self.name)
            self.value = None
        self.touched = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return (self.name, self.value, self.metadata) == (other.name, other.value, other.metadata)

    def __repr__(self) -> str:
        if self.metadata.is_step:
            try:
                shown = self.get_numeric()
            except MalformedHexError:
                shown = self.value
        elif self.metadata.is_binary_string:
            shown = self.get_string()
        else:
            shown = self.value
        return f"Item(name={self.name!r}, value={shown!r}, metadata={self.metadata!r})"


def _width(max_hex: str) -> int:
    width = hex_width(max_hex)
    if width < 1:
        raise MalformedHexError(f"Cannot derive width from {max_hex!r}")
    return width
