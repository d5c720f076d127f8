"""Binary value encoding and decoding for DSIOT property values.

Property values travel as lowercase hex strings holding little-endian
signed integers. Step metadata scales those integers into physical values
(temperatures, offsets); enum metadata carries raw device codes.
"""

import math
import string
import struct

# Hex length -> struct format for the decoded integer
_INT_FORMATS = {
    2: "<b",
    4: "<h",
    6: "<i",
    8: "<i",
}

# Quotients closer than this to an integer are treated as exact
_SNAP_TOLERANCE = 1e-6


class MalformedHexError(ValueError):
    """Raised when a hex property value cannot be decoded."""


def _unhex(hex_str: str) -> bytes:
    if not all(c in string.hexdigits for c in hex_str):
        raise MalformedHexError(f"Invalid hex string: {hex_str!r}")
    try:
        return bytes.fromhex(hex_str)
    except (ValueError, TypeError):
        raise MalformedHexError(f"Invalid hex string: {hex_str!r}") from None


def decode_int(hex_str: str) -> int:
    """
    Decode a packed little-endian signed integer.

    Accepted widths are 1 to 4 bytes (2, 4, 6 or 8 hex characters).
    One byte decodes as int8, two as int16; three and four byte values
    decode as int32, the three byte form zero-padded to four bytes.

    Args:
        hex_str: Hex string from a property value or metadata field

    Returns:
        Decoded integer

    Raises:
        MalformedHexError: If the length is unsupported or the hex is invalid

    Example:
        >>> decode_int("18")
        24
        >>> decode_int("eeff")
        -18
        >>> decode_int("12345600")
        5649426
    """
    fmt = _INT_FORMATS.get(len(hex_str))
    if fmt is None:
        raise MalformedHexError(f"Unsupported hex length {len(hex_str)}: {hex_str!r}")

    data = _unhex(hex_str)
    if len(data) == 3:
        data += b"\x00"

    return struct.unpack(fmt, data)[0]


def decode_step(step: int) -> float:
    """
    Decode a step byte into its scaling coefficient.

    The low nibble is the base digit (0-15), the high nibble a signed
    4-bit exponent (8-15 mean -8..-1).

    Example:
        >>> decode_step(0xF5)
        0.5
    """
    base = step & 0x0F
    exponent = (step >> 4) & 0x0F
    if exponent >= 8:
        exponent -= 16
    return base * 10.0**exponent


def effective_coefficient(step: int) -> float:
    """Return the step coefficient, or 1 for unscaled (base 0) leaves."""
    coefficient = decode_step(step)
    return coefficient if coefficient != 0 else 1.0


def decode_range(min_hex: str, max_hex: str, step: int) -> tuple[float, float]:
    """
    Derive the inclusive physical range described by step metadata.

    Args:
        min_hex: Packed minimum ("mi")
        max_hex: Packed maximum ("mx")
        step: Step byte ("st"); 0 means unscaled

    Returns:
        (minimum, maximum) tuple

    Example:
        >>> decode_range("24", "40", 0xF5)
        (18.0, 32.0)
    """
    coefficient = 1.0 if step == 0 else decode_step(step)
    return decode_int(min_hex) * coefficient, decode_int(max_hex) * coefficient


def decode_value(hex_str: str, step: int) -> float:
    """Decode a step-scaled property value into its physical value."""
    return decode_int(hex_str) * effective_coefficient(step)


def encode_value(value: float, width: int, coefficient: float = 1.0) -> str:
    """
    Encode a physical value into a packed hex string.

    The value is divided by the coefficient and truncated toward zero,
    then written as a little-endian two's complement integer of exactly
    ``width`` bytes.

    Args:
        value: Physical value (or raw code when coefficient is 1)
        width: Output width in bytes (1-8)
        coefficient: Step coefficient of the target leaf

    Returns:
        Lowercase hex string of ``2 * width`` characters

    Raises:
        ValueError: If width or coefficient is unusable

    Example:
        >>> encode_value(19.0, 2, 0.5)
        '2600'
        >>> encode_value(-9, 1)
        'f7'
    """
    if not 1 <= width <= 8:
        raise ValueError(f"Unsupported encode width: {width}")
    if coefficient == 0:
        raise ValueError("Step coefficient must be non-zero")

    quotient = float(value) / coefficient
    nearest = round(quotient)
    if abs(quotient - nearest) < _SNAP_TOLERANCE:
        raw = int(nearest)
    else:
        raw = math.trunc(quotient)

    # Wrap into 64 bits, then keep the low-order bytes like a fixed-width cast
    packed = struct.pack("<q", ((raw + 2**63) % 2**64) - 2**63)
    return packed[:width].hex()


def hex_width(hex_str: str) -> int:
    """Return the byte width encoded by a hex string."""
    return len(hex_str) // 2


def decode_edid(hex_str: str) -> int:
    """
    Decode a device EDID (8 bytes, big-endian unsigned).

    EDIDs are decoded independently of property values, which are
    little-endian.

    Example:
        >>> decode_edid("0000000001234567")
        19088743
    """
    if len(hex_str) != 16:
        raise MalformedHexError(f"EDID must be 16 hex characters: {hex_str!r}")
    return struct.unpack(">Q", _unhex(hex_str))[0]
