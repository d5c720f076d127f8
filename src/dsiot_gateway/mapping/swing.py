"""Swing on/off projection of the vertical and horizontal air directions."""

from dsiot_gateway.protocol.constants import HorizontalDirection, VerticalDirection


def to_enabled(direction: VerticalDirection | None) -> bool:
    """Swing is on only while the vertical direction is SWING."""
    return direction is VerticalDirection.SWING


def from_enabled(enabled: bool) -> tuple[VerticalDirection, HorizontalDirection]:
    """Directions for a swing state; fixed positions cannot be expressed."""
    if enabled:
        return VerticalDirection.SWING, HorizontalDirection.SWING
    return VerticalDirection.AUTO, HorizontalDirection.AUTO
