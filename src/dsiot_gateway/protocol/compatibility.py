"""Metadata checks for deciding whether a device can be driven.

Power, mode and the indoor/target temperatures must be present with the
expected metadata kind or the gateway cannot control the unit. Fan speed
and air direction are optional: a mismatch there only disables those
controls.
"""

from dataclasses import dataclass
from enum import Enum

from dsiot_gateway.protocol.item import Item
from dsiot_gateway.protocol.status import DeviceStatus

# Enum ``mx`` values of units known to work
MODE_MAX = "2F00"
FAN_SPEED_MAX = "F80C"
VERTICAL_DIRECTION_MAX = "3F808100"
HORIZONTAL_DIRECTION_MAX = "FD8101"

REQUIRED_STEP_FIELDS = ("power", "indoor_temperature", "cooling_temperature", "heating_temperature")
REQUIRED_ENUM_FIELDS = {"mode": MODE_MAX}
OPTIONAL_ENUM_FIELDS = {
    "fan_speed": FAN_SPEED_MAX,
    "vertical_direction": VERTICAL_DIRECTION_MAX,
    "horizontal_direction": HORIZONTAL_DIRECTION_MAX,
}


class Severity(Enum):
    OK = "ok"
    WARNING = "warning"
    FAILURE = "failure"


@dataclass(frozen=True)
class FieldCheck:
    """Outcome of checking one status field."""

    field: str
    severity: Severity
    detail: str

    @property
    def ok(self) -> bool:
        return self.severity is Severity.OK


def _check_step(name: str, item: Item, failing: Severity) -> FieldCheck:
    limits = item.constraints
    if not item.present or limits is None:
        return FieldCheck(name, failing, f"expected step metadata, got {item.metadata!r}")
    return FieldCheck(
        name,
        Severity.OK,
        f"{item.get_numeric()} (range {limits.min:g}..{limits.max:g}, step {limits.step:g})",
    )


def _check_enum(name: str, item: Item, expected_max: str, failing: Severity) -> FieldCheck:
    binary = item.metadata.binary
    if not item.present or not item.metadata.is_enum:
        return FieldCheck(name, failing, f"expected enum metadata, got {item.metadata!r}")
    if binary.max.upper() != expected_max:
        return FieldCheck(name, failing, f"unexpected mx {binary.max} (expected {expected_max})")
    code = item.get_enum()
    return FieldCheck(name, Severity.OK, f"{code.name if code is not None else None} [{binary.max}]")


def check_status(status: DeviceStatus) -> list[FieldCheck]:
    """
    Check the metadata of every field the gateway relies on.

    Required fields fail when missing or of the wrong kind; optional fields
    only warn.

    Returns:
        One check per field, required fields first
    """
    checks = [_check_step(name, getattr(status, name), Severity.FAILURE) for name in REQUIRED_STEP_FIELDS]
    checks += [
        _check_enum(name, getattr(status, name), expected, Severity.FAILURE)
        for name, expected in REQUIRED_ENUM_FIELDS.items()
    ]
    checks += [
        _check_enum(name, getattr(status, name), expected, Severity.WARNING)
        for name, expected in OPTIONAL_ENUM_FIELDS.items()
    ]
    return checks
