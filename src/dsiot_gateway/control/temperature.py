"""Mode-dependent temperature targets."""

from dataclasses import dataclass

from dsiot_gateway.protocol.constants import Mode
from dsiot_gateway.protocol.status import DeviceStatus

# Target kind -> status field holding it
_TARGET_FIELDS = {
    Mode.HEATING: "heating_temperature",
    Mode.COOLING: "cooling_temperature",
    Mode.AUTO: "auto_temperature",
}


class TemperatureError(ValueError):
    """Raised when a temperature target does not fit the operating mode."""


@dataclass(frozen=True)
class TemperatureTarget:
    """
    Temperature target for one operating mode.

    ``mode`` is HEATING, COOLING or AUTO (where ``value`` is an offset of
    -5 to +5); ``mode=None`` stands for fan/dehumidify, which have no target.
    """

    mode: Mode | None
    value: float | None = None

    @classmethod
    def heating(cls, temperature: float) -> "TemperatureTarget":
        return cls(Mode.HEATING, temperature)

    @classmethod
    def cooling(cls, temperature: float) -> "TemperatureTarget":
        return cls(Mode.COOLING, temperature)

    @classmethod
    def auto(cls, offset: float) -> "TemperatureTarget":
        return cls(Mode.AUTO, offset)

    @classmethod
    def none(cls) -> "TemperatureTarget":
        return cls(None)

    @classmethod
    def from_status(cls, status: DeviceStatus) -> "TemperatureTarget | None":
        """Target for the status' current mode, None if it cannot be read."""
        mode = status.mode.get_enum()
        if mode in (Mode.FAN, Mode.DEHUMIDIFY):
            return cls.none()
        field = _TARGET_FIELDS.get(mode)
        if field is None:
            return None
        value = getattr(status, field).get_numeric()
        if value is None:
            return None
        return cls(mode, value)

    def is_valid_for_mode(self, mode: Mode) -> bool:
        if self.mode is None:
            return mode in (Mode.FAN, Mode.DEHUMIDIFY)
        return self.mode == mode

    def apply_to_status(self, status: DeviceStatus) -> None:
        """Write the target regardless of the current mode."""
        if self.mode is None or self.value is None:
            return
        getattr(status, _TARGET_FIELDS[self.mode]).set_value(self.value)

    def apply_validated(self, status: DeviceStatus) -> None:
        """
        Write the target only if it matches the current mode.

        Raises:
            TemperatureError: If the mode is unknown or does not match
        """
        mode = status.mode.get_enum()
        if mode is None or mode is Mode.UNKNOWN:
            raise TemperatureError("Cannot determine current operating mode")
        if not self.is_valid_for_mode(mode):
            expected = self.mode.name if self.mode is not None else "NONE"
            raise TemperatureError(f"Temperature type {expected} doesn't match mode {mode.name}")
        self.apply_to_status(status)
