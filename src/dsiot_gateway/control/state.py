"""Power and mode state transitions.

Every power/mode combination is accepted and forwarded to the device;
the device applies its own rules.
"""

from dataclasses import dataclass
from enum import Enum

from dsiot_gateway.protocol.constants import Mode
from dsiot_gateway.protocol.status import DeviceStatus


class StateTransitionError(ValueError):
    """Raised when a transition cannot be applied."""


class PowerState(Enum):
    """Device power state."""

    OFF = 0
    ON = 1

    @classmethod
    def from_status(cls, status: DeviceStatus) -> "PowerState | None":
        value = status.power.get_numeric()
        if value is None:
            return None
        return cls.ON if value >= 1.0 else cls.OFF

    def to_value(self) -> float:
        return float(self.value)


@dataclass(frozen=True)
class DeviceState:
    """Power and mode of the device."""

    power: PowerState
    mode: Mode

    @classmethod
    def from_status(cls, status: DeviceStatus) -> "DeviceState | None":
        power = PowerState.from_status(status)
        mode = status.mode.get_enum()
        if power is None or mode is None or mode is Mode.UNKNOWN:
            return None
        return cls(power, mode)

    def transition(self, power: PowerState | None = None, mode: Mode | None = None) -> "DeviceState":
        """Compute the state after changing power and/or mode."""
        return DeviceState(
            power=power if power is not None else self.power,
            mode=mode if mode is not None else self.mode,
        )


class StateTransition:
    """Builder for a power/mode change.

    Example:
        >>> StateTransition().turn_on().mode(Mode.COOLING).apply_to_status(status)
    """

    def __init__(self) -> None:
        self._power: PowerState | None = None
        self._mode: Mode | None = None

    def power(self, power: PowerState) -> "StateTransition":
        self._power = power
        return self

    def mode(self, mode: Mode) -> "StateTransition":
        self._mode = mode
        return self

    def turn_on(self) -> "StateTransition":
        return self.power(PowerState.ON)

    def turn_off(self) -> "StateTransition":
        return self.power(PowerState.OFF)

    def apply(self, current: DeviceState) -> DeviceState:
        return current.transition(self._power, self._mode)

    def apply_to_status(self, status: DeviceStatus) -> DeviceState:
        """
        Apply the transition to ``status`` in place.

        Only the parts set on this builder are written, so a power-only
        change leaves the mode field untouched.

        Raises:
            StateTransitionError: If a part left unchanged cannot be read or
                the device reports an unknown mode
        """
        current = DeviceState.from_status(status)
        if current is not None:
            new_state = self.apply(current)
        elif self._power is not None and self._mode is not None:
            new_state = DeviceState(self._power, self._mode)
        else:
            raise StateTransitionError("Cannot determine current device state")
        if self._power is not None:
            status.power.set_value(new_state.power.to_value())
        if self._mode is not None:
            status.mode.set_value(new_state.mode)
        return new_state
