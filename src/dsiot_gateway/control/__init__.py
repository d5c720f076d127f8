"""State and temperature control on top of the device status."""

from dsiot_gateway.control.state import DeviceState, PowerState, StateTransition, StateTransitionError
from dsiot_gateway.control.temperature import TemperatureError, TemperatureTarget

__all__ = [
    "DeviceState",
    "PowerState",
    "StateTransition",
    "StateTransitionError",
    "TemperatureError",
    "TemperatureTarget",
]
