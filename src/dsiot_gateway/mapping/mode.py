"""Operating mode projections onto generic HVAC current/target states."""

from enum import IntEnum

from dsiot_gateway.protocol.constants import Mode


class CurrentState(IntEnum):
    """What the unit is doing."""

    INACTIVE = 0
    IDLE = 1
    HEATING = 2
    COOLING = 3


class TargetState(IntEnum):
    """What the unit is asked to do."""

    AUTO = 0
    HEAT = 1
    COOL = 2


_CURRENT_STATES = {
    Mode.FAN: CurrentState.INACTIVE,
    Mode.DEHUMIDIFY: CurrentState.IDLE,
    Mode.HEATING: CurrentState.HEATING,
    Mode.COOLING: CurrentState.COOLING,
}

_TARGET_STATES = {
    Mode.AUTO: TargetState.AUTO,
    Mode.HEATING: TargetState.HEAT,
    Mode.COOLING: TargetState.COOL,
}

_MODES_BY_TARGET = {state: mode for mode, state in _TARGET_STATES.items()}


def to_current_state(mode: Mode | None) -> CurrentState:
    """
    Project a mode onto the current-state scale.

    Auto mode reports INACTIVE: the status does not say whether the unit
    is heating or cooling at the moment, so no activity is inferred.
    """
    if mode is None:
        return CurrentState.INACTIVE
    return _CURRENT_STATES.get(mode, CurrentState.INACTIVE)


def to_target_state(mode: Mode | None) -> TargetState | None:
    """Project a mode onto the target-state scale (None for fan/dehumidify)."""
    if mode is None:
        return None
    return _TARGET_STATES.get(mode)


def from_target_state(state: int) -> Mode | None:
    """Mode for a target state, None for values outside 0-2."""
    try:
        return _MODES_BY_TARGET[TargetState(state)]
    except ValueError:
        return None
