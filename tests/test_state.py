"""Unit tests for power and mode transitions."""

import pytest

from dsiot_gateway.control.state import (
    DeviceState,
    PowerState,
    StateTransition,
    StateTransitionError,
)
from dsiot_gateway.protocol.constants import Mode
from dsiot_gateway.protocol.status import DeviceStatus


class TestPowerState:
    """Tests for PowerState."""

    def test_from_status(self, status):
        """Test power is read from the status."""
        assert PowerState.from_status(status) is PowerState.OFF

        status.power.set_value(1.0)

        assert PowerState.from_status(status) is PowerState.ON

    def test_missing(self):
        """Test a missing power field has no state."""
        assert PowerState.from_status(DeviceStatus()) is None

    def test_to_value(self):
        """Test numeric wire values."""
        assert PowerState.ON.to_value() == 1.0
        assert PowerState.OFF.to_value() == 0.0


class TestDeviceState:
    """Tests for DeviceState."""

    def test_from_status(self, status):
        """Test state is read from the status."""
        assert DeviceState.from_status(status) == DeviceState(PowerState.OFF, Mode.COOLING)

    def test_unknown_mode(self, status):
        """Test an undocumented mode code yields no state."""
        status.mode.value = "0700"

        assert status.mode.get_enum() is Mode.UNKNOWN
        assert DeviceState.from_status(status) is None

    def test_transition_keeps_unset(self):
        """Test unchanged parts are kept."""
        state = DeviceState(PowerState.OFF, Mode.COOLING)

        assert state.transition(power=PowerState.ON) == DeviceState(PowerState.ON, Mode.COOLING)
        assert state.transition(mode=Mode.FAN) == DeviceState(PowerState.OFF, Mode.FAN)

    def test_all_combinations_allowed(self):
        """Test every power/mode combination is accepted."""
        state = DeviceState(PowerState.ON, Mode.HEATING)

        for power in PowerState:
            for mode in (Mode.FAN, Mode.HEATING, Mode.COOLING, Mode.AUTO, Mode.DEHUMIDIFY):
                assert state.transition(power, mode) == DeviceState(power, mode)


class TestStateTransition:
    """Tests for the transition builder."""

    def test_turn_on_and_mode(self, status):
        """Test applying power and mode to a status."""
        new_state = StateTransition().turn_on().mode(Mode.HEATING).apply_to_status(status)

        assert new_state == DeviceState(PowerState.ON, Mode.HEATING)
        assert status.power.get_numeric() == 1.0
        assert status.mode.get_enum() is Mode.HEATING
        assert status.touched_fields() == ["power", "mode"]

    def test_turn_off(self):
        """Test turning off keeps the mode."""
        state = StateTransition().turn_off().apply(DeviceState(PowerState.ON, Mode.AUTO))

        assert state == DeviceState(PowerState.OFF, Mode.AUTO)

    def test_unknown_state(self):
        """Test a status without power or mode cannot be transitioned."""
        with pytest.raises(StateTransitionError):
            StateTransition().turn_on().apply_to_status(DeviceStatus())

    def test_power_only_leaves_mode_untouched(self, status):
        """Test a power change does not rewrite the mode."""
        StateTransition().turn_on().apply_to_status(status)

        assert status.touched_fields() == ["power"]
        assert status.mode.value == "0200"

    def test_mode_only_leaves_power_untouched(self, status):
        """Test a mode change does not rewrite the power."""
        StateTransition().mode(Mode.FAN).apply_to_status(status)

        assert status.touched_fields() == ["mode"]

    def test_power_only_with_unknown_mode(self, status):
        """Test a power-only change is refused when the mode is undocumented."""
        status.mode.value = "0700"

        with pytest.raises(StateTransitionError):
            StateTransition().turn_on().apply_to_status(status)

        assert status.touched_fields() == []
        assert status.mode.value == "0700"

    def test_full_transition_with_unknown_mode(self, status):
        """Test setting both power and mode replaces an undocumented mode."""
        status.mode.value = "0700"

        new_state = StateTransition().turn_on().mode(Mode.COOLING).apply_to_status(status)

        assert new_state == DeviceState(PowerState.ON, Mode.COOLING)
        assert status.mode.get_enum() is Mode.COOLING
        assert status.touched_fields() == ["power", "mode"]
