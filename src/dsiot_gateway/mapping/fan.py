"""Fan speed mappings.

The unit has six manual levels (SILENT, LEV1-LEV5) plus AUTO. They map onto
a 0-100 % scale in 20-point steps with AUTO carried as a separate flag, and
onto the legacy 1.0-7.0 rotation-speed scale.
"""

from dataclasses import dataclass

from dsiot_gateway.protocol.constants import AutoModeWindSpeed, WindSpeed
from dsiot_gateway.protocol.constraints import ValueConstraints

AUTO_MODE_THRESHOLD = 50


@dataclass(frozen=True)
class FanSpeed:
    """Fan speed as a percentage with an independent auto flag.

    ``percent`` is only meaningful when ``auto`` is False.
    """

    percent: int
    auto: bool = False

    @classmethod
    def manual(cls, percent: float) -> "FanSpeed":
        return cls(percent=int(min(max(percent, 0), 100)), auto=False)

    @classmethod
    def automatic(cls) -> "FanSpeed":
        return cls(percent=0, auto=True)


_PERCENTS = {
    WindSpeed.SILENT: 0,
    WindSpeed.LEV1: 20,
    WindSpeed.LEV2: 40,
    WindSpeed.LEV3: 60,
    WindSpeed.LEV4: 80,
    WindSpeed.LEV5: 100,
}

# Lower band edge (inclusive) -> level, highest first
_BANDS = (
    (90, WindSpeed.LEV5),
    (70, WindSpeed.LEV4),
    (50, WindSpeed.LEV3),
    (30, WindSpeed.LEV2),
    (10, WindSpeed.LEV1),
)

_SCALE = {
    WindSpeed.SILENT: 1.0,
    WindSpeed.LEV1: 2.0,
    WindSpeed.LEV2: 3.0,
    WindSpeed.LEV3: 4.0,
    WindSpeed.LEV4: 5.0,
    WindSpeed.LEV5: 6.0,
    WindSpeed.AUTO: 7.0,
}

_SPEEDS_BY_SCALE = {int(value): speed for speed, value in _SCALE.items()}


def speed_to_fan_speed(speed: WindSpeed | None) -> FanSpeed | None:
    """Percent/auto form of a fan level; None for unknown codes."""
    if speed is WindSpeed.AUTO:
        return FanSpeed.automatic()
    percent = _PERCENTS.get(speed) if speed is not None else None
    if percent is None:
        return None
    return FanSpeed.manual(percent)


def fan_speed_to_speed(fan_speed: FanSpeed) -> WindSpeed:
    """
    Fan level for a percent/auto value.

    Bands: [0,10) SILENT, [10,30) LEV1, [30,50) LEV2, [50,70) LEV3,
    [70,90) LEV4, [90,100] LEV5.
    """
    if fan_speed.auto:
        return WindSpeed.AUTO
    for lower, speed in _BANDS:
        if fan_speed.percent >= lower:
            return speed
    return WindSpeed.SILENT


def fan_speed_to_auto_mode(fan_speed: FanSpeed) -> AutoModeWindSpeed:
    """Auto-mode fan setting: AUTO when auto or at least 50 %, else SILENT."""
    if fan_speed.auto or fan_speed.percent >= AUTO_MODE_THRESHOLD:
        return AutoModeWindSpeed.AUTO
    return AutoModeWindSpeed.SILENT


def speed_to_scale(speed: WindSpeed | None) -> float | None:
    """Legacy 1.0-7.0 scale value of a fan level; None for unknown codes."""
    if speed is None:
        return None
    return _SCALE.get(speed)


def scale_to_speed(scale: float) -> WindSpeed:
    """Fan level for a legacy scale value; anything outside 1-6 is AUTO."""
    return _SPEEDS_BY_SCALE.get(int(scale), WindSpeed.AUTO)


def scale_to_auto_mode(scale: float) -> AutoModeWindSpeed:
    # Threshold is on the 0-100 range even though the scale tops out at 7
    if scale < AUTO_MODE_THRESHOLD:
        return AutoModeWindSpeed.SILENT
    return AutoModeWindSpeed.AUTO


def scale_constraints() -> ValueConstraints:
    """Constraints of the legacy rotation-speed scale."""
    return ValueConstraints(min=0.0, max=7.0, step=1.0)
