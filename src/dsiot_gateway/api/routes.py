"""API route handlers."""

import logging
from datetime import datetime

import httpx
from fastapi import APIRouter, Depends, HTTPException

from dsiot_gateway.api.dependencies import get_cache, get_handler
from dsiot_gateway.control.state import StateTransition
from dsiot_gateway.control.temperature import TemperatureTarget
from dsiot_gateway.core.cache import StatusCache
from dsiot_gateway.core.models import (
    ConstraintsModel,
    DeviceInfoResponse,
    ErrorResponse,
    FanModel,
    StatusResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from dsiot_gateway.mapping import fan, mode, swing
from dsiot_gateway.protocol.constants import Mode
from dsiot_gateway.protocol.envelope import EnvelopeRejectedError
from dsiot_gateway.protocol.handler import ProtocolHandler
from dsiot_gateway.protocol.info import DeviceInfo
from dsiot_gateway.protocol.item import UnsupportedWriteError
from dsiot_gateway.protocol.status import DeviceStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_DEVICE_ERRORS = {
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}

_TARGET_FIELDS = ("cooling_temperature", "heating_temperature", "auto_temperature")


def _name(code) -> str | None:
    return code.name if code is not None else None


def _device_error(e: Exception) -> HTTPException:
    """Translate a device-side failure into an HTTP error."""
    if isinstance(e, EnvelopeRejectedError):
        return HTTPException(status_code=502, detail=f"Device rejected request: {e}")
    if isinstance(e, httpx.HTTPError):
        return HTTPException(status_code=503, detail=f"Device unreachable: {e}")
    return HTTPException(status_code=502, detail=f"Invalid reply from device: {e}")


def _status_response(status: DeviceStatus, timestamp: datetime) -> StatusResponse:
    """Render a status in its mapped, consumer-facing form."""
    current_mode = status.mode.get_enum()
    power = status.power.get_numeric()
    speed = status.fan_speed.get_enum()
    fan_speed = fan.speed_to_fan_speed(speed)

    constraints = {}
    for field in _TARGET_FIELDS:
        limits = getattr(status, field).constraints
        if limits is not None:
            constraints[field] = ConstraintsModel(min=limits.min, max=limits.max, step=limits.step)

    return StatusResponse(
        timestamp=timestamp,
        power=power >= 1.0 if power is not None else None,
        mode=_name(current_mode),
        current_state=mode.to_current_state(current_mode).name,
        target_state=_name(mode.to_target_state(current_mode)),
        indoor_temperature=status.indoor_temperature.get_numeric(),
        indoor_humidity=status.indoor_humidity.get_numeric(),
        outdoor_temperature=status.outdoor_temperature.get_numeric(),
        cooling_temperature=status.cooling_temperature.get_numeric(),
        heating_temperature=status.heating_temperature.get_numeric(),
        auto_temperature=status.auto_temperature.get_numeric(),
        fan=FanModel(
            percent=fan_speed.percent if fan_speed is not None and not fan_speed.auto else None,
            auto=fan_speed.auto if fan_speed is not None else False,
            scale=fan.speed_to_scale(speed),
            speed=_name(speed),
        ),
        auto_fan_speed=_name(status.auto_fan_speed.get_enum()),
        swing=swing.to_enabled(status.vertical_direction.get_enum()),
        vertical_direction=_name(status.vertical_direction.get_enum()),
        horizontal_direction=_name(status.horizontal_direction.get_enum()),
        constraints=constraints,
    )


def _apply_update(status: DeviceStatus, request: StatusUpdateRequest) -> None:
    """
    Apply the requested changes to ``status`` in place.

    Raises:
        ValueError: If a value is out of range or unknown, or a field to
            write was not reported by the device
    """
    if request.power is not None or request.mode is not None:
        transition = StateTransition()
        if request.power is not None:
            transition = transition.turn_on() if request.power else transition.turn_off()
        if request.mode is not None:
            if request.mode not in Mode.__members__ or request.mode == Mode.UNKNOWN.name:
                raise ValueError(f"Unknown mode: {request.mode}")
            transition = transition.mode(Mode[request.mode])
        transition.apply_to_status(status)

    targets = {
        "cooling_temperature": (request.cooling_temperature, TemperatureTarget.cooling),
        "heating_temperature": (request.heating_temperature, TemperatureTarget.heating),
        "auto_temperature": (request.auto_temperature, TemperatureTarget.auto),
    }
    for field, (value, build) in targets.items():
        if value is None:
            continue
        limits = getattr(status, field).constraints
        if limits is not None and not limits.contains(value):
            raise ValueError(f"{field} {value} outside range {limits.min}-{limits.max}")
        build(value).apply_to_status(status)

    if request.fan_auto:
        status.fan_speed.set_value(fan.fan_speed_to_speed(fan.FanSpeed.automatic()))
        status.auto_fan_speed.set_value(fan.fan_speed_to_auto_mode(fan.FanSpeed.automatic()))
    elif request.fan_percent is not None:
        fan_speed = fan.FanSpeed.manual(request.fan_percent)
        status.fan_speed.set_value(fan.fan_speed_to_speed(fan_speed))
        status.auto_fan_speed.set_value(fan.fan_speed_to_auto_mode(fan_speed))

    if request.swing is not None:
        vertical, horizontal = swing.from_enabled(request.swing)
        status.vertical_direction.set_value(vertical)
        status.horizontal_direction.set_value(horizontal)

    unreported = [name for name, item in status.items().items() if item.touched and not item.present]
    if unreported:
        raise ValueError(f"Not reported by device: {', '.join(unreported)}")


@router.get("/status", response_model=StatusResponse, responses=_DEVICE_ERRORS)
async def get_status(
    cache: StatusCache = Depends(get_cache),
    handler: ProtocolHandler = Depends(get_handler),
):
    """Get the current device status."""
    try:
        status = await handler.get_status()
        return _status_response(status, cache.last_update or datetime.now())
    except (httpx.HTTPError, ValueError) as e:
        raise _device_error(e) from None


@router.post(
    "/status",
    response_model=StatusUpdateResponse,
    responses={400: {"model": ErrorResponse}, **_DEVICE_ERRORS},
)
async def update_status(
    request: StatusUpdateRequest,
    handler: ProtocolHandler = Depends(get_handler),
):
    """Change power, mode, targets, fan speed or swing."""
    try:
        status = await handler.get_status()
    except (httpx.HTTPError, ValueError) as e:
        raise _device_error(e) from None

    try:
        _apply_update(status, request)
    except (ValueError, UnsupportedWriteError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    written = status.pending_fields()
    try:
        await handler.update(status)
    except (httpx.HTTPError, ValueError) as e:
        raise _device_error(e) from None

    logger.info("Status update applied: %s", ", ".join(written) or "no changes")
    return StatusUpdateResponse(success=True, written=written)


@router.get("/info", response_model=DeviceInfoResponse, responses=_DEVICE_ERRORS)
async def get_info(
    handler: ProtocolHandler = Depends(get_handler),
):
    """Get the device's name, MAC address, firmware version and EDID."""
    try:
        info: DeviceInfo = await handler.get_info()
    except (httpx.HTTPError, ValueError) as e:
        raise _device_error(e) from None

    return DeviceInfoResponse(name=info.name, mac=info.mac, version=info.version, edid=info.edid)
