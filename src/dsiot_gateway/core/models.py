"""API request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConstraintsModel(BaseModel):
    """Valid range of a step-scaled value."""

    min: float = Field(..., description="Minimum allowed value")
    max: float = Field(..., description="Maximum allowed value")
    step: float = Field(..., gt=0, description="Smallest increment")

    model_config = ConfigDict(json_schema_extra={"example": {"min": 18.0, "max": 32.0, "step": 0.5}})


class FanModel(BaseModel):
    """Fan speed in its percent, auto and legacy-scale forms."""

    percent: int | None = Field(None, ge=0, le=100, description="Fan speed percentage (None if unknown)")
    auto: bool = Field(False, description="Whether the fan runs in auto mode")
    scale: float | None = Field(None, description="Legacy rotation speed (1-7, 7 is auto)")
    speed: str | None = Field(None, description="Raw fan level name")

    model_config = ConfigDict(
        json_schema_extra={"example": {"percent": 60, "auto": False, "scale": 4.0, "speed": "LEV3"}}
    )


class StatusResponse(BaseModel):
    """Response model for GET /api/status."""

    timestamp: datetime = Field(..., description="Time the status was read from the device")
    power: bool | None = Field(None, description="Whether the unit is on")
    mode: str | None = Field(None, description="Operating mode (FAN, HEATING, COOLING, AUTO, DEHUMIDIFY)")
    current_state: str = Field(..., description="What the unit is doing (INACTIVE, IDLE, HEATING, COOLING)")
    target_state: str | None = Field(None, description="Requested climate state (AUTO, HEAT, COOL)")
    indoor_temperature: float | None = Field(None, description="Room temperature in °C")
    indoor_humidity: float | None = Field(None, description="Room relative humidity in %")
    outdoor_temperature: float | None = Field(None, description="Outdoor temperature in °C")
    cooling_temperature: float | None = Field(None, description="Cooling target in °C")
    heating_temperature: float | None = Field(None, description="Heating target in °C")
    auto_temperature: float | None = Field(None, description="Auto mode offset in °C (-5 to +5)")
    fan: FanModel = Field(..., description="Fan speed")
    auto_fan_speed: str | None = Field(None, description="Fan setting used in auto mode (SILENT, AUTO)")
    swing: bool = Field(False, description="Whether vertical swing is enabled")
    vertical_direction: str | None = Field(None, description="Vertical air direction")
    horizontal_direction: str | None = Field(None, description="Horizontal air direction")
    constraints: dict[str, ConstraintsModel] = Field(
        default_factory=dict, description="Ranges of the temperature targets, keyed by field"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "timestamp": "2026-01-13T10:30:00",
                "power": True,
                "mode": "COOLING",
                "current_state": "COOLING",
                "target_state": "COOL",
                "indoor_temperature": 20.0,
                "indoor_humidity": 50.0,
                "outdoor_temperature": 3.8,
                "cooling_temperature": 24.5,
                "heating_temperature": 25.0,
                "auto_temperature": 0.0,
                "fan": {"percent": None, "auto": True, "scale": 7.0, "speed": "AUTO"},
                "auto_fan_speed": "AUTO",
                "swing": False,
                "vertical_direction": "AUTO",
                "horizontal_direction": "AUTO",
                "constraints": {"cooling_temperature": {"min": 18.0, "max": 32.0, "step": 0.5}},
            }
        }
    )


class StatusUpdateRequest(BaseModel):
    """Request model for POST /api/status.

    Only the fields that are set are written to the device.
    """

    power: bool | None = Field(None, description="Turn the unit on or off")
    mode: str | None = Field(None, description="Operating mode name")
    cooling_temperature: float | None = Field(None, description="Cooling target in °C")
    heating_temperature: float | None = Field(None, description="Heating target in °C")
    auto_temperature: float | None = Field(None, description="Auto mode offset in °C")
    fan_percent: int | None = Field(None, ge=0, le=100, description="Manual fan speed percentage")
    fan_auto: bool | None = Field(None, description="Switch the fan to auto")
    swing: bool | None = Field(None, description="Enable or disable swing")

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str | None) -> str | None:
        """Normalize mode names to upper case."""
        if v is None:
            return v
        return v.strip().upper()

    model_config = ConfigDict(
        json_schema_extra={"example": {"power": True, "mode": "COOLING", "cooling_temperature": 24.0}}
    )


class StatusUpdateResponse(BaseModel):
    """Response model for a successful status update."""

    success: bool = Field(True, description="Operation success status")
    written: list[str] = Field(default_factory=list, description="Status fields sent to the device")
    timestamp: datetime = Field(default_factory=datetime.now, description="Operation timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "written": ["power", "mode"],
                "timestamp": "2026-01-13T10:30:00",
            }
        }
    )


class DeviceInfoResponse(BaseModel):
    """Response model for GET /api/info."""

    name: str = Field(..., description="User-assigned device name")
    mac: str = Field(..., description="Adapter MAC address")
    version: str = Field(..., description="Adapter firmware version")
    edid: int = Field(..., ge=0, description="Equipment identifier")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "display_name",
                "mac": "00005E005342",
                "version": "2.7.0",
                "edid": 19088743,
            }
        }
    )


class ErrorResponse(BaseModel):
    """Response model for errors."""

    success: bool = Field(False, description="Operation success status")
    error: str = Field(..., description="Error message")
    detail: str | None = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.now, description="Error timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": "Device rejected request",
                "detail": "Response rejected: /dsiot/edge/adr_0100.dgc_status=4000",
                "timestamp": "2026-01-13T10:30:00",
            }
        }
    )


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status (healthy/degraded/unhealthy)")
    device_reachable: bool = Field(..., description="Whether the last exchange with the device succeeded")
    device_host: str | None = Field(None, description="Configured device address")
    last_update: datetime | None = Field(None, description="Last successful status read")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "device_reachable": True,
                "device_host": "192.168.1.10",
                "last_update": "2026-01-13T10:30:00",
            }
        }
    )
