"""Unit tests for API endpoints."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from dsiot_gateway.api.dependencies import app_state
from dsiot_gateway.core.cache import StatusCache
from dsiot_gateway.main import app
from dsiot_gateway.protocol.constants import AutoModeWindSpeed, Mode, VerticalDirection, WindSpeed
from dsiot_gateway.protocol.envelope import EnvelopeRejectedError, Response
from dsiot_gateway.protocol.handler import ProtocolHandler
from dsiot_gateway.protocol.info import DeviceInfo
from dsiot_gateway.protocol.status import DeviceStatus


@pytest.fixture
def mock_app_state(status):
    """Set up mock app state for testing."""
    # Save original state (set by lifespan)
    orig_cache = app_state.cache
    orig_handler = app_state.handler

    cache = StatusCache()

    handler = MagicMock(spec=ProtocolHandler)
    handler.reachable = True
    handler.get_status = AsyncMock(return_value=status)
    handler.update = AsyncMock(return_value=True)
    handler.get_info = AsyncMock(
        return_value=DeviceInfo(name="display_name", mac="00005E005342", version="2.7.0", edid=19088743)
    )

    app_state.cache = cache
    app_state.handler = handler

    yield {"cache": cache, "handler": handler, "status": status}

    # Restore original state for lifespan teardown
    app_state.cache = orig_cache
    app_state.handler = orig_handler


@pytest.fixture
def client():
    """Create test client (lifespan runs, state is replaced per test)."""
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def rejected() -> EnvelopeRejectedError:
    return EnvelopeRejectedError([Response("/dsiot/edge/adr_0100.dgc_status", 4000)])


class TestRootEndpoint:
    """Tests for GET / endpoint."""

    def test_root(self, client, mock_app_state):
        """Test root endpoint returns app info."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "DSIOT Gateway"
        assert "version" in data
        assert data["status"] == "running"


class TestHealthEndpoint:
    """Tests for GET /health endpoint."""

    def test_health_not_initialized(self, client):
        """Test health when app is not initialized."""
        orig_handler = app_state.handler
        app_state.handler = None
        try:
            response = client.get("/health")
        finally:
            app_state.handler = orig_handler

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["device_reachable"] is False

    def test_health_with_status(self, client, mock_app_state, status):
        """Test healthy once a status has been cached."""
        mock_app_state["cache"].put(status)

        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["device_reachable"] is True
        assert data["last_update"] is not None

    def test_health_degraded(self, client, mock_app_state):
        """Test degraded while reachable but nothing cached."""
        data = client.get("/health").json()

        assert data["status"] == "degraded"

    def test_health_unreachable(self, client, mock_app_state):
        """Test unhealthy after a failed exchange."""
        mock_app_state["handler"].reachable = False

        data = client.get("/health").json()

        assert data["status"] == "unhealthy"
        assert data["device_reachable"] is False


class TestGetStatus:
    """Tests for GET /api/status."""

    def test_status(self, client, mock_app_state):
        """Test the mapped status."""
        response = client.get("/api/status")

        assert response.status_code == 200
        data = response.json()
        assert data["power"] is False
        assert data["mode"] == "COOLING"
        assert data["current_state"] == "COOLING"
        assert data["target_state"] == "COOL"
        assert data["indoor_temperature"] == pytest.approx(20.0)
        assert data["outdoor_temperature"] == pytest.approx(19.0)
        assert data["cooling_temperature"] == pytest.approx(24.5)
        assert data["fan"] == {"percent": None, "auto": True, "scale": 7.0, "speed": "AUTO"}
        assert data["auto_fan_speed"] == "AUTO"
        assert data["swing"] is False
        assert data["constraints"]["cooling_temperature"] == {"min": 18.0, "max": 32.0, "step": 0.5}
        assert data["constraints"]["auto_temperature"] == {"min": -5.0, "max": 5.0, "step": 0.5}

    def test_status_manual_fan(self, client, mock_app_state):
        """Test manual fan levels report a percentage."""
        mock_app_state["status"].fan_speed.set_value(WindSpeed.LEV2)

        data = client.get("/api/status").json()

        assert data["fan"] == {"percent": 40, "auto": False, "scale": 3.0, "speed": "LEV2"}

    def test_status_unreachable(self, client, mock_app_state):
        """Test transport failures map to 503."""
        mock_app_state["handler"].get_status.side_effect = httpx.ConnectError("refused")

        response = client.get("/api/status")

        assert response.status_code == 503

    def test_status_rejected(self, client, mock_app_state):
        """Test rejected envelopes map to 502."""
        mock_app_state["handler"].get_status.side_effect = rejected()

        response = client.get("/api/status")

        assert response.status_code == 502
        assert "4000" in response.json()["detail"]


class TestUpdateStatus:
    """Tests for POST /api/status."""

    def test_power_and_mode(self, client, mock_app_state):
        """Test power and mode are written."""
        response = client.post("/api/status", json={"power": True, "mode": "heating"})

        assert response.status_code == 200
        assert response.json()["written"] == ["power", "mode"]
        written = mock_app_state["handler"].update.await_args.args[0]
        assert written.power.get_numeric() == 1.0
        assert written.mode.get_enum() is Mode.HEATING

    def test_power_only(self, client, mock_app_state):
        """Test a power change writes only the power field."""
        response = client.post("/api/status", json={"power": True})

        assert response.status_code == 200
        assert response.json()["written"] == ["power"]
        written = mock_app_state["handler"].update.await_args.args[0]
        assert written.mode.value == "0200"

    def test_power_with_unknown_device_mode(self, client, mock_app_state):
        """Test a power change is refused while the device reports an undocumented mode."""
        mock_app_state["status"].mode.value = "0700"

        response = client.post("/api/status", json={"power": True})

        assert response.status_code == 400
        mock_app_state["handler"].update.assert_not_awaited()

    def test_target_temperature(self, client, mock_app_state):
        """Test target temperatures are written."""
        response = client.post("/api/status", json={"cooling_temperature": 22.0})

        assert response.status_code == 200
        written = mock_app_state["handler"].update.await_args.args[0]
        assert written.cooling_temperature.get_numeric() == pytest.approx(22.0)

    def test_target_not_reported(self, client, mock_app_state, status_body):
        """Test writing a target the device does not report is rejected with 400."""
        # Drop e_3001/p_1F (auto target)
        status_body["responses"][0]["pc"]["pch"][0]["pch"][2]["pch"].pop(3)
        mock_app_state["handler"].get_status.return_value = DeviceStatus.from_dict(status_body)

        response = client.post("/api/status", json={"auto_temperature": 24.0})

        assert response.status_code == 400
        assert "auto_temperature" in response.json()["detail"]
        mock_app_state["handler"].update.assert_not_awaited()

    def test_target_out_of_range(self, client, mock_app_state):
        """Test out-of-range targets are rejected with 400."""
        response = client.post("/api/status", json={"cooling_temperature": 40.0})

        assert response.status_code == 400
        mock_app_state["handler"].update.assert_not_awaited()

    def test_unknown_mode(self, client, mock_app_state):
        """Test unknown mode names are rejected with 400."""
        response = client.post("/api/status", json={"mode": "turbo"})

        assert response.status_code == 400

    def test_fan_percent(self, client, mock_app_state):
        """Test fan percentages map to levels."""
        response = client.post("/api/status", json={"fan_percent": 35})

        assert response.status_code == 200
        written = mock_app_state["handler"].update.await_args.args[0]
        assert written.fan_speed.get_enum() is WindSpeed.LEV2
        assert written.auto_fan_speed.get_enum() is AutoModeWindSpeed.SILENT

    def test_fan_percent_invalid(self, client, mock_app_state):
        """Test percentages outside 0-100 fail validation."""
        response = client.post("/api/status", json={"fan_percent": 150})

        assert response.status_code == 422

    def test_swing(self, client, mock_app_state):
        """Test swing sets both directions."""
        response = client.post("/api/status", json={"swing": True})

        assert response.status_code == 200
        assert response.json()["written"] == ["vertical_direction", "horizontal_direction"]
        written = mock_app_state["handler"].update.await_args.args[0]
        assert written.vertical_direction.get_enum() is VerticalDirection.SWING

    def test_write_rejected(self, client, mock_app_state):
        """Test rejected writes map to 502."""
        mock_app_state["handler"].update.side_effect = rejected()

        response = client.post("/api/status", json={"power": True})

        assert response.status_code == 502

    def test_write_unreachable(self, client, mock_app_state):
        """Test transport failures during writes map to 503."""
        mock_app_state["handler"].update.side_effect = httpx.ReadTimeout("timeout")

        response = client.post("/api/status", json={"power": True})

        assert response.status_code == 503


class TestGetInfo:
    """Tests for GET /api/info."""

    def test_info(self, client, mock_app_state):
        """Test device info is returned."""
        response = client.get("/api/info")

        assert response.status_code == 200
        assert response.json() == {
            "name": "display_name",
            "mac": "00005E005342",
            "version": "2.7.0",
            "edid": 19088743,
        }

    def test_info_unreachable(self, client, mock_app_state):
        """Test transport failures map to 503."""
        mock_app_state["handler"].get_info.side_effect = httpx.ConnectError("refused")

        assert client.get("/api/info").status_code == 503


def test_status_timestamp_uses_cache(client, mock_app_state, status):
    """Test the status timestamp is the cache's last update."""
    mock_app_state["cache"].put(status)
    expected = mock_app_state["cache"].last_update

    data = client.get("/api/status").json()

    assert datetime.fromisoformat(data["timestamp"]) == expected
