"""Shared test fixtures."""

import copy
import json
from pathlib import Path

import pytest

from dsiot_gateway.protocol.status import DeviceStatus

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    """Load a captured response body from tests/fixtures."""
    return json.loads((FIXTURES / name).read_text())


@pytest.fixture
def status_body() -> dict:
    """Status read response: unit off, cooling, fan auto."""
    return copy.deepcopy(load_fixture("status.json"))


@pytest.fixture
def info_body() -> dict:
    """Adapter and device info read response."""
    return copy.deepcopy(load_fixture("info.json"))


@pytest.fixture
def status(status_body) -> DeviceStatus:
    """Parsed status from the status fixture."""
    return DeviceStatus.from_dict(status_body)
