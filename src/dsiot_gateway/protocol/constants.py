"""Protocol constants for DSIOT communication."""

from enum import IntEnum

# ============================================================================
# Endpoints and Routes
# ============================================================================

MULTIREQ_PATH = "/dsiot/multireq"

STATUS_ROUTE = "/dsiot/edge/adr_0100.dgc_status"
OUTDOOR_ROUTE = "/dsiot/edge/adr_0200.dgc_status"
WRITE_ROUTE = STATUS_ROUTE
WRITE_ROOT = "dgc_status"

READ_FILTER = "?filter=pv,md"

INFO_ADAPTER_ROUTE = "/dsiot/edge.adp_i"
INFO_DEVICE_ROUTE = "/dsiot/edge.adp_d"

# ============================================================================
# Operations and Status Codes
# ============================================================================


class OpCode(IntEnum):
    """Request operation codes."""

    READ = 2
    WRITE = 3


RSC_OK_PREFIX = 200  # rsc // 10 must equal this (2000-2009)

# ============================================================================
# Discovery
# ============================================================================

DISCOVERY_PAYLOAD = b"DAIKIN_UDP/common/basic_info"
DISCOVERY_LISTEN_PORT = 30000
DISCOVERY_DEVICE_PORT = 30050
DISCOVERY_BUFFER_SIZE = 2048

# ============================================================================
# Domain Codes
# ============================================================================


class _CodeEnum(IntEnum):
    """Device code enum resolving undocumented values to UNKNOWN."""

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN  # type: ignore[attr-defined]


class Mode(_CodeEnum):
    """HVAC operating mode."""

    FAN = 0
    HEATING = 1
    COOLING = 2
    AUTO = 3
    DEHUMIDIFY = 5

    UNKNOWN = 255


class WindSpeed(_CodeEnum):
    """Fan speed setting."""

    SILENT = 0x0B
    LEV1 = 0x03
    LEV2 = 0x04
    LEV3 = 0x05
    LEV4 = 0x06
    LEV5 = 0x07
    AUTO = 0x0A

    UNKNOWN = 0xFF


class AutoModeWindSpeed(_CodeEnum):
    """Fan speed setting used while in auto mode."""

    SILENT = 0x0B
    AUTO = 0x0A

    UNKNOWN = 0xFF


class VerticalDirection(_CodeEnum):
    """Vertical air direction."""

    TOP_MOST = 0x01
    TOP = 0x02
    CENTER = 0x03
    BOTTOM = 0x04
    BOTTOM_MOST = 0x05

    SWING = 0x0F
    AUTO = 0x10

    NICE = 0x17

    UNKNOWN = 0xFF


class HorizontalDirection(_CodeEnum):
    """Horizontal air direction."""

    LEFT_MOST = 0x02
    LEFT = 0x03
    LEFT_CENTER = 0x04
    CENTER = 0x05
    RIGHT_CENTER = 0x06
    RIGHT = 0x07
    RIGHT_MOST = 0x08

    SWING = 0x0F
    AUTO = 0x10

    UNKNOWN = 0xFF


