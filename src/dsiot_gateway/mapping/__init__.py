"""Protocol-agnostic value mappings (mode, fan speed, swing)."""

from dsiot_gateway.mapping import fan, mode, swing

__all__ = ["fan", "mode", "swing"]
