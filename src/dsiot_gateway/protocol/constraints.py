"""Value constraint extraction from property metadata.

Consumers that render numeric controls (target temperatures, offsets)
need the allowed range and increment; these come from step metadata.
"""

from dataclasses import dataclass

from dsiot_gateway.protocol.property import BinaryStep, Metadata


@dataclass(frozen=True)
class ValueConstraints:
    """Allowed range and increment of a numeric property."""

    min: float
    max: float
    step: float

    @classmethod
    def from_metadata(cls, metadata: Metadata) -> "ValueConstraints | None":
        """
        Extract constraints from step metadata.

        Returns:
            ValueConstraints for step metadata, None for any other kind
        """
        binary = metadata.binary
        if not isinstance(binary, BinaryStep):
            return None
        minimum, maximum = binary.range()
        return cls(min=minimum, max=maximum, step=binary.effective_coefficient)

    def contains(self, value: float) -> bool:
        """Whether ``value`` lies inside the inclusive range."""
        return self.min <= value <= self.max
