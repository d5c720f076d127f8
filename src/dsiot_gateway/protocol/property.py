"""Property tree model for DSIOT payloads.

A payload (``pc``) is a tree of named nodes. Internal nodes carry a
``pch`` list of children; leaves carry a value (``pv``) and, on reads,
a metadata block (``md``) describing how to decode it:

    {"pn": "e_3001", "pch": [
        {"pn": "p_02", "pv": "31",
         "md": {"pt": "b", "st": 245, "mi": "24", "mx": "40"}}
    ]}

Metadata is never sent back on writes.
"""

import copy
from collections.abc import Sequence
from enum import Enum
from typing import Any

from dsiot_gateway.protocol.codec import decode_range, decode_step, effective_coefficient

# JSON value of a leaf: hex string, integer, None, list of str/int or object
PropValue = Any


class PropertyType(str, Enum):
    """Metadata type tags ("pt" field of "md")."""

    INTEGER = "i"
    STRING = "s"
    BINARY = "b"
    OBJECT = "o"
    STRING_LIST = "l<s>"
    INTEGER_LIST = "l<i>"
    UNDEFINED = "undefined"


class BinaryStep:
    """Step-scaled binary metadata: packed integer times a coefficient."""

    def __init__(self, step: int, min_hex: str, max_hex: str):
        self.step = step
        self.min = min_hex
        self.max = max_hex

    @property
    def coefficient(self) -> float:
        """Raw step coefficient (0 when the base digit is 0)."""
        return decode_step(self.step)

    @property
    def effective_coefficient(self) -> float:
        """Coefficient used for scaling; unscaled leaves use 1."""
        return effective_coefficient(self.step)

    def range(self) -> tuple[float, float]:
        """Inclusive (min, max) physical range."""
        return decode_range(self.min, self.max, self.step)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BinaryStep):
            return NotImplemented
        return (self.step, self.min, self.max) == (other.step, other.min, other.max)

    def __repr__(self) -> str:
        return f"BinaryStep(step=0x{self.step:02X}, min={self.min!r}, max={self.max!r})"


class BinaryEnum:
    """Enum-coded binary metadata; ``max`` fixes the encoded width."""

    def __init__(self, max_hex: str):
        self.max = max_hex

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BinaryEnum):
            return NotImplemented
        return self.max == other.max

    def __repr__(self) -> str:
        return f"BinaryEnum(max={self.max!r})"


class BinaryString:
    """Hex-packed UTF-8 string metadata."""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BinaryString)

    def __repr__(self) -> str:
        return "BinaryString()"


BinaryKind = BinaryStep | BinaryEnum | BinaryString


class Metadata:
    """
    Decoding metadata of a leaf.

    Attributes:
        type: Metadata type tag
        binary: Binary kind (only for ``PropertyType.BINARY``)
    """

    def __init__(self, type: PropertyType = PropertyType.UNDEFINED, binary: BinaryKind | None = None):
        self.type = type
        self.binary = binary

    @classmethod
    def undefined(cls) -> "Metadata":
        return cls(PropertyType.UNDEFINED)

    @classmethod
    def step(cls, step: int, min_hex: str, max_hex: str) -> "Metadata":
        return cls(PropertyType.BINARY, BinaryStep(step, min_hex, max_hex))

    @classmethod
    def enum(cls, max_hex: str) -> "Metadata":
        return cls(PropertyType.BINARY, BinaryEnum(max_hex))

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Metadata":
        """
        Parse an ``md`` block.

        Binary metadata is classified by the keys present: ``st``, ``mi``
        and ``mx`` make a step, ``mx`` alone an enum, anything else a raw
        string. Missing or unrecognised blocks become undefined metadata.
        """
        if not isinstance(data, dict):
            return cls.undefined()

        try:
            pt = PropertyType(data.get("pt"))
        except ValueError:
            return cls.undefined()

        if pt is not PropertyType.BINARY:
            return cls(pt)

        if all(key in data for key in ("st", "mi", "mx")):
            return cls.step(int(data["st"]), str(data["mi"]), str(data["mx"]))
        if "mx" in data:
            return cls.enum(str(data["mx"]))
        return cls(PropertyType.BINARY, BinaryString())

    def to_dict(self) -> dict[str, Any] | None:
        """Serialize back to an ``md`` block (None for undefined metadata)."""
        if self.type is PropertyType.UNDEFINED:
            return None
        result: dict[str, Any] = {"pt": self.type.value}
        if isinstance(self.binary, BinaryStep):
            result.update({"st": self.binary.step, "mi": self.binary.min, "mx": self.binary.max})
        elif isinstance(self.binary, BinaryEnum):
            result["mx"] = self.binary.max
        return result

    @property
    def is_step(self) -> bool:
        return isinstance(self.binary, BinaryStep)

    @property
    def is_enum(self) -> bool:
        return isinstance(self.binary, BinaryEnum)

    @property
    def is_binary_string(self) -> bool:
        return isinstance(self.binary, BinaryString)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Metadata):
            return NotImplemented
        return self.type is other.type and self.binary == other.binary

    def __repr__(self) -> str:
        if self.binary is not None:
            return f"Metadata({self.type.name}, {self.binary!r})"
        return f"Metadata({self.type.name})"


class Property:
    """Base class for tree nodes."""

    name: str

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Property":
        """
        Build a node (recursively) from its wire form.

        Raises:
            ValueError: If the node has no ``pn`` name
        """
        if not isinstance(data, dict) or "pn" not in data:
            raise ValueError(f"Property node without name: {data!r}")

        name = str(data["pn"])
        if "pch" in data:
            children = [Property.from_dict(child) for child in data["pch"] or []]
            return Tree(name, children)
        return Leaf(name, data.get("pv"), Metadata.from_dict(data.get("md")))

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError


class Leaf(Property):
    """A named value with its decoding metadata."""

    def __init__(self, name: str, value: PropValue = None, metadata: Metadata | None = None):
        self.name = name
        self.value = value
        self.metadata = metadata if metadata is not None else Metadata.undefined()

    def to_dict(self) -> dict[str, Any]:
        # Metadata is read-only; writes carry name and value only
        return {"pn": self.name, "pv": copy.deepcopy(self.value)}

    def __repr__(self) -> str:
        return f"Leaf(name={self.name!r}, value={self.value!r}, metadata={self.metadata!r})"


class Tree(Property):
    """A named, ordered list of child nodes."""

    def __init__(self, name: str, children: list[Property] | None = None):
        self.name = name
        self.children: list[Property] = children if children is not None else []

    def find(self, name: str) -> Property | None:
        """Return the first child called ``name`` (tree or leaf)."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def push(self, child: Property) -> Property:
        """Append a child and return it."""
        self.children.append(child)
        return child

    def get_path(self, path: Sequence[str]) -> Property | None:
        """
        Walk ``path`` below this node.

        Returns:
            The node at the end of the path, or None if any segment is
            missing or an intermediate segment is a leaf.
        """
        node: Property = self
        for segment in path:
            if not isinstance(node, Tree):
                return None
            found = node.find(segment)
            if found is None:
                return None
            node = found
        return node

    def set_path(self, path: Sequence[str], value: PropValue) -> Leaf:
        """
        Store ``value`` at ``path``, creating intermediate trees as needed.

        An existing terminal leaf is updated in place; otherwise a new leaf
        with undefined metadata is appended.

        Args:
            path: Segment names; the last one names the leaf
            value: Wire value to store

        Returns:
            The updated or created leaf

        Raises:
            ValueError: If the path is empty, an intermediate segment is a
                leaf or the terminal segment names a tree
        """
        if not path:
            raise ValueError("Property path must not be empty")

        node = self
        for segment in path[:-1]:
            child = node.find(segment)
            if child is None:
                child = node.push(Tree(segment))
            if not isinstance(child, Tree):
                raise ValueError(f"Cannot descend into leaf {segment!r}")
            node = child

        terminal = path[-1]
        existing = node.find(terminal)
        if isinstance(existing, Leaf):
            existing.value = value
            return existing
        if isinstance(existing, Tree):
            raise ValueError(f"Cannot overwrite tree {terminal!r} with a value")

        leaf = Leaf(terminal, value)
        node.push(leaf)
        return leaf

    def to_dict(self) -> dict[str, Any]:
        return {"pn": self.name, "pch": [child.to_dict() for child in self.children]}

    def __repr__(self) -> str:
        return f"Tree(name={self.name!r}, children={self.children!r})"
