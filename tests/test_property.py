"""Unit tests for the property tree model."""

import pytest

from dsiot_gateway.protocol.property import (
    BinaryEnum,
    BinaryStep,
    BinaryString,
    Leaf,
    Metadata,
    Property,
    PropertyType,
    Tree,
)


def make_tree() -> Tree:
    """Create a small status-like tree."""
    return Tree(
        "dgc_status",
        [
            Tree(
                "e_1002",
                [
                    Tree("e_3001", [Leaf("p_01", "0200", Metadata.enum("2F00"))]),
                ],
            )
        ],
    )


class TestMetadata:
    """Tests for metadata classification."""

    def test_step(self):
        """Test st, mi and mx make step metadata."""
        md = Metadata.from_dict({"pt": "b", "st": 245, "mi": "24", "mx": "40"})

        assert md.type is PropertyType.BINARY
        assert md.is_step
        assert md.binary == BinaryStep(245, "24", "40")

    def test_enum(self):
        """Test mx alone makes enum metadata."""
        md = Metadata.from_dict({"pt": "b", "mx": "F80C"})

        assert md.is_enum
        assert md.binary == BinaryEnum("F80C")

    def test_binary_string(self):
        """Test binary metadata without mx is a packed string."""
        md = Metadata.from_dict({"pt": "b"})

        assert md.is_binary_string
        assert md.binary == BinaryString()

    def test_partial_step_is_enum(self):
        """Test st without mi falls back to enum when mx is present."""
        md = Metadata.from_dict({"pt": "b", "st": 1, "mx": "01"})

        assert md.is_enum

    def test_plain_types(self):
        """Test non-binary types carry no binary kind."""
        assert Metadata.from_dict({"pt": "s"}).type is PropertyType.STRING
        assert Metadata.from_dict({"pt": "i"}).type is PropertyType.INTEGER
        assert Metadata.from_dict({"pt": "l<i>"}).type is PropertyType.INTEGER_LIST
        assert Metadata.from_dict({"pt": "s"}).binary is None

    def test_missing_or_unknown(self):
        """Test missing and unrecognised blocks are undefined."""
        assert Metadata.from_dict(None).type is PropertyType.UNDEFINED
        assert Metadata.from_dict({"pt": "zz"}).type is PropertyType.UNDEFINED

    def test_to_dict(self):
        """Test serializing metadata back to an md block."""
        assert Metadata.step(245, "24", "40").to_dict() == {"pt": "b", "st": 245, "mi": "24", "mx": "40"}
        assert Metadata.enum("2F00").to_dict() == {"pt": "b", "mx": "2F00"}
        assert Metadata.undefined().to_dict() is None

    def test_step_coefficients(self):
        """Test raw and effective coefficients of step metadata."""
        assert BinaryStep(0xF5, "24", "40").coefficient == pytest.approx(0.5)
        assert BinaryStep(0x00, "00", "10").coefficient == 0.0
        assert BinaryStep(0x00, "00", "10").effective_coefficient == 1.0
        assert BinaryStep(0xF5, "24", "40").range() == pytest.approx((18.0, 32.0))


class TestPropertyParsing:
    """Tests for Property.from_dict."""

    def test_tree_and_leaf(self):
        """Test nested nodes parse into trees and leaves."""
        node = Property.from_dict(
            {"pn": "e_3001", "pch": [{"pn": "p_02", "pv": "31", "md": {"pt": "b", "st": 245, "mi": "24", "mx": "40"}}]}
        )

        assert isinstance(node, Tree)
        leaf = node.find("p_02")
        assert isinstance(leaf, Leaf)
        assert leaf.value == "31"
        assert leaf.metadata.is_step

    def test_leaf_without_metadata(self):
        """Test leaves without md get undefined metadata."""
        node = Property.from_dict({"pn": "p_01", "pv": 5})

        assert isinstance(node, Leaf)
        assert node.metadata.type is PropertyType.UNDEFINED

    def test_missing_name(self):
        """Test nodes without a name are rejected."""
        with pytest.raises(ValueError):
            Property.from_dict({"pv": "00"})

    def test_empty_children(self):
        """Test an empty pch list still makes a tree."""
        node = Property.from_dict({"pn": "e_1002", "pch": []})

        assert isinstance(node, Tree)
        assert node.children == []


class TestTreeNavigation:
    """Tests for Tree.get_path and Tree.set_path."""

    def test_get_path(self):
        """Test walking to an existing leaf."""
        leaf = make_tree().get_path(["e_1002", "e_3001", "p_01"])

        assert isinstance(leaf, Leaf)
        assert leaf.value == "0200"

    def test_get_path_missing(self):
        """Test missing segments return None."""
        tree = make_tree()

        assert tree.get_path(["e_1002", "e_A002", "p_01"]) is None
        assert tree.get_path(["e_1002", "e_3001", "p_01", "deeper"]) is None

    def test_get_empty_path(self):
        """Test the empty path is the node itself."""
        tree = make_tree()

        assert tree.get_path([]) is tree

    def test_set_path_creates_nodes(self):
        """Test intermediate trees are created on demand."""
        tree = Tree("dgc_status")

        leaf = tree.set_path(["e_1002", "e_A002", "p_01"], "01")

        assert leaf.name == "p_01"
        assert leaf.metadata.type is PropertyType.UNDEFINED
        assert tree.get_path(["e_1002", "e_A002", "p_01"]) is leaf

    def test_set_path_updates_existing(self):
        """Test an existing leaf is updated in place, keeping metadata."""
        tree = make_tree()

        leaf = tree.set_path(["e_1002", "e_3001", "p_01"], "0100")

        assert leaf.value == "0100"
        assert leaf.metadata.is_enum
        assert len(tree.get_path(["e_1002", "e_3001"]).children) == 1

    def test_set_path_shares_prefix(self):
        """Test sibling leaves share their intermediate trees."""
        tree = Tree("dgc_status")
        tree.set_path(["e_1002", "e_3001", "p_01"], "0200")
        tree.set_path(["e_1002", "e_3001", "p_02"], "31")

        assert len(tree.children) == 1
        assert [c.name for c in tree.get_path(["e_1002", "e_3001"]).children] == ["p_01", "p_02"]

    def test_set_then_get(self):
        """Test values stored by set_path are returned by get_path."""
        tree = Tree("root")
        tree.set_path(["a", "b"], [1, 2])

        assert tree.get_path(["a", "b"]).value == [1, 2]

    def test_set_empty_path(self):
        """Test the empty path is rejected."""
        with pytest.raises(ValueError):
            Tree("root").set_path([], "00")

    def test_set_through_leaf(self):
        """Test descending into a leaf is rejected."""
        with pytest.raises(ValueError):
            make_tree().set_path(["e_1002", "e_3001", "p_01", "x"], "00")

    def test_set_over_tree(self):
        """Test a value cannot replace an existing tree."""
        tree = make_tree()

        with pytest.raises(ValueError, match="e_3001"):
            tree.set_path(["e_1002", "e_3001"], "00")

        assert len(tree.get_path(["e_1002"]).children) == 1
        assert isinstance(tree.get_path(["e_1002", "e_3001"]), Tree)


class TestSerialization:
    """Tests for wire serialization."""

    def test_leaf_omits_metadata(self):
        """Test leaves serialize name and value only."""
        leaf = Leaf("p_02", "31", Metadata.step(245, "24", "40"))

        assert leaf.to_dict() == {"pn": "p_02", "pv": "31"}

    def test_tree(self):
        """Test trees serialize their children in order."""
        assert make_tree().to_dict() == {
            "pn": "dgc_status",
            "pch": [{"pn": "e_1002", "pch": [{"pn": "e_3001", "pch": [{"pn": "p_01", "pv": "0200"}]}]}],
        }

    def test_push_then_find(self):
        """Test a pushed child is found by name."""
        tree = Tree("root")
        child = tree.push(Leaf("p_01", "00"))

        assert tree.find("p_01") is child
