"""Tests for the input node model."""

from collections import OrderedDict
from decimal import Decimal

import pytest

from array_to_xml.tree.nodes import (
    ATTR_KEY,
    CDATA_KEY,
    VALUE_KEY,
    PlainContainer,
    Scalar,
    TaggedContainer,
    classify,
    is_scalar,
    render_scalar,
)


class TestScalarRendering:
    """Test scalar detection and text rendering."""

    @pytest.mark.parametrize("value", [None, "text", b"raw", True, 0, 1.5, Decimal("2.50")])
    def test_is_scalar(self, value):
        """Test scalar value types."""
        assert is_scalar(value) is True

    @pytest.mark.parametrize("value", [{}, [], (), set(), object()])
    def test_is_not_scalar(self, value):
        """Test container and arbitrary values."""
        assert is_scalar(value) is False

    def test_render_scalar(self):
        """Test text rendering of each scalar type."""
        assert render_scalar(None) is None
        assert render_scalar(True) == "1"
        assert render_scalar(False) == ""
        assert render_scalar(42) == "42"
        assert render_scalar(1.5) == "1.5"
        assert render_scalar(Decimal("2.50")) == "2.50"
        assert render_scalar("A&B") == "A&B"
        assert render_scalar(b"caf\xc3\xa9") == "café"

    def test_render_invalid_bytes(self):
        """Test undecodable bytes are replaced instead of raising."""
        assert render_scalar(b"\xff") == "\ufffd"

    def test_scalar_node(self):
        """Test Scalar exposes rendered text and raw value."""
        node = Scalar(7)
        assert node.text == "7"
        assert node.to_raw() == 7


class TestClassify:
    """Test decoding raw values into input nodes."""

    def test_scalars(self):
        """Test scalar values decode as Scalar."""
        assert classify("x") == Scalar("x")
        assert classify(None) == Scalar(None)

    def test_plain_mapping(self):
        """Test mappings without @value decode as plain containers in order."""
        node = classify(OrderedDict([("b", 1), ("a", 2)]))

        assert isinstance(node, PlainContainer)
        assert [key for key, _ in node.items()] == ["b", "a"]
        assert len(node) == 2

    def test_sequence_uses_indices(self):
        """Test lists and tuples are keyed by index."""
        node = classify(["a", "b"])

        assert isinstance(node, PlainContainer)
        assert list(node.items()) == [(0, Scalar("a")), (1, Scalar("b"))]
        assert classify(("x",)) == PlainContainer(((0, "x"),))

    def test_unsupported_values_are_empty(self):
        """Test other values decode as empty containers."""
        assert classify({1, 2}) == PlainContainer()
        assert classify(object()) == PlainContainer()

    def test_nodes_pass_through(self):
        """Test already classified nodes are returned unchanged."""
        node = TaggedContainer(Scalar("v"))
        assert classify(node) is node

    def test_tagged_scalar(self):
        """Test a mapping with @value, @cdata and @attr."""
        node = classify({
            VALUE_KEY: "A&B",
            CDATA_KEY: True,
            ATTR_KEY: {"id": "5", "type": "x"},
        })

        assert isinstance(node, TaggedContainer)
        assert node.has_scalar_value is True
        assert node.value == Scalar("A&B")
        assert node.cdata is True
        assert node.attributes == (("id", "5"), ("type", "x"))
        assert node.discarded_keys == ()

    @pytest.mark.parametrize("flag", [1, "true", "yes", None, False])
    def test_cdata_requires_exact_true(self, flag):
        """Test only the boolean True enables CDATA."""
        assert classify({VALUE_KEY: "x", CDATA_KEY: flag}).cdata is False

    @pytest.mark.parametrize("attrs", ["id=5", ["id"], None, 5])
    def test_non_mapping_attributes_ignored(self, attrs):
        """Test @attr is only used when it is a mapping."""
        assert classify({VALUE_KEY: "x", ATTR_KEY: attrs}).attributes == ()

    def test_tagged_container_value(self):
        """Test @value holding a nested container."""
        node = classify({VALUE_KEY: {"child": "c"}})

        assert node.has_scalar_value is False
        assert isinstance(node.value, PlainContainer)

    def test_sibling_keys_are_discarded(self):
        """Test keys next to @value are recorded as discarded."""
        node = classify({"extra": 1, VALUE_KEY: "v", "other": 2})

        assert isinstance(node, TaggedContainer)
        assert node.discarded_keys == ("extra", "other")


class TestWireForm:
    """Test conversion back to the reserved-key form."""

    def test_plain_to_raw(self):
        """Test plain containers re-emit nested raw values."""
        raw = {"a": 1, "b": {"c": [1, 2]}}
        assert classify(raw).to_raw() == {"a": 1, "b": {"c": {0: 1, 1: 2}}}

    def test_tagged_to_raw(self):
        """Test tagged containers re-emit only set metadata."""
        assert TaggedContainer(Scalar("v")).to_raw() == {VALUE_KEY: "v"}
        assert TaggedContainer(
            Scalar("v"), cdata=True, attributes=(("id", "1"),)
        ).to_raw() == {VALUE_KEY: "v", CDATA_KEY: True, ATTR_KEY: {"id": "1"}}

    def test_classify_round_trip(self):
        """Test decoding the re-emitted form yields an equal node."""
        node = TaggedContainer(Scalar("v"), cdata=True, attributes=(("id", "1"),))
        assert classify(node.to_raw()) == node

    def test_as_plain_uses_source_entries(self):
        """Test a tagged mapping viewed as plain entries keeps every raw key."""
        raw = {VALUE_KEY: "v", "extra": 1}
        plain = classify(raw).as_plain()

        assert plain.entries == ((VALUE_KEY, "v"), ("extra", 1))

    def test_as_plain_without_source(self):
        """Test constructed tagged nodes are viewed through their wire form."""
        plain = TaggedContainer(Scalar("v"), cdata=True).as_plain()
        assert plain.entries == ((VALUE_KEY, "v"), (CDATA_KEY, True))
