"""Tests for the public encoding API."""

import sys
import xml.etree.ElementTree as ET
from unittest.mock import patch

import pytest

from array_to_xml.api import ArrayToXml, encode, to_xml_string
from array_to_xml.shared import (
    ConfigValidationError,
    DiagnosticSeverity,
    EncoderConfig,
    KeyTransform,
)

DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def parse(xml: str) -> ET.Element:
    return ET.fromstring(xml.encode("utf-8"))


class TestToXmlString:
    """Test the one-call conversion function."""

    def test_end_to_end_example(self):
        """Test nested mapping with numeric keys."""
        xml = to_xml_string({"name": "Jane", "tags": {0: "a", 1: "b"}})

        assert xml == (
            DECLARATION
            + "<root><name>Jane</name><tags><node>a</node><node>b</node></tags></root>\n"
        )

    def test_pretty_output(self):
        """Test indented output."""
        xml = to_xml_string({"a": {"b": "c"}, "d": ""}, EncoderConfig.pretty())

        assert xml == (
            DECLARATION
            + "<root>\n"
            + "  <a>\n"
            + "    <b>c</b>\n"
            + "  </a>\n"
            + "  <d/>\n"
            + "</root>\n"
        )

    def test_empty_input(self):
        """Test empty input produces an empty root."""
        assert to_xml_string({}) == DECLARATION + "<root/>\n"

    def test_numeric_keys_share_node_name(self):
        """Test numeric keys without suffix mode."""
        root = parse(to_xml_string({"0": "a", "1": "b", "2": "c"}))
        assert [child.tag for child in root] == ["node", "node", "node"]

    def test_numeric_keys_with_empty_suffix(self):
        """Test numeric keys with an empty suffix."""
        config = EncoderConfig(numeric_node_suffix="")
        root = parse(to_xml_string({"0": "a", "1": "b", "2": "c"}, config))
        assert [child.tag for child in root] == ["node0", "node1", "node2"]

    def test_cdata_literal(self):
        """Test CDATA content is written without entity escaping."""
        xml = to_xml_string({"note": {"@value": "A&B", "@cdata": True}})

        assert "<note><![CDATA[A&B]]></note>" in xml
        assert parse(xml).find("note").text == "A&B"

    def test_attribute_order(self):
        """Test attributes are written in insertion order."""
        xml = to_xml_string({"item": {"@value": "v", "@attr": {"id": "5", "type": "x"}}})
        assert '<item id="5" type="x">v</item>' in xml

    def test_uppercase_transform(self):
        """Test case folding after sanitization."""
        config = EncoderConfig(transform_keys=KeyTransform.UPPERCASE)
        root = parse(to_xml_string({"user_name": "a", "1st-name": "b"}, config))

        assert root.tag == "ROOT"
        assert [child.tag for child in root] == ["USER_NAME", "_ST-NAME"]

    def test_text_escaping(self):
        """Test markup characters in values are escaped."""
        xml = to_xml_string({"expr": "1 < 2 & 3 > 2"})

        assert "<expr>1 &lt; 2 &amp; 3 &gt; 2</expr>" in xml
        assert parse(xml).find("expr").text == "1 < 2 & 3 > 2"

    def test_round_trip_structure(self):
        """Test valid keys and scalar leaves give an isomorphic tree."""
        data = {"people": {"person": {"first": "Jane", "last": "Doe"}, "count": "1"}}
        root = parse(to_xml_string(data))

        people = root.find("people")
        assert [child.tag for child in people] == ["person", "count"]
        assert [child.tag for child in people.find("person")] == ["first", "last"]
        assert people.find("person/last").text == "Doe"

    @pytest.mark.parametrize("data", [
        {"first name": "x", "@odd": "y", "": "z", "1.5": "w", "名 前": "v"},
        {"cdata": {"@value": "a]]>b<c", "@cdata": True}},
        {"attrs": {"@value": "v", "@attr": {"bad name": "\"q'\n\t"}}},
        {"control": "a\x00b\x1fc"},
        {"nested": [[["deep"]]]},
    ])
    def test_output_is_well_formed(self, data):
        """Test awkward input still produces parseable XML."""
        parse(to_xml_string(data))

    def test_cdata_terminator_round_trip(self):
        """Test text containing ]]> survives CDATA splitting."""
        xml = to_xml_string({"c": {"@value": "a]]>b", "@cdata": True}})
        assert parse(xml).find("c").text == "a]]>b"


class TestEncode:
    """Test the result-returning encode function."""

    def test_result_contents(self):
        """Test result fields for a successful encode."""
        result = encode({"name": "Jane"})

        assert result.success is True
        assert str(result) == result.xml
        assert result.root.tag == "root"
        assert result.root.children[0].text == "Jane"
        assert result.metrics.elements_created == 2
        assert result.metrics.output_size_bytes == len(result.xml.encode("utf-8"))
        assert result.metrics.processing_time_ms >= 0

    def test_output_size_uses_configured_encoding(self):
        """Test the byte size follows the declared encoding."""
        result = encode({"word": "café"}, EncoderConfig(encoding="ISO-8859-1"))
        assert result.metrics.output_size_bytes == len(result.xml)

    def test_unknown_encoding_size_falls_back(self):
        """Test an unknown encoding name does not break encoding."""
        result = encode({"a": "b"}, EncoderConfig(encoding="x-unknown"))

        assert result.success is True
        assert 'encoding="x-unknown"' in result.xml
        assert result.metrics.output_size_bytes == len(result.xml.encode("utf-8"))

    def test_declaration_values(self):
        """Test version and encoding appear in the declaration."""
        xml = encode({}, EncoderConfig(version="1.1", encoding="ISO-8859-1")).xml
        assert xml.startswith('<?xml version="1.1" encoding="ISO-8859-1"?>\n')

    def test_internal_failure_returns_error_result(self):
        """Test unexpected errors produce a well-formed empty document."""
        with patch(
            "array_to_xml.api.encoder.ArrayTreeBuilder.build",
            side_effect=RuntimeError("boom"),
        ):
            result = encode({"a": 1})

        assert result.success is False
        assert result.xml == DECLARATION + "<root/>\n"
        errors = result.get_diagnostics_by_severity(DiagnosticSeverity.ERROR)
        assert len(errors) == 1
        assert "boom" in errors[0].message

    def test_deep_input_within_limit(self):
        """Test input nested past the recursion limit encodes when allowed."""
        depth = sys.getrecursionlimit() * 2
        data = "x"
        for _ in range(depth):
            data = {"a": data}

        result = encode(data, EncoderConfig(max_depth=depth))

        assert result.success is True
        assert result.metrics.truncated_branches == 0
        assert result.xml == (
            DECLARATION + "<root>" + "<a>" * depth + "x" + "</a>" * depth + "</root>\n"
        )

    def test_repairs_reported(self):
        """Test repairs are visible in the result."""
        result = encode({"first name": "Jane"})
        assert result.has_repairs is True
        assert result.metrics.names_sanitized == 1


class TestArrayToXml:
    """Test the fluent converter."""

    def test_defaults(self):
        """Test default getter values."""
        converter = ArrayToXml()

        assert converter.get_version() == "1.0"
        assert converter.get_encoding() == "UTF-8"
        assert converter.get_format_output() is False
        assert converter.get_custom_root_name() is None
        assert converter.get_default_root_name() == "root"
        assert converter.get_custom_node_name() is None
        assert converter.get_default_node_name() == "node"
        assert converter.get_separator() == "_"
        assert converter.get_method_transform_keys() is None
        assert converter.get_numeric_node_suffix() is None

    def test_fluent_setters(self):
        """Test setters chain and update the configuration."""
        converter = (
            ArrayToXml()
            .set_version("1.1")
            .set_encoding("ISO-8859-1")
            .prettify()
            .set_custom_root_name("people")
            .set_custom_node_name("person")
            .set_separator("-")
            .set_method_transform_keys(ArrayToXml.LOWERCASE)
            .set_numeric_node_suffix("_")
        )

        assert converter.get_version() == "1.1"
        assert converter.get_encoding() == "ISO-8859-1"
        assert converter.get_format_output() is True
        assert converter.get_custom_root_name() == "people"
        assert converter.get_custom_node_name() == "person"
        assert converter.get_separator() == "-"
        assert converter.get_method_transform_keys() == "lowercase"
        assert converter.get_numeric_node_suffix() == "_"

    def test_setters_replace_config(self):
        """Test each setter swaps in a new immutable configuration."""
        converter = ArrayToXml()
        before = converter.config

        converter.set_separator("-")

        assert converter.config is not before
        assert before.separator == "_"

    def test_invalid_root_name_keeps_previous(self):
        """Test an invalid root name raises and keeps the previous value."""
        converter = ArrayToXml().set_custom_root_name("people")

        with pytest.raises(ConfigValidationError, match="Not a valid root name: 1root"):
            converter.set_custom_root_name("1root")

        assert converter.get_custom_root_name() == "people"
        assert parse(converter.to_xml_string({})).tag == "people"

    def test_invalid_node_name_keeps_previous(self):
        """Test an invalid node name raises and keeps the previous value."""
        converter = ArrayToXml()

        with pytest.raises(ConfigValidationError):
            converter.set_custom_node_name("bad name")

        assert converter.get_custom_node_name() is None

    def test_none_root_name_rejected(self):
        """Test None is not accepted as a custom root name."""
        converter = ArrayToXml().set_custom_root_name("people")

        with pytest.raises(ConfigValidationError, match="Not a valid root name: None") as exc_info:
            converter.set_custom_root_name(None)

        assert exc_info.value.field_name == "custom_root_name"
        assert converter.get_custom_root_name() == "people"

    def test_none_node_name_rejected(self):
        """Test None is not accepted as a custom node name."""
        converter = ArrayToXml().set_custom_node_name("item")

        with pytest.raises(ConfigValidationError, match="Not a valid node name: None"):
            converter.set_custom_node_name(None)

        assert converter.get_custom_node_name() == "item"
        assert "<item>a</item>" in converter.to_xml_string(["a"])

    def test_format_output_requires_true(self):
        """Test only True enables formatting."""
        assert ArrayToXml().set_format_output(1).get_format_output() is False
        assert ArrayToXml().set_format_output().get_format_output() is True

    def test_transform_keys(self):
        """Test transform mode handling."""
        converter = ArrayToXml().set_method_transform_keys(ArrayToXml.UPPERCASE)
        assert converter.get_method_transform_keys() == "uppercase"

        converter.set_method_transform_keys("capitalize")
        assert converter.get_method_transform_keys() == "uppercase"

        converter.set_method_transform_keys(KeyTransform.LOWERCASE)
        assert converter.get_method_transform_keys() == "lowercase"

        converter.set_method_transform_keys(None)
        assert converter.get_method_transform_keys() is None

    def test_numeric_node_suffix(self):
        """Test suffix enabling and disabling."""
        converter = ArrayToXml().set_numeric_node_suffix("")
        assert converter.to_xml_string(["a"]) == DECLARATION + "<root><node0>a</node0></root>\n"

        converter.set_numeric_node_suffix(None)
        assert converter.to_xml_string(["a"]) == DECLARATION + "<root><node>a</node></root>\n"

    def test_custom_node_name(self):
        """Test numeric keys use the custom node name."""
        converter = ArrayToXml().set_custom_node_name("item")
        assert "<item>x</item>" in converter.to_xml_string({0: "x"})

    def test_to_xml_string_without_data(self):
        """Test None data encodes as an empty root."""
        assert ArrayToXml().to_xml_string() == DECLARATION + "<root/>\n"

    def test_encode_returns_result(self):
        """Test encode uses the held configuration."""
        result = ArrayToXml(EncoderConfig(custom_root_name="doc")).encode({"a": 1})
        assert result.root.tag == "doc"

    def test_static_validators(self):
        """Test name validation helpers."""
        assert ArrayToXml.is_valid_node_name("name") is True
        assert ArrayToXml.is_valid_node_name("1name") is False
        assert ArrayToXml.is_valid_node_name() is False
        assert ArrayToXml.has_valid_node_start("_x") is True
        assert ArrayToXml.has_valid_node_start("9x") is False
        assert ArrayToXml.is_valid_node_name_char("-") is True
        assert ArrayToXml.is_valid_node_name_char(" ") is False

    def test_converter_is_reusable(self):
        """Test repeated conversions with one converter."""
        converter = ArrayToXml()
        assert converter.to_xml_string({"a": 1}) != converter.to_xml_string({"b": 1})
        assert "<a>1</a>" in converter.to_xml_string({"a": 1})
