#!/usr/bin/env python3
"""
Quick Start Guide for the array-to-xml encoder.

Walks through the three API levels: the one-call conversion, configured
encoding with diagnostics, and the fluent converter.
"""

from array_to_xml import (
    ArrayToXml,
    ConfigValidationError,
    EncoderConfigBuilder,
    encode,
    to_xml_string,
)


def quick_start_example():
    """Quick start example showing basic usage."""

    print("QUICK START - array-to-xml")
    print("=" * 45)

    # Step 1: One-call conversion
    print("\nStep 1: Simple conversion")
    print("-" * 30)

    print(to_xml_string({"name": "Jane", "tags": ["a", "b"]}))

    # Step 2: Configured encoding with diagnostics
    print("\nStep 2: Configuration and diagnostics")
    print("-" * 30)

    config = (
        EncoderConfigBuilder()
        .with_custom_root_name("people")
        .with_numeric_node_suffix("")
        .prettify()
        .build()
    )
    result = encode(
        {
            "first name": "Jane",
            "note": {"@value": "Fish & Chips", "@cdata": True},
            "item": {"@value": "book", "@attr": {"id": "5", "type": "x"}},
            "list": ["a", "b"],
        },
        config,
    )

    print(result.xml)
    print(f"Elements created: {result.metrics.elements_created}")
    print(f"Names sanitized: {result.metrics.names_sanitized}")
    for diagnostic in result.diagnostics:
        print(f"  - {diagnostic.severity.name}: {diagnostic.message}")

    # Step 3: Fluent converter
    print("\nStep 3: Fluent converter")
    print("-" * 30)

    converter = ArrayToXml().set_method_transform_keys(ArrayToXml.UPPERCASE)
    print(converter.to_xml_string({"user_name": "jdoe", "1st-name": "Jane"}))

    try:
        converter.set_custom_root_name("1root")
    except ConfigValidationError as e:
        print(f"Rejected: {e} (custom root name is still {converter.get_custom_root_name()!r})")


if __name__ == "__main__":
    quick_start_example()
