"""Array to XML.

Converts arbitrarily nested mappings (dicts, lists and scalars) into
well-formed XML documents. Every key is validated against the XML 1.0 Name
grammar and repaired when needed, so encoding never fails on input content.

Progressive API Disclosure:
- Level 1: Simple functions - to_xml_string(), encode()
- Level 2: Configured encoding - EncoderConfig, EncoderConfigBuilder
- Level 3: Fluent converter - ArrayToXml
"""

__version__ = "0.1.0"
__author__ = "Array To XML Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 3: Fluent converter
from .api import ArrayToXml, encode, to_xml_string

# Configuration classes for advanced usage
from .shared.config import (
    ConfigError,
    ConfigValidationError,
    EncoderConfig,
    EncoderConfigBuilder,
    KeyTransform,
)

# Name validation helpers
from .naming import has_valid_start, is_valid_name, is_valid_name_char, sanitize

# Core result objects for all API levels
from .tree import EncodeResult, XMLDocument, XMLElement

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple encoding functions
    "to_xml_string",
    "encode",

    # Level 3: Fluent converter
    "ArrayToXml",

    # Configuration classes
    "EncoderConfig",
    "EncoderConfigBuilder",
    "KeyTransform",
    "ConfigError",
    "ConfigValidationError",

    # Name validation
    "is_valid_name",
    "has_valid_start",
    "is_valid_name_char",
    "sanitize",

    # Result objects and data structures
    "EncodeResult",
    "XMLDocument",
    "XMLElement",
]
