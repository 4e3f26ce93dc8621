"""Tree building engine for array-to-XML encoding.

This module converts nested input data into an output element tree and
serializes that tree to an XML document string.

Key Components:
    classify: Decode loosely typed input into Scalar/PlainContainer/TaggedContainer
    ArrayTreeBuilder: Depth-first builder producing the element tree
    XMLDocument / XMLElement: Output document model
    XMLSerializer: Document to string, with escaping, CDATA and indentation
    EncodeResult: Result object with document, output, diagnostics and metrics
"""

from .nodes import (
    ATTR_KEY,
    CDATA_KEY,
    VALUE_KEY,
    PlainContainer,
    Scalar,
    TaggedContainer,
    classify,
)
from .document import (
    XMLDocument,
    XMLElement,
    XMLSerializer,
)
from .builder import (
    ArrayTreeBuilder,
    EncodeResult,
    build_tree,
)

__all__ = [
    "ATTR_KEY",
    "CDATA_KEY",
    "VALUE_KEY",
    "PlainContainer",
    "Scalar",
    "TaggedContainer",
    "classify",
    "XMLDocument",
    "XMLElement",
    "XMLSerializer",
    "ArrayTreeBuilder",
    "EncodeResult",
    "build_tree",
]
