"""Output document model and XML serializer.

The tree builder materializes input data into ``XMLElement`` nodes owned by an
``XMLDocument``; ``XMLSerializer`` turns that tree into the final document
string. The serializer is the only place that escapes text and attribute
values, writes CDATA sections and applies indentation.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from array_to_xml.shared import get_logger

# XML 1.0 Char production; anything else cannot appear even escaped
XML_VALID_RANGES: List[Tuple[int, int]] = [
    (0x0009, 0x0009),  # Tab
    (0x000A, 0x000A),  # Line Feed
    (0x000D, 0x000D),  # Carriage Return
    (0x0020, 0xD7FF),  # Basic Multilingual Plane excluding surrogates
    (0xE000, 0xFFFD),  # Private Use and extended characters
    (0x10000, 0x10FFFF),  # Supplementary planes
]

REPLACEMENT_CHARACTER = "\ufffd"
CDATA_TERMINATOR = "]]>"

_logger = get_logger(__name__)

_INVALID_CHARS_RE = re.compile(
    "[^"
    + "".join(
        f"{re.escape(chr(low))}-{re.escape(chr(high))}" if low != high
        else re.escape(chr(low))
        for low, high in XML_VALID_RANGES
    )
    + "]"
)

_TEXT_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", "\r": "&#13;"}
_ATTRIBUTE_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "\t": "&#9;",
    "\n": "&#10;",
    "\r": "&#13;",
}
_TEXT_ESCAPE_RE = re.compile("[&<>\r]")
_ATTRIBUTE_ESCAPE_RE = re.compile('[&<>"\t\n\r]')


def replace_invalid_chars(text: str) -> str:
    """Replace characters outside the XML 1.0 Char production with U+FFFD."""
    return _INVALID_CHARS_RE.sub(REPLACEMENT_CHARACTER, text)


def escape_text(text: str) -> str:
    """Escape element text content."""
    text = replace_invalid_chars(text)
    return _TEXT_ESCAPE_RE.sub(lambda match: _TEXT_ESCAPES[match.group()], text)


def escape_attribute(value: str) -> str:
    """Escape a double-quoted attribute value."""
    value = replace_invalid_chars(value)
    return _ATTRIBUTE_ESCAPE_RE.sub(
        lambda match: _ATTRIBUTE_ESCAPES[match.group()], value
    )


def cdata_section(text: str) -> str:
    """Wrap text in a CDATA section, splitting any embedded ``]]>``."""
    text = replace_invalid_chars(text)
    return "<![CDATA[" + text.replace(CDATA_TERMINATOR, "]]]]><![CDATA[>") + "]]>"


@dataclass(eq=False)
class XMLElement:
    """Represents a single element of the output document.

    An element carries either text (plain or CDATA) or child elements; the
    tree builder never produces both on the same element.
    """

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    cdata: bool = False
    children: List["XMLElement"] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError("Element tag cannot be empty")

    @property
    def is_empty(self) -> bool:
        """Check if element has no content (it serializes self-closing)."""
        return not self.children and not self.text and not self.cdata

    def add_child(self, child: "XMLElement") -> None:
        if not isinstance(child, XMLElement):
            raise TypeError("Child must be an XMLElement instance")
        self.children.append(child)

    def set_attribute(self, name: str, value: str) -> None:
        """Set attribute value. Insertion order is kept on output."""
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError("Attribute name and value must be strings")
        self.attributes[name] = value


@dataclass
class XMLDocument:
    """Output document container with declaration metadata."""

    root: Optional[XMLElement] = None
    version: str = "1.0"
    encoding: str = "UTF-8"
    correlation_id: Optional[str] = None

    def iter_elements(self) -> Iterator[XMLElement]:
        """Yield all elements in document order."""
        stack = [self.root] if self.root is not None else []
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    @property
    def total_elements(self) -> int:
        return sum(1 for _ in self.iter_elements())


class XMLSerializer:
    """Serializes an ``XMLDocument`` to an XML string.

    Output starts with an XML declaration and ends with a newline. In pretty
    mode, elements holding only child elements are broken over indented
    lines while elements holding text stay on a single line.
    """

    def __init__(self, indent: str = "  ", correlation_id: Optional[str] = None) -> None:
        self.indent = indent
        self.logger = _logger.bind(correlation_id)

    def serialize(self, document: XMLDocument, pretty: bool = False) -> str:
        """Serialize a document including its XML declaration."""
        parts = [self.declaration(document), "\n"]
        if document.root is not None:
            self._write_element(document.root, parts, 0, pretty)
            parts.append("\n")

        output = "".join(parts)
        self.logger.debug(
            "Document serialized",
            extra={"pretty": pretty, "output_length": len(output)}
        )
        return output

    def serialize_element(self, element: XMLElement, pretty: bool = False) -> str:
        """Serialize a single element subtree without declaration."""
        parts: List[str] = []
        self._write_element(element, parts, 0, pretty)
        return "".join(parts)

    @staticmethod
    def declaration(document: XMLDocument) -> str:
        declaration = f'<?xml version="{escape_attribute(document.version)}"'
        if document.encoding:
            declaration += f' encoding="{escape_attribute(document.encoding)}"'
        return declaration + "?>"

    def _write_element(
        self, element: XMLElement, parts: List[str], level: int, pretty: bool
    ) -> None:
        # Explicit stack of (element, level, closing); output depth is not
        # bounded by the interpreter recursion limit
        stack: List[Tuple[XMLElement, int, bool]] = [(element, level, False)]
        while stack:
            current, current_level, closing = stack.pop()

            if closing:
                if pretty:
                    parts.append("\n" + self.indent * current_level)
                parts.append(f"</{current.tag}>")
                continue

            if pretty and current_level > level:
                parts.append("\n" + self.indent * current_level)

            opening = current.tag
            for name, value in current.attributes.items():
                opening += f' {name}="{escape_attribute(value)}"'

            if current.is_empty:
                parts.append(f"<{opening}/>")
                continue

            parts.append(f"<{opening}>")

            if current.cdata:
                parts.append(cdata_section(current.text or ""))
            elif current.text:
                parts.append(escape_text(current.text))

            if not current.children:
                parts.append(f"</{current.tag}>")
                continue

            stack.append((current, current_level, True))
            for child in reversed(current.children):
                stack.append((child, current_level + 1, False))
