"""XML 1.0 name validation and sanitization.

This module classifies characters and strings against the XML 1.0 ``Name``
production and repairs arbitrary strings into legal tag names. All patterns
are generated once from the shared range tables below so that the full-name,
start-character and single-character checks can never drift apart.
"""

import re
from enum import Enum
from typing import List, Optional, Tuple, Union

# XML 1.0 (5th edition) NameStartChar ranges
NAME_START_CHAR_RANGES: List[Tuple[int, int]] = [
    (0x003A, 0x003A),  # ':'
    (0x0041, 0x005A),  # A-Z
    (0x005F, 0x005F),  # '_'
    (0x0061, 0x007A),  # a-z
    (0x00C0, 0x00D6),
    (0x00D8, 0x00F6),
    (0x00F8, 0x02FF),
    (0x0370, 0x037D),
    (0x037F, 0x1FFF),
    (0x200C, 0x200D),
    (0x2070, 0x218F),
    (0x2C00, 0x2FEF),
    (0x3001, 0xD7FF),
    (0xF900, 0xFDCF),
    (0xFDF0, 0xFFFD),
    (0x10000, 0xEFFFF),
]

# Characters allowed after the first position in addition to NameStartChar
NAME_CHAR_EXTRA_RANGES: List[Tuple[int, int]] = [
    (0x002D, 0x002E),  # '-' '.'
    (0x0030, 0x0039),  # 0-9
    (0x00B7, 0x00B7),
    (0x0300, 0x036F),
    (0x203F, 0x2040),
]

DEFAULT_SEPARATOR = "_"
INVALID_START_REPLACEMENT = "_"


class KeyTransform(Enum):
    """Case folding applied to generated tag names."""

    NONE = "none"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"


def _character_class(ranges: List[Tuple[int, int]]) -> str:
    parts = []
    for low, high in ranges:
        if low == high:
            parts.append(re.escape(chr(low)))
        else:
            parts.append(f"{re.escape(chr(low))}-{re.escape(chr(high))}")
    return "".join(parts)


_NAME_START_CLASS = _character_class(NAME_START_CHAR_RANGES)
_NAME_CHAR_CLASS = _NAME_START_CLASS + _character_class(NAME_CHAR_EXTRA_RANGES)

_NAME_RE = re.compile(f"[{_NAME_START_CLASS}][{_NAME_CHAR_CLASS}]*")
_NAME_START_RE = re.compile(f"[{_NAME_START_CLASS}]")
_NAME_CHAR_RE = re.compile(f"[{_NAME_CHAR_CLASS}]")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def is_valid_name(value: object) -> bool:
    """Check whether a value can be used verbatim as an XML tag name.

    Non-string values, the empty string and pure integer literals are never
    valid. Integer-looking keys are routed through the numeric key naming
    policy instead.

    Args:
        value: Candidate tag name

    Returns:
        True if the value matches the XML 1.0 ``Name`` production
    """
    if not isinstance(value, str) or not value:
        return False
    if _INTEGER_RE.fullmatch(value):
        return False
    return _NAME_RE.fullmatch(value) is not None


def has_valid_start(value: object) -> bool:
    """Check whether the first character of a string is a NameStartChar."""
    if not isinstance(value, str) or not value:
        return False
    return _NAME_START_RE.match(value) is not None


def is_valid_name_char(char: object) -> bool:
    """Check whether a single character is a NameChar."""
    if not isinstance(char, str) or len(char) != 1:
        return False
    return _NAME_CHAR_RE.fullmatch(char) is not None


def sanitize(name: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """Repair an arbitrary string into a legal tag name.

    Every character that is not a NameChar is replaced by ``separator``.
    If the result still has an illegal first character, that character is
    substituted (never prefixed) with an underscore, so the positions of the
    remaining characters are kept.

    Args:
        name: Raw key text
        separator: Replacement for invalid characters

    Returns:
        Repaired name; valid whenever ``separator`` consists of NameChars
    """
    repaired = "".join(
        char if is_valid_name_char(char) else separator for char in name
    )
    if not has_valid_start(repaired):
        repaired = INVALID_START_REPLACEMENT + repaired[1:]
    return repaired


def transform_case(
    name: str, mode: Optional[Union[KeyTransform, str]] = KeyTransform.NONE
) -> str:
    """Apply the configured case folding to a tag name."""
    if mode is None:
        return name
    mode = KeyTransform(mode)
    if mode is KeyTransform.LOWERCASE:
        return name.lower()
    if mode is KeyTransform.UPPERCASE:
        return name.upper()
    return name
