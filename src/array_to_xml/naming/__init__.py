"""Tag name validation, sanitization and resolution.

Key Components:
    is_valid_name / has_valid_start / is_valid_name_char: XML 1.0 Name checks
    sanitize: Repair arbitrary text into a legal tag name
    transform_case: Apply lowercase/uppercase key folding
    NamePolicy: Resolve element, root and attribute names for a configuration
"""

from .validation import (
    KeyTransform,
    has_valid_start,
    is_valid_name,
    is_valid_name_char,
    sanitize,
    transform_case,
)
from .policy import (
    NamePolicy,
    NameStrategy,
    ResolvedName,
    is_numeric_key,
    key_text,
)

__all__ = [
    "KeyTransform",
    "has_valid_start",
    "is_valid_name",
    "is_valid_name_char",
    "sanitize",
    "transform_case",
    "NamePolicy",
    "NameStrategy",
    "ResolvedName",
    "is_numeric_key",
    "key_text",
]
