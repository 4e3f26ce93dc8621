"""Tag name resolution policy.

Turns input keys into element and attribute names according to an encoder
configuration. Every name returned by this module satisfies the XML 1.0
``Name`` production.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .validation import (
    DEFAULT_SEPARATOR,
    is_valid_name,
    sanitize,
    transform_case,
)

if TYPE_CHECKING:
    from array_to_xml.shared.config import EncoderConfig

_NUMERIC_KEY_RE = re.compile(r"0|[1-9][0-9]*")
_ROOT_NAME_INVALID_RE = re.compile(r"[^_a-zA-Z0-9]")


class NameStrategy(Enum):
    """How a resolved name was derived from its key."""

    NUMERIC = "numeric"      # Empty or integer key, synthesized from node name
    VERBATIM = "verbatim"    # Key was already a valid name
    SANITIZED = "sanitized"  # Key had invalid characters replaced


@dataclass(frozen=True)
class ResolvedName:
    """A resolved tag name together with the key it came from."""

    name: str
    strategy: NameStrategy
    original: str

    @property
    def was_repaired(self) -> bool:
        return self.strategy is NameStrategy.SANITIZED


def key_text(key: Any) -> str:
    """Render a mapping key as text."""
    if key is None:
        return ""
    if isinstance(key, bool):
        return "1" if key else ""
    return str(key)


def is_numeric_key(key: Any) -> bool:
    """Check whether a key is a non-negative integer literal (``0``, ``17``...)."""
    return _NUMERIC_KEY_RE.fullmatch(key_text(key)) is not None


class NamePolicy:
    """Resolves element, root and attribute names for one configuration."""

    def __init__(self, config: "EncoderConfig") -> None:
        self.config = config

    def resolve(self, key: Any) -> ResolvedName:
        """Resolve the element name for an input key.

        Precedence: empty/numeric keys use the node name (plus optional
        suffix and key), valid keys are used as-is, anything else is
        sanitized. Case folding is the last step.
        """
        text = key_text(key)
        config = self.config

        if not text or is_numeric_key(text):
            if is_valid_name(config.custom_node_name):
                name = config.custom_node_name
            else:
                name = transform_case(config.default_node_name, config.transform_keys)
            if config.numeric_node_suffix is not None:
                name = f"{name}{config.numeric_node_suffix}{text}"
            # A suffix containing invalid characters must not leak into the tag
            if not is_valid_name(name):
                name = sanitize(name, DEFAULT_SEPARATOR)
            return ResolvedName(name, NameStrategy.NUMERIC, text)

        if is_valid_name(text):
            return ResolvedName(
                transform_case(text, config.transform_keys), NameStrategy.VERBATIM, text
            )

        return ResolvedName(
            transform_case(self._sanitize(text), config.transform_keys),
            NameStrategy.SANITIZED,
            text,
        )

    def resolve_root(self) -> str:
        """Resolve the document root element name.

        Only ``[_a-zA-Z0-9]`` survive in a custom root name; everything else
        is replaced by the separator before re-validation.
        """
        config = self.config
        name = config.custom_root_name
        if isinstance(name, str):
            name = _ROOT_NAME_INVALID_RE.sub(
                lambda _match: config.separator, name
            )
        if is_valid_name(name):
            return name
        return transform_case(config.default_root_name, config.transform_keys)

    def resolve_attribute(self, name: Any) -> str:
        """Resolve an attribute name. Attribute names are never case folded."""
        text = key_text(name)
        if is_valid_name(text):
            return text
        return self._sanitize(text)

    def _sanitize(self, text: str) -> str:
        repaired = sanitize(text, self.config.separator)
        if not is_valid_name(repaired):
            # Separator itself contains non-name characters
            repaired = sanitize(text, DEFAULT_SEPARATOR)
        return repaired
