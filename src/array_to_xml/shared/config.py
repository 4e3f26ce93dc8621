"""Configuration classes for array-to-XML encoding.

This module provides the immutable encoder configuration, a fluent builder for
assembling it step by step, and the configuration error types. Custom root and
node names are validated eagerly so that an invalid value is never stored.
"""

import codecs
import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional, Union

from array_to_xml.naming.validation import (
    DEFAULT_SEPARATOR,
    KeyTransform,
    is_valid_name,
)

DEFAULT_VERSION = "1.0"
DEFAULT_ENCODING = "UTF-8"
DEFAULT_ROOT_NAME = "root"
DEFAULT_NODE_NAME = "node"
DEFAULT_INDENT = "  "
DEFAULT_MAX_DEPTH = 256


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.suggestions = suggestions or []


_NAME_LABELS = {"custom_root_name": "root", "custom_node_name": "node"}


def validate_custom_name(field_name: str, value: Any) -> None:
    """Raise ``ConfigValidationError`` unless ``value`` is a valid XML name.

    ``None`` is rejected like any other non-string value.
    """
    if not is_valid_name(value):
        raise ConfigValidationError(
            f"Not a valid {_NAME_LABELS[field_name]} name: {value}",
            field_name=field_name,
            value=value,
        )


def _coerce_transform(value: Union[KeyTransform, str, None]) -> KeyTransform:
    if value is None:
        return KeyTransform.NONE
    if isinstance(value, KeyTransform):
        return value
    try:
        return KeyTransform(value)
    except ValueError as e:
        raise ConfigValidationError(
            f"Not a valid key transform: {value}",
            field_name="transform_keys",
            value=value,
            suggestions=[mode.value for mode in KeyTransform],
        ) from e


def _coerce_suffix(value: Union[str, bool, None]) -> Optional[str]:
    # Booleans enable suffixing without a separator between name and key
    if value is True or value is False:
        return ""
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class EncoderConfig:
    """Immutable configuration snapshot for one or more encode calls.

    Thread-safe due to frozen dataclass implementation. Use
    ``EncoderConfigBuilder`` or ``override`` to derive modified copies.
    """

    version: str = DEFAULT_VERSION
    encoding: str = DEFAULT_ENCODING
    format_output: bool = False
    custom_root_name: Optional[str] = None
    custom_node_name: Optional[str] = None
    separator: str = DEFAULT_SEPARATOR
    transform_keys: KeyTransform = KeyTransform.NONE
    numeric_node_suffix: Optional[str] = None
    indent: str = DEFAULT_INDENT
    max_depth: int = DEFAULT_MAX_DEPTH
    correlation_id: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate and normalize the configuration."""
        if self.custom_root_name is not None:
            validate_custom_name("custom_root_name", self.custom_root_name)
        if self.custom_node_name is not None:
            validate_custom_name("custom_node_name", self.custom_node_name)
        if (
            isinstance(self.max_depth, bool)
            or not isinstance(self.max_depth, int)
            or self.max_depth <= 0
        ):
            raise ConfigValidationError(
                "max_depth must be > 0", field_name="max_depth", value=self.max_depth
            )

        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "format_output", self.format_output is True)
        object.__setattr__(
            self, "transform_keys", _coerce_transform(self.transform_keys)
        )
        object.__setattr__(
            self, "numeric_node_suffix", _coerce_suffix(self.numeric_node_suffix)
        )

    @property
    def default_root_name(self) -> str:
        """Root element name used when no usable custom root name is set."""
        return DEFAULT_ROOT_NAME

    @property
    def default_node_name(self) -> str:
        """Element name used for empty and numeric keys."""
        return DEFAULT_NODE_NAME

    @property
    def codec_name(self) -> str:
        """Python codec for the declared encoding, UTF-8 when Python has none."""
        try:
            return codecs.lookup(self.encoding).name
        except LookupError:
            return "utf-8"

    def override(self, **kwargs: Any) -> "EncoderConfig":
        """Create a new validated configuration with specific overrides.

        Example:
            >>> config = EncoderConfig()
            >>> config.override(custom_root_name="items").custom_root_name
            'items'
        """
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            if isinstance(value, KeyTransform):
                value = value.value
            result[config_field.name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EncoderConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        known = {config_field.name for config_field in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "EncoderConfig":
        """Create configuration from JSON string."""
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def pretty(cls) -> "EncoderConfig":
        """Create configuration preset for indented, human-readable output."""
        return cls(format_output=True)

    @classmethod
    def compact(cls) -> "EncoderConfig":
        """Create configuration preset for single-line output."""
        return cls(format_output=False)


class EncoderConfigBuilder:
    """Fluent builder producing ``EncoderConfig`` snapshots.

    Every ``with_*`` call validates the resulting configuration immediately.
    A rejected value raises ``ConfigValidationError`` and leaves the builder
    unchanged.
    """

    def __init__(self, base: Optional[EncoderConfig] = None) -> None:
        self._config = base or EncoderConfig()

    def _apply(self, **changes: Any) -> "EncoderConfigBuilder":
        self._config = self._config.override(**changes)
        return self

    def with_version(self, version: str = DEFAULT_VERSION) -> "EncoderConfigBuilder":
        return self._apply(version=version)

    def with_encoding(
        self, encoding: str = DEFAULT_ENCODING
    ) -> "EncoderConfigBuilder":
        return self._apply(encoding=encoding)

    def with_format_output(self, enabled: bool = True) -> "EncoderConfigBuilder":
        return self._apply(format_output=enabled)

    def prettify(self) -> "EncoderConfigBuilder":
        """Alias for ``with_format_output(True)``."""
        return self.with_format_output(True)

    def with_custom_root_name(self, name: str) -> "EncoderConfigBuilder":
        return self._apply(custom_root_name=name)

    def with_custom_node_name(self, name: str) -> "EncoderConfigBuilder":
        return self._apply(custom_node_name=name)

    def with_separator(self, separator: str) -> "EncoderConfigBuilder":
        return self._apply(separator=separator)

    def with_transform_keys(
        self, mode: Union[KeyTransform, str, None] = None
    ) -> "EncoderConfigBuilder":
        return self._apply(transform_keys=mode)

    def with_numeric_node_suffix(
        self, suffix: Union[str, bool, None] = None
    ) -> "EncoderConfigBuilder":
        return self._apply(numeric_node_suffix=suffix)

    def with_indent(self, indent: str) -> "EncoderConfigBuilder":
        return self._apply(indent=indent)

    def with_max_depth(self, max_depth: int) -> "EncoderConfigBuilder":
        return self._apply(max_depth=max_depth)

    def with_correlation_id(
        self, correlation_id: Optional[str]
    ) -> "EncoderConfigBuilder":
        return self._apply(correlation_id=correlation_id)

    def build(self) -> EncoderConfig:
        """Return the configuration assembled so far."""
        return self._config
