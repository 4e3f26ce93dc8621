"""Core encoder API with progressive disclosure for array-to-XML encoding.

Level 1: ``to_xml_string(data)`` returns the XML document string.
Level 2: ``encode(data, config)`` returns an ``EncodeResult`` with the element
tree, diagnostics and metrics.
Level 3: ``ArrayToXml`` keeps a configuration and offers fluent setters that
mirror the classic array-to-XML surface.
"""

import time
from typing import Any, Optional, Union

from array_to_xml.naming import (
    KeyTransform,
    has_valid_start,
    is_valid_name,
    is_valid_name_char,
)
from array_to_xml.shared import (
    DiagnosticSeverity,
    EncoderConfig,
    get_logger,
    validate_custom_name,
)
from array_to_xml.tree import (
    ArrayTreeBuilder,
    EncodeResult,
    XMLDocument,
    XMLElement,
    XMLSerializer,
)

MS_PER_SECOND = 1000

_logger = get_logger(__name__)


def encode(data: Any, config: Optional[EncoderConfig] = None) -> EncodeResult:
    """Encode nested data into an XML document.

    Args:
        data: Mapping (or list) of keys to scalars or nested containers
        config: Optional configuration snapshot (defaults are used otherwise)

    Returns:
        EncodeResult with ``xml``, the element tree, diagnostics and metrics

    Examples:
        >>> result = encode({"name": "Jane"})
        >>> result.root.children[0].text
        'Jane'
        >>> result.success
        True
    """
    config = config or EncoderConfig()
    start_time = time.time()
    logger = _logger.bind(config.correlation_id)

    logger.info(
        "Starting encode operation",
        extra={
            "input_type": type(data).__name__,
            "format_output": config.format_output,
        }
    )

    try:
        result = ArrayTreeBuilder(config).build(data)
        serializer = XMLSerializer(config.indent, config.correlation_id)
        result.xml = serializer.serialize(result.document, pretty=config.format_output)
    except Exception as e:
        # Never-fail guarantee: return a well-formed empty document
        logger.exception(
            "Encode operation failed",
            extra={"processing_time_ms": (time.time() - start_time) * MS_PER_SECOND}
        )
        result = _create_error_result(f"Encode operation failed: {e}", config)

    result.metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
    result.metrics.output_size_bytes = len(
        result.xml.encode(config.codec_name, errors="xmlcharrefreplace")
    )

    logger.info(
        "Encode operation completed",
        extra={
            "success": result.success,
            "elements": result.metrics.elements_created,
            "names_sanitized": result.metrics.names_sanitized,
            "processing_time_ms": result.metrics.processing_time_ms,
        }
    )
    return result


def to_xml_string(data: Any, config: Optional[EncoderConfig] = None) -> str:
    """Convert nested data to an XML document string.

    Examples:
        >>> to_xml_string({"name": "Jane", "tags": {0: "a", 1: "b"}})
        '<?xml version="1.0" encoding="UTF-8"?>\\n<root><name>Jane</name><tags><node>a</node><node>b</node></tags></root>\\n'
    """
    return encode(data, config).xml


def _create_error_result(message: str, config: EncoderConfig) -> EncodeResult:
    root = XMLElement(tag=config.default_root_name)
    document = XMLDocument(
        root=root,
        version=config.version,
        encoding=config.encoding,
        correlation_id=config.correlation_id,
    )
    result = EncodeResult(
        document=document,
        success=False,
        correlation_id=config.correlation_id,
    )
    result.xml = XMLSerializer(config.indent).serialize(document)
    result.add_diagnostic(DiagnosticSeverity.ERROR, message, "api")
    return result


class ArrayToXml:
    """Fluent array-to-XML converter.

    Every setter replaces the held configuration with a new immutable
    snapshot. Setting an invalid custom root or node name raises
    ``ConfigValidationError`` and keeps the previous configuration.

    Example:
        >>> converter = ArrayToXml().set_custom_root_name("people").prettify()
        >>> xml = converter.to_xml_string({"person": "Jane"})
    """

    LOWERCASE = KeyTransform.LOWERCASE.value
    UPPERCASE = KeyTransform.UPPERCASE.value

    def __init__(self, config: Optional[EncoderConfig] = None) -> None:
        self._config = config or EncoderConfig()

    @property
    def config(self) -> EncoderConfig:
        """Current configuration snapshot."""
        return self._config

    def _update(self, **changes: Any) -> "ArrayToXml":
        self._config = self._config.override(**changes)
        return self

    def set_version(self, value: str = "1.0") -> "ArrayToXml":
        return self._update(version=value)

    def get_version(self) -> str:
        return self._config.version

    def set_encoding(self, value: str = "UTF-8") -> "ArrayToXml":
        return self._update(encoding=value)

    def get_encoding(self) -> str:
        return self._config.encoding

    def set_format_output(self, value: bool = True) -> "ArrayToXml":
        return self._update(format_output=value is True)

    def prettify(self) -> "ArrayToXml":
        """Alias for ``set_format_output(True)``."""
        return self.set_format_output(True)

    def get_format_output(self) -> bool:
        return self._config.format_output

    def set_custom_root_name(self, value: str) -> "ArrayToXml":
        validate_custom_name("custom_root_name", value)
        return self._update(custom_root_name=value)

    def get_custom_root_name(self) -> Optional[str]:
        return self._config.custom_root_name

    def get_default_root_name(self) -> str:
        return self._config.default_root_name

    def set_custom_node_name(self, value: str) -> "ArrayToXml":
        """Set the element name used for numeric and empty keys."""
        validate_custom_name("custom_node_name", value)
        return self._update(custom_node_name=value)

    def get_custom_node_name(self) -> Optional[str]:
        return self._config.custom_node_name

    def get_default_node_name(self) -> str:
        return self._config.default_node_name

    def set_separator(self, value: str) -> "ArrayToXml":
        """Set the replacement for characters not allowed in tag names."""
        return self._update(separator=value)

    def get_separator(self) -> str:
        return self._config.separator

    def set_method_transform_keys(
        self, value: Union[KeyTransform, str, None] = None
    ) -> "ArrayToXml":
        """Set key case folding: ``"lowercase"``, ``"uppercase"`` or ``None``.

        Unrecognized values are ignored and keep the current mode.
        """
        if value is None:
            return self._update(transform_keys=KeyTransform.NONE)
        if value in (KeyTransform.LOWERCASE, KeyTransform.UPPERCASE,
                     self.LOWERCASE, self.UPPERCASE):
            return self._update(transform_keys=value)
        return self

    def get_method_transform_keys(self) -> Optional[str]:
        mode = self._config.transform_keys
        return None if mode is KeyTransform.NONE else mode.value

    def set_numeric_node_suffix(
        self, value: Union[str, bool, None] = None
    ) -> "ArrayToXml":
        """Enable (string, including empty) or disable (``None``) numeric suffixes."""
        return self._update(numeric_node_suffix=value)

    def get_numeric_node_suffix(self) -> Optional[str]:
        return self._config.numeric_node_suffix

    @staticmethod
    def is_valid_node_name(value: Any = None) -> bool:
        return is_valid_name(value)

    @staticmethod
    def has_valid_node_start(value: Any = None) -> bool:
        return has_valid_start(value)

    @staticmethod
    def is_valid_node_name_char(value: Any = None) -> bool:
        return is_valid_name_char(value)

    def encode(self, data: Any) -> EncodeResult:
        """Encode ``data`` with the current configuration."""
        return encode(data, self._config)

    def to_xml_string(self, data: Any = None) -> str:
        """Convert ``data`` to an XML document string."""
        return encode({} if data is None else data, self._config).xml
