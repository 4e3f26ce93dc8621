"""Shared utilities for array-to-XML encoding.

This module provides shared configuration objects, result types, and logging
utilities used across the naming, tree and API layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    EncodingMetrics,
)
from .config import (
    ConfigError,
    ConfigValidationError,
    EncoderConfig,
    EncoderConfigBuilder,
    KeyTransform,
    validate_custom_name,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "EncodingMetrics",
    "ConfigError",
    "ConfigValidationError",
    "EncoderConfig",
    "EncoderConfigBuilder",
    "KeyTransform",
    "validate_custom_name",
    "CorrelationLogger",
    "get_logger",
]
