"""Result objects and diagnostic types for array-to-XML encoding.

Encoding never fails on input content; instead every repair the encoder makes
(sanitized keys, discarded entries, truncated branches) is reported through the
diagnostic entries and metrics defined here.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()       # Informational repairs (sanitized names)
    WARNING = auto()    # Input that was partly ignored
    ERROR = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    path: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to dictionary representation."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.path is not None:
            result["path"] = self.path
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class EncodingMetrics:
    """Counters and timing for a single encode operation."""

    processing_time_ms: float = 0.0
    entries_processed: int = 0
    elements_created: int = 0
    attributes_created: int = 0
    cdata_sections: int = 0
    names_sanitized: int = 0
    numeric_names: int = 0
    truncated_branches: int = 0
    max_depth_reached: int = 0
    output_size_bytes: int = 0

    @property
    def entries_per_second(self) -> float:
        """Calculate input entries processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.entries_processed * 1000.0) / self.processing_time_ms

    @property
    def sanitize_rate(self) -> float:
        """Fraction of entries whose key had to be repaired."""
        if self.entries_processed == 0:
            return 0.0
        return self.names_sanitized / self.entries_processed

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary representation."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "entries_processed": self.entries_processed,
            "elements_created": self.elements_created,
            "attributes_created": self.attributes_created,
            "cdata_sections": self.cdata_sections,
            "names_sanitized": self.names_sanitized,
            "numeric_names": self.numeric_names,
            "truncated_branches": self.truncated_branches,
            "max_depth_reached": self.max_depth_reached,
            "output_size_bytes": self.output_size_bytes,
        }
