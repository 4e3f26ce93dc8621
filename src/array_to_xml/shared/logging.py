"""Structured logging for array-to-XML encoding.

Every record carries ``component`` and ``correlation_id`` attributes, so the
records emitted while encoding one document can be tied back to the call
that produced them. The library installs no handlers; applications
configure ``logging`` themselves.
"""

import logging
from typing import Any, Dict, Optional

PACKAGE_LOGGER_NAME = "array_to_xml"


def component_for(name: str) -> str:
    """Derive the component label for a module logger name.

    ``array_to_xml.tree.builder`` becomes ``tree.builder``; names outside the
    package are used unchanged.
    """
    prefix = PACKAGE_LOGGER_NAME + "."
    return name[len(prefix):] if name.startswith(prefix) else name


class CorrelationLogger:
    """Logger that adds correlation ID and component to every record."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional ID of the encode call being logged
            component: Component label, derived from ``name`` when omitted
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or component_for(name)

    def bind(self, correlation_id: Optional[str]) -> "CorrelationLogger":
        """Return a logger for the same component tagged with ``correlation_id``."""
        return CorrelationLogger(self.logger.name, correlation_id, self.component)

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool = False
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return

        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)

        # stacklevel 3 attributes the record to the caller of debug()/info()
        self.logger.log(
            level, message, extra=combined_extra, exc_info=exc_info, stacklevel=3
        )

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, extra)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log at ERROR level with the active exception's traceback."""
        self._log(logging.ERROR, message, extra, exc_info=True)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional ID of the encode call being logged
        component: Component label, derived from ``name`` when omitted

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
