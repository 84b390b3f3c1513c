"""Correlation-aware logging for markup tree building.

Records go through the standard library logger named after the module, with
two extras attached: ``component`` (which part of the builder logged) and
``correlation_id`` (which render run it belongs to, if any).
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Thin wrapper adding component and correlation extras to every record."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool
    ) -> None:
        fields: Dict[str, Any] = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        fields.update(extra or {})
        self.logger.log(level, message, extra=fields, exc_info=exc_info)

    def is_enabled_for(self, level: int) -> bool:
        """Check whether ``level`` passes; use it to skip building debug extras."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra, False)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra, False)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log an error, with the active traceback unless ``exc_info`` is False."""
        self._log(logging.ERROR, message, extra, exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a logger for ``name`` (typically ``__name__``).

    ``component`` defaults to the last dotted segment of ``name``.
    """
    return CorrelationLogger(name, correlation_id, component)
