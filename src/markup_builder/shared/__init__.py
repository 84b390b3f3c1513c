"""Shared utilities for markup tree building.

This module provides configuration objects, result types and logging helpers
used across the codec, tree, API and CLI layers.
"""

from .config import (
    BuilderConfig,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    RenderConfig,
    TreeConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    RenderMetrics,
    RenderResult,
)

__all__ = [
    "BuilderConfig",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "RenderConfig",
    "TreeConfig",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "RenderMetrics",
    "RenderResult",
]
