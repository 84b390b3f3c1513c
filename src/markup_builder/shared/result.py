"""Result objects and diagnostic types for markup rendering.

This module defines the result object returned by the Level-1 rendering API,
carrying the rendered markup together with metrics and diagnostics.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
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
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "details": self.details,
        }


@dataclass
class RenderMetrics:
    """Performance metrics for a render operation."""

    processing_time_ms: float = 0.0
    output_size_bytes: int = 0
    nodes_rendered: int = 0
    memory_used_bytes: int = 0

    @property
    def nodes_per_second(self) -> float:
        """Calculate nodes rendered per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.nodes_rendered * 1000.0) / self.processing_time_ms


@dataclass
class RenderResult:
    """Rendered markup plus metadata about how it was produced."""

    output: str = ""
    success: bool = True
    separator: str = ""
    node_count: int = 0
    performance: RenderMetrics = field(default_factory=RenderMetrics)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            "success": self.success,
            "output": self.output,
            "separator": self.separator,
            "node_count": self.node_count,
            "processing_time_ms": self.performance.processing_time_ms,
            "output_size_bytes": self.performance.output_size_bytes,
            "memory_used_bytes": self.performance.memory_used_bytes,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "correlation_id": self.correlation_id,
        }
