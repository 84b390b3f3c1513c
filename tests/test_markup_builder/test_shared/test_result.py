"""Tests for result objects, diagnostics and logging helpers."""

import logging

import pytest

from markup_builder.shared import (
    CorrelationLogger,
    DiagnosticEntry,
    DiagnosticSeverity,
    RenderMetrics,
    RenderResult,
    get_logger,
)


class TestDiagnosticEntry:
    """Test diagnostic entry validation."""

    def test_valid_entry(self) -> None:
        """Test creating a diagnostic entry."""
        entry = DiagnosticEntry(DiagnosticSeverity.WARNING, "careful", "renderer")
        assert entry.to_dict() == {
            "severity": "WARNING",
            "message": "careful",
            "component": "renderer",
            "details": None,
        }

    def test_empty_message_raises(self) -> None:
        """Test empty messages are rejected."""
        with pytest.raises(ValueError, match="Diagnostic message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "renderer")

    def test_empty_component_raises(self) -> None:
        """Test empty component names are rejected."""
        with pytest.raises(ValueError, match="Diagnostic component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "msg", "")


class TestRenderResult:
    """Test RenderResult helpers."""

    def test_defaults(self) -> None:
        """Test a fresh result is successful and empty."""
        result = RenderResult()
        assert result.success is True
        assert result.output == ""
        assert result.diagnostics == []
        assert result.processing_time_ms == 0.0
        assert not result.has_errors()

    def test_add_diagnostic_carries_correlation_id(self) -> None:
        """Test diagnostics inherit the result's correlation ID."""
        result = RenderResult(correlation_id="abc")
        result.add_diagnostic(DiagnosticSeverity.ERROR, "bad", "renderer")

        assert result.diagnostics[0].correlation_id == "abc"
        assert result.has_errors()
        assert len(result.get_diagnostics_by_severity(DiagnosticSeverity.ERROR)) == 1
        assert result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING) == []

    def test_to_dict(self) -> None:
        """Test dictionary conversion."""
        result = RenderResult(output="<p></p>", node_count=1)
        result.performance.output_size_bytes = 7
        data = result.to_dict()

        assert data["output"] == "<p></p>"
        assert data["node_count"] == 1
        assert data["output_size_bytes"] == 7
        assert data["diagnostics"] == []

    def test_nodes_per_second(self) -> None:
        """Test throughput calculation."""
        assert RenderMetrics().nodes_per_second == 0.0
        assert RenderMetrics(processing_time_ms=500.0, nodes_rendered=10).nodes_per_second == 20.0


class TestCorrelationLogger:
    """Test correlation-aware logging."""

    def test_get_logger_defaults_component(self) -> None:
        """Test the component defaults to the last dotted name segment."""
        logger = get_logger("markup_builder.tree.node")
        assert isinstance(logger, CorrelationLogger)
        assert logger.component == "node"
        assert logger.correlation_id is None

    def test_records_carry_extras(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test component and correlation ID are attached to records."""
        logger = get_logger("markup_builder.test", "corr-1", "tester")
        with caplog.at_level(logging.INFO, logger="markup_builder.test"):
            logger.info("hello", extra={"nodes": 3})

        record = caplog.records[0]
        assert record.component == "tester"
        assert record.correlation_id == "corr-1"
        assert record.nodes == 3

    def test_is_enabled_for(self) -> None:
        """Test level checks delegate to the wrapped logger."""
        logger = get_logger("markup_builder.level_check")
        logger.logger.setLevel(logging.WARNING)
        assert logger.is_enabled_for(logging.ERROR)
        assert not logger.is_enabled_for(logging.DEBUG)
