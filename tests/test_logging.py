"""Tests for logging configuration module."""

import json
import logging
import sys
from io import StringIO
from unittest.mock import MagicMock, patch

import structlog
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from transit_norm.core.logging import _add_otel_context, configure_logging


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_sets_log_level(self) -> None:
        configure_logging(log_level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

        configure_logging(log_level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_configure_logging_default_level_is_info(self) -> None:
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_case_insensitive(self) -> None:
        configure_logging(log_level="Debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_sets_noisy_loggers_to_warning(self) -> None:
        """Test that exporter loggers stay at WARNING even when root is DEBUG."""
        configure_logging(log_level="DEBUG")

        assert logging.getLogger("urllib3").level == logging.WARNING
        assert logging.getLogger("urllib3.connectionpool").level == logging.WARNING
        assert logging.getLogger("opentelemetry.exporter.otlp.proto.http").level == logging.WARNING

    def test_configure_logging_replaces_existing_handlers(self) -> None:
        root_logger = logging.getLogger()
        dummy_handler = logging.StreamHandler()
        root_logger.addHandler(dummy_handler)

        configure_logging()

        assert dummy_handler not in root_logger.handlers
        assert len(root_logger.handlers) == 1

    def test_configure_logging_handler_outputs_to_stdout(self) -> None:
        configure_logging()

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream == sys.stdout

    def test_debug_level_renders_json(self) -> None:
        """Test that DEBUG output is one JSON object per line."""
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            configure_logging(log_level="DEBUG")
            structlog.get_logger("transit_norm.test").info("adapter_created", network="vrs")
            output = mock_stdout.getvalue().strip().splitlines()[-1]

        event = json.loads(output)
        assert event["event"] == "adapter_created"
        assert event["network"] == "vrs"
        assert event["level"] == "info"
        assert event["logger"] == "transit_norm.test"

    def test_stdlib_logger_routed_through_structlog(self) -> None:
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            configure_logging(log_level="INFO")
            logging.getLogger("stdlib_test").info("stdlib message")
            output = mock_stdout.getvalue()

        assert "stdlib message" in output


class TestAddOtelContext:
    """Tests for _add_otel_context processor."""

    def test_adds_trace_and_span_ids_with_active_span(self) -> None:
        mock_span_context = MagicMock()
        mock_span_context.trace_id = 0x1234567890ABCDEF1234567890ABCDEF
        mock_span_context.span_id = 0x1234567890ABCDEF

        mock_span = MagicMock()
        mock_span.is_recording.return_value = True
        mock_span.get_span_context.return_value = mock_span_context

        with patch.object(trace, "get_current_span", return_value=mock_span):
            result = _add_otel_context(logging.getLogger(), "info", {"event": "test_event"})

        assert result["trace_id"] == "1234567890abcdef1234567890abcdef"
        assert result["span_id"] == "1234567890abcdef"

    def test_no_trace_ids_without_active_span(self) -> None:
        mock_span = MagicMock()
        mock_span.is_recording.return_value = False

        with patch.object(trace, "get_current_span", return_value=mock_span):
            result = _add_otel_context(logging.getLogger(), "info", {"event": "test_event"})

        assert "trace_id" not in result
        assert "span_id" not in result
        assert result["event"] == "test_event"

    def test_real_span_ids_are_attached(
        self, otel_enabled_provider: tuple[TracerProvider, InMemorySpanExporter]
    ) -> None:
        provider, _ = otel_enabled_provider
        tracer = provider.get_tracer(__name__)

        with tracer.start_as_current_span("adapter.normalize_lines") as span:
            result = _add_otel_context(logging.getLogger(), "info", {"event": "test_event"})
            expected_trace_id = format(span.get_span_context().trace_id, "032x")

        assert result["trace_id"] == expected_trace_id
        assert len(result["span_id"]) == 16
