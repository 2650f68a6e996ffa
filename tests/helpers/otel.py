"""OpenTelemetry test helper functions."""

from typing import TYPE_CHECKING

from opentelemetry.trace import StatusCode

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import ReadableSpan
    from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter


def get_spans_named(exporter: "InMemorySpanExporter", name: str) -> list["ReadableSpan"]:
    """
    Get recorded spans with the given name.

    Args:
        exporter: InMemorySpanExporter to retrieve spans from
        name: Span name to filter on

    Returns:
        Matching spans in finish order
    """
    return [span for span in exporter.get_finished_spans() if span.name == name]


def assert_span_status(
    span: "ReadableSpan",
    expected_status: StatusCode,
    *,
    check_exception: bool = False,
) -> None:
    """
    Assert span status and optionally verify exception event.

    Args:
        span: ReadableSpan to check
        expected_status: Expected StatusCode (OK or ERROR)
        check_exception: If True, verify exception event exists when status is ERROR

    Example:
        >>> span = spans[0]
        >>> assert_span_status(span, StatusCode.OK)
    """
    assert span.status.status_code == expected_status, (
        f"Expected span status {expected_status}, got {span.status.status_code}"
    )

    if check_exception and expected_status == StatusCode.ERROR:
        exception_events = [e for e in span.events if e.name == "exception"]
        assert len(exception_events) >= 1, "Expected exception event in ERROR span"
