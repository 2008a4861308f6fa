"""Tests for the OpenTelemetry span processor and exporter adapters."""

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor, SpanExportResult

from piifilter.service.processor import (
    PiiFilterSpanProcessor,
    RedactingSpanExporter,
    redact_span,
)

from tests.conftest import MARKER, SSN, SSN_HASH


def _tracer(*processors):
    provider = TracerProvider()
    for processor in processors:
        provider.add_span_processor(processor)
    return provider.get_tracer("piifilter-test")


class TestPiiFilterSpanProcessor:
    def test_exported_spans_are_redacted(self, chain, span_exporter):
        tracer = _tracer(PiiFilterSpanProcessor(chain), SimpleSpanProcessor(span_exporter))

        with tracer.start_as_current_span("login") as span:
            span.set_attribute("authorization", "Bearer xyz")
            span.set_attribute("note", f"ssn {SSN} on file")
            span.set_attribute("http.status_code", 200)

        (finished,) = span_exporter.get_finished_spans()
        assert finished.name == "login"
        assert dict(finished.attributes) == {
            "authorization": MARKER,
            "note": f"ssn {SSN_HASH} on file",
            "http.status_code": 200,
        }

    def test_array_attributes(self, chain, span_exporter):
        tracer = _tracer(PiiFilterSpanProcessor(chain), SimpleSpanProcessor(span_exporter))

        with tracer.start_as_current_span("batch") as span:
            span.set_attribute("ids", ["x", SSN])

        (finished,) = span_exporter.get_finished_spans()
        assert list(finished.attributes["ids"]) == ["x", SSN_HASH]

    def test_spans_without_matches_are_untouched(self, chain, span_exporter):
        tracer = _tracer(PiiFilterSpanProcessor(chain), SimpleSpanProcessor(span_exporter))

        with tracer.start_as_current_span("plain") as span:
            span.set_attribute("http.method", "GET")

        (finished,) = span_exporter.get_finished_spans()
        assert dict(finished.attributes) == {"http.method": "GET"}

    def test_lifecycle(self, chain):
        processor = PiiFilterSpanProcessor(chain)
        assert processor.force_flush() is True
        processor.shutdown()


class TestRedactingSpanExporter:
    def test_redacts_before_delegating(self, chain, span_exporter):
        tracer = _tracer(SimpleSpanProcessor(RedactingSpanExporter(span_exporter, chain)))

        with tracer.start_as_current_span("request") as span:
            span.set_attribute("http.request.header.cookie", "theme=dark; authorization=xyz")

        (finished,) = span_exporter.get_finished_spans()
        assert finished.attributes["http.request.header.cookie"] == (
            f"theme=dark; authorization={MARKER}"
        )

    def test_returns_delegate_result(self, chain, span_exporter):
        exporter = RedactingSpanExporter(span_exporter, chain)
        assert exporter.export([]) is SpanExportResult.SUCCESS
        assert exporter.force_flush() is True


class TestRedactSpan:
    def test_span_without_attributes(self, chain, span_exporter):
        tracer = _tracer(SimpleSpanProcessor(span_exporter))
        with tracer.start_as_current_span("empty"):
            pass

        (finished,) = span_exporter.get_finished_spans()
        assert redact_span(finished, chain) == 0

    @pytest.mark.parametrize("value, expected", [("t", 1), ("", 0)])
    def test_counts_redactions(self, chain, span_exporter, value, expected):
        tracer = _tracer(SimpleSpanProcessor(span_exporter))
        with tracer.start_as_current_span("s") as span:
            span.set_attribute("authorization", value)

        (finished,) = span_exporter.get_finished_spans()
        assert redact_span(finished, chain) == expected
