# piifilter/service/processor.py

"""OpenTelemetry integration: redact span attributes before export."""

import logging
from typing import Optional, Sequence

from opentelemetry.context import Context
from opentelemetry.sdk.trace import ReadableSpan, Span, SpanProcessor
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from piifilter.service.pipeline import FilterChain, PiiFilterService
from piifilter.service.walker import redact_attributes

logger = logging.getLogger(__name__)


def redact_span(span: ReadableSpan, chain: FilterChain) -> int:
    """Replaces the attributes of a finished span with their redacted form.

    Finished spans expose read-only attributes, so the redacted copy is
    swapped in as the span's attribute store. Span identity, name, events
    and links are untouched.

    Returns:
        Number of attributes redacted
    """
    if not span.attributes:
        return 0

    attributes = dict(span.attributes)
    redacted = redact_attributes(attributes, chain)
    if redacted:
        span._attributes = attributes
    return redacted


class PiiFilterSpanProcessor(SpanProcessor):
    """Span processor that redacts attributes when a span ends.

    Register it on the TracerProvider before the exporting processor so the
    exporter only ever sees redacted spans.
    """

    def __init__(self, chain: Optional[FilterChain] = None) -> None:
        self._chain = chain or PiiFilterService.get_instance()

    def on_start(self, span: Span, parent_context: Optional[Context] = None) -> None:
        """Nothing to do on start; attributes are redacted once the span ends."""

    def on_end(self, span: ReadableSpan) -> None:
        try:
            redact_span(span, self._chain)
        except Exception:
            logger.exception("Failed to redact span %s", span.name)

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True


class RedactingSpanExporter(SpanExporter):
    """Exporter wrapper that redacts every span of a batch before delegating."""

    def __init__(self, delegate: SpanExporter, chain: Optional[FilterChain] = None) -> None:
        self._delegate = delegate
        self._chain = chain or PiiFilterService.get_instance()

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        for span in spans:
            try:
                redact_span(span, self._chain)
            except Exception:
                logger.exception("Failed to redact span %s", span.name)
        return self._delegate.export(spans)

    def shutdown(self) -> None:
        self._delegate.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._delegate.force_flush(timeout_millis)
