"""
Shared test fixtures for piifilter tests.

The default fixtures use the rule set from the end-to-end scenario: one key
rule for authorization headers and one hashed value rule for SSNs.
"""

from __future__ import annotations

import hashlib
import threading
from typing import Sequence

import pytest
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from piifilter.core.definitions import RedactStrategy
from piifilter.core.domain import RuleDefinition
from piifilter.engine.matcher import Matcher
from piifilter.service.pipeline import FilterChain, PiiFilterService, build_chain

SSN = "123-45-6789"
SSN_HASH = hashlib.sha256(SSN.encode("utf-8")).hexdigest()
MARKER = "<REDACTED>"

KEY_RULES = [
    RuleDefinition(regex="^authorization$", fqn="auth-token", strategy=RedactStrategy.FULL),
]
VALUE_RULES = [
    RuleDefinition(regex="[0-9]{3}-[0-9]{2}-[0-9]{4}", fqn="ssn", strategy=RedactStrategy.HASH),
]


class InMemorySpanExporter(SpanExporter):
    """Minimal in-memory exporter for test assertions."""

    def __init__(self) -> None:
        self._spans: list[ReadableSpan] = []
        self._lock = threading.Lock()

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        with self._lock:
            self._spans.extend(spans)
        return SpanExportResult.SUCCESS

    def get_finished_spans(self) -> list[ReadableSpan]:
        with self._lock:
            return list(self._spans)

    def clear(self) -> None:
        with self._lock:
            self._spans.clear()

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 0) -> bool:
        return True


@pytest.fixture
def matcher() -> Matcher:
    return Matcher(KEY_RULES, VALUE_RULES, RedactStrategy.FULL)


@pytest.fixture
def chain(matcher: Matcher) -> FilterChain:
    return build_chain(matcher)


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture(autouse=True)
def _reset_service():
    """Make sure no test leaks the process-wide chain into another."""
    PiiFilterService.reset()
    yield
    PiiFilterService.reset()
