# piifilter/service/walker.py

"""Attribute walker: runs the filter chain over every attribute of every span."""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, MutableMapping, Optional

from piifilter.service.pipeline import FilterChain, PiiFilterService

logger = logging.getLogger(__name__)


@dataclass
class WalkSummary:
    """Counts gathered while walking a batch of spans.

    Attributes:
        spans: Spans visited
        attributes: Attributes evaluated
        redacted: Attributes whose value was replaced
    """

    spans: int = 0
    attributes: int = 0
    redacted: int = 0


def redact_attributes(
    attributes: MutableMapping[str, Any], chain: Optional[FilterChain] = None
) -> int:
    """Runs the chain once per attribute, replacing redacted values in place.

    Args:
        attributes: Mutable attribute mapping of one span
        chain: Filter chain; the service singleton when omitted

    Returns:
        Number of attributes redacted
    """
    chain = chain or PiiFilterService.get_instance()
    redacted_count = 0

    # Snapshot the items so values can be replaced during the walk.
    for key, value in list(attributes.items()):
        redacted, new_value = chain.apply(key, value)
        if redacted:
            attributes[key] = new_value
            redacted_count += 1

    return redacted_count


def _attributes_of(span: Any) -> Optional[MutableMapping[str, Any]]:
    if isinstance(span, MutableMapping):
        return span
    return getattr(span, "attributes", None)


def redact_spans(spans: Iterable[Any], chain: Optional[FilterChain] = None) -> WalkSummary:
    """Redacts every attribute on every span of a batch.

    A span is either a mutable attribute mapping or any object exposing one
    as ``attributes``. Spans without attributes are counted and skipped.

    Args:
        spans: Batch of spans
        chain: Filter chain; the service singleton when omitted

    Returns:
        WalkSummary for the batch
    """
    chain = chain or PiiFilterService.get_instance()
    summary = WalkSummary()

    for span in spans:
        summary.spans += 1
        attributes = _attributes_of(span)
        if not attributes:
            continue

        summary.attributes += len(attributes)
        summary.redacted += redact_attributes(attributes, chain)

    if summary.redacted:
        logger.debug(
            "Redacted span batch",
            extra={
                "span_count": summary.spans,
                "attribute_count": summary.attributes,
                "redacted_count": summary.redacted,
            },
        )

    return summary
