# piifilter/__init__.py

"""PII detection and redaction for telemetry span attributes.

The engine inspects span attributes, recognises values encoded as plain
scalars, cookie headers, URL-encoded forms or JSON documents, and rewrites
any part that matches a configured sensitive-data rule.
"""

from piifilter.core.definitions import RedactStrategy
from piifilter.core.domain import MatchResult, Rule, RuleDefinition
from piifilter.core.exceptions import (
    ConfigurationError,
    FilterError,
    InitializationError,
    InvalidRuleConfigurationError,
    MalformedEncodingError,
    PiiFilterError,
    UnprocessableValueError,
)
from piifilter.engine.matcher import Matcher
from piifilter.service.pipeline import FilterChain, build_chain, build_matcher

__all__ = [
    "ConfigurationError",
    "FilterChain",
    "FilterError",
    "InitializationError",
    "InvalidRuleConfigurationError",
    "MalformedEncodingError",
    "MatchResult",
    "Matcher",
    "PiiFilterError",
    "RedactStrategy",
    "Rule",
    "RuleDefinition",
    "UnprocessableValueError",
    "build_chain",
    "build_matcher",
]
