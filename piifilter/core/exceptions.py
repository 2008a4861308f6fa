# piifilter/core/exceptions.py

"""Custom exception hierarchy for the PII filter.

Configuration and construction errors are fatal at startup. Filter errors
are raised per attribute and are always contained by the filter chain.
"""

from typing import Optional


class PiiFilterError(Exception):
    """Base exception for all application-specific errors."""

    pass


class ConfigurationError(PiiFilterError):
    """Raised when configuration loading or validation fails."""

    pass


class InvalidRuleConfigurationError(ConfigurationError):
    """Raised when a rule pattern fails to compile."""

    def __init__(self, pattern: str, fqn: str, rule_set: str, reason: str) -> None:
        self.pattern = pattern
        self.fqn = fqn
        self.rule_set = rule_set
        super().__init__(
            f"Invalid {rule_set} rule '{fqn}' with pattern {pattern!r}: {reason}"
        )


class InitializationError(PiiFilterError):
    """Raised when the matcher or filter chain fails to initialize."""

    pass


class FilterError(PiiFilterError):
    """Base class for per-attribute failures raised by a filter."""

    def __init__(self, message: str, filter_name: Optional[str] = None) -> None:
        self.filter_name = filter_name
        super().__init__(message)


class UnprocessableValueError(FilterError):
    """Raised when a value is not encoded in the format a filter handles."""

    pass


class MalformedEncodingError(UnprocessableValueError):
    """Raised when a value looks like the filter's format but is broken.

    For example a truncated percent-escape in a form body. Control flow is
    the same as for UnprocessableValueError; only the log severity differs.
    """

    pass
