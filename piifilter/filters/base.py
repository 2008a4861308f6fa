# piifilter/filters/base.py

"""Base class for format-specific attribute filters."""

from abc import ABC, abstractmethod
from typing import Any, Tuple

from piifilter.core.exceptions import MalformedEncodingError, UnprocessableValueError
from piifilter.engine.matcher import Matcher


class Filter(ABC):
    """Redacts sensitive data from one attribute encoded in one format.

    Subclasses hold nothing but a reference to the shared matcher, so a
    single instance can serve any number of threads.
    """

    name: str = "filter"

    def __init__(self, matcher: Matcher) -> None:
        self._matcher = matcher

    @property
    def matcher(self) -> Matcher:
        return self._matcher

    @abstractmethod
    def redact_attribute(self, key: str, value: Any) -> Tuple[bool, Any]:
        """Redacts an attribute value.

        Args:
            key: Attribute key
            value: Attribute value

        Returns:
            Tuple of (redacted, value). The value is the input unchanged
            when nothing was redacted.

        Raises:
            UnprocessableValueError: If the value is not in this filter's format.
            MalformedEncodingError: If the value is in this filter's format but
                cannot be decoded safely.
        """
        pass

    def unprocessable(self, reason: str) -> UnprocessableValueError:
        return UnprocessableValueError(reason, filter_name=self.name)

    def malformed(self, reason: str) -> MalformedEncodingError:
        return MalformedEncodingError(reason, filter_name=self.name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
