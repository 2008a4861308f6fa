# piifilter/filters/urlencoded.py

"""Filter for application/x-www-form-urlencoded values and URL query strings."""

import re
from typing import Any, List, Tuple
from urllib.parse import quote_plus, unquote_plus, urlsplit

from piifilter.filters.base import Filter

_PAIR_SEPARATOR = "&"
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_WHITESPACE = re.compile(r"\s")


class UrlEncodedFilter(Filter):
    """Redacts individual fields of a form body or of a URL's query string.

    Names and values are percent-decoded before matching. Fields that are
    not redacted are emitted byte for byte as they arrived; redacted values
    are percent-encoded again. Field order and count never change.
    """

    name = "urlencoded"

    def redact_attribute(self, key: str, value: Any) -> Tuple[bool, Any]:
        if not isinstance(value, str):
            raise self.unprocessable(f"expected a string, got {type(value).__name__}")

        prefix, query, suffix = self._split_url(value)

        if "=" not in query:
            raise self.unprocessable("no name=value fields found")

        redacted, fields = self._redact_query(query)
        if not redacted:
            return False, value
        return True, prefix + _PAIR_SEPARATOR.join(fields) + suffix

    @staticmethod
    def _split_url(value: str) -> Tuple[str, str, str]:
        """Splits an absolute URL into (text before query, query, fragment part).

        A value that is not an absolute URL with a query is returned as the
        query itself.
        """
        if "?" not in value:
            return "", value, ""

        try:
            parts = urlsplit(value)
        except ValueError:
            return "", value, ""

        if not (parts.scheme and parts.netloc):
            return "", value, ""

        start = value.index("?") + 1
        fragment = value.find("#", start)
        end = fragment if fragment != -1 else len(value)
        return value[:start], value[start:end], value[end:]

    def _redact_query(self, query: str) -> Tuple[bool, List[str]]:
        redacted = False
        fields = []

        for raw in query.split(_PAIR_SEPARATOR):
            if "=" not in raw:
                fields.append(raw)
                continue

            raw_name, _, raw_value = raw.partition("=")
            if _WHITESPACE.search(raw_name):
                raise self.unprocessable("unencoded whitespace in a field name")
            name = self._decode(raw_name)
            field_value = self._decode(raw_value)

            result = self._matcher.evaluate(name, field_value)
            if result.matched:
                redacted = True
                fields.append(f"{raw_name}={quote_plus(result.redacted_value)}")
            else:
                fields.append(raw)

        return redacted, fields

    def _decode(self, text: str) -> str:
        if _BAD_ESCAPE.search(text):
            raise self.malformed("invalid percent-escape")
        try:
            return unquote_plus(text, errors="strict")
        except UnicodeDecodeError as e:
            raise self.malformed(f"percent-escapes are not valid UTF-8: {e.reason}") from e
