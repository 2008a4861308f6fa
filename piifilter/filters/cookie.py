# piifilter/filters/cookie.py

"""Filter for cookie header values (``name=value; name2=value2``)."""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from piifilter.filters.base import Filter

_SEPARATOR = ";"

# RFC 6265 cookie-name token.
_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


@dataclass
class _Segment:
    """One ``;``-delimited piece of a cookie string.

    ``raw`` is the untouched source text; ``name`` and ``value`` are set only
    for segments of the form ``token=value``.
    """

    raw: str
    name: Optional[str] = None
    value: Optional[str] = None
    quoted: bool = False

    def render(self, value: str) -> str:
        """Rebuilds the segment with a new value, keeping the surrounding whitespace."""
        head, _, tail = self.raw.partition("=")
        leading = tail[: len(tail) - len(tail.lstrip())]
        trailing = tail[len(tail.rstrip()) :]
        if self.quoted:
            value = f'"{value}"'
        return f"{head}={leading}{value}{trailing}"


def _parse(text: str) -> List[_Segment]:
    segments = []
    for raw in text.split(_SEPARATOR):
        if "=" not in raw:
            segments.append(_Segment(raw=raw))
            continue

        name, _, value = raw.partition("=")
        name = name.strip()
        if not _TOKEN.match(name):
            segments.append(_Segment(raw=raw))
            continue

        value = value.strip()

        quoted = len(value) >= 2 and value.startswith('"') and value.endswith('"')
        if quoted:
            value = value[1:-1]

        segments.append(_Segment(raw=raw, name=name, value=value, quoted=quoted))
    return segments


class CookieFilter(Filter):
    """Redacts individual cookies within a Cookie or Set-Cookie header value.

    Each cookie name is evaluated as the key and its value as the value,
    independently of the attribute key. Segments are re-joined in their
    original order with their original separators and whitespace.

    A lone ``name=value`` pair with no ``;`` and no ``&`` is accepted here
    too. Such a form body is therefore redacted by this filter before the
    URL-encoded filter sees it, and the replacement is written without
    percent-encoding.
    """

    name = "cookie"

    def redact_attribute(self, key: str, value: Any) -> Tuple[bool, Any]:
        if not isinstance(value, str):
            raise self.unprocessable(f"expected a string, got {type(value).__name__}")

        if _SEPARATOR not in value and "&" in value:
            raise self.unprocessable("looks like form data, not a cookie header")

        segments = _parse(value)
        if not any(s.name is not None for s in segments):
            raise self.unprocessable("no name=value pairs found")

        redacted = False
        parts = []
        for segment in segments:
            if segment.name is None:
                parts.append(segment.raw)
                continue

            result = self._matcher.evaluate(segment.name, segment.value)
            if result.matched:
                redacted = True
                parts.append(segment.render(result.redacted_value))
            else:
                parts.append(segment.raw)

        if not redacted:
            return False, value
        return True, _SEPARATOR.join(parts)
