# piifilter/filters/jsonfilter.py

"""Filter for JSON documents."""

import json
from typing import Any, Optional, Tuple

from piifilter.engine.matcher import Matcher
from piifilter.filters.base import Filter

_CONTAINER_OPENERS = ("{", "[")


class JsonFilter(Filter):
    """Redacts members and elements of a JSON document.

    The document is walked depth first. Object member names are matched as
    keys; array elements have no key and are matched by value only. A
    nested container is walked before its own member is evaluated, and key
    rules only ever apply to the immediate member name. Redacted numbers and
    booleans become strings.
    """

    name = "json"

    def __init__(self, matcher: Matcher, redact_containers: bool = False) -> None:
        """Initialize the filter.

        Args:
            matcher: Shared rule matcher
            redact_containers: Also match value rules against the serialized
                form of nested objects and arrays
        """
        super().__init__(matcher)
        self.redact_containers = redact_containers

    def redact_attribute(self, key: str, value: Any) -> Tuple[bool, Any]:
        if not isinstance(value, str):
            raise self.unprocessable(f"expected a string, got {type(value).__name__}")

        text = value.strip()
        if not text:
            raise self.unprocessable("empty document")

        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            if text.startswith(_CONTAINER_OPENERS):
                raise self.malformed(f"invalid JSON at position {e.pos}: {e.msg}") from e
            raise self.unprocessable("not a JSON document") from e

        redacted, document = self._walk(None, document)
        if not redacted:
            return False, value
        return True, self._dump(document, value)

    def _walk(self, key: Optional[str], node: Any) -> Tuple[bool, Any]:
        if isinstance(node, dict):
            redacted = False
            members = {}
            for member_key, member_value in node.items():
                member_redacted, members[member_key] = self._walk(member_key, member_value)
                redacted = redacted or member_redacted
            return self._evaluate_container(key, members, redacted)

        if isinstance(node, list):
            redacted = False
            items = []
            for item in node:
                item_redacted, item = self._walk(None, item)
                redacted = redacted or item_redacted
                items.append(item)
            return self._evaluate_container(key, items, redacted)

        result = self._matcher.evaluate(key, node)
        if result.matched:
            return True, result.redacted_value
        return False, node

    def _evaluate_container(self, key: Optional[str], node: Any, redacted: bool) -> Tuple[bool, Any]:
        """Evaluates the member that holds an already walked container."""
        rule = self._matcher.match_key(key)
        if rule is not None:
            serialized = json.dumps(node, ensure_ascii=False, separators=(",", ":"))
            return True, self._matcher.anonymizer.redact(serialized, rule.strategy)

        if self.redact_containers:
            serialized = json.dumps(node, ensure_ascii=False, separators=(",", ":"))
            result = self._matcher.evaluate_value(serialized)
            if result.matched:
                return True, result.redacted_value

        return redacted, node

    @staticmethod
    def _dump(document: Any, original: str) -> str:
        """Serializes document in roughly the layout of the original text."""
        if "\n" in original.strip():
            return json.dumps(document, ensure_ascii=False, indent=2)
        if ", " in original or ": " in original:
            return json.dumps(document, ensure_ascii=False)
        return json.dumps(document, ensure_ascii=False, separators=(",", ":"))
