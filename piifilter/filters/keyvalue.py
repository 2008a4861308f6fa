# piifilter/filters/keyvalue.py

"""Filter treating the attribute as a single key/value field."""

from typing import Any, Mapping, Optional, Tuple

from piifilter.core.domain import Rule
from piifilter.engine.matcher import project
from piifilter.filters.base import Filter


class KeyValueFilter(Filter):
    """Evaluates the attribute key and value directly.

    Scalars are evaluated once. Array values are evaluated element by
    element under the attribute key and keep their sequence type. Mapping
    values are evaluated member by member under each member's own key,
    unless the attribute key itself matches a key rule, in which case every
    leaf is redacted with that rule.
    """

    name = "keyvalue"

    def redact_attribute(self, key: str, value: Any) -> Tuple[bool, Any]:
        return self._redact(key, value)

    def _redact(self, key: Optional[str], value: Any) -> Tuple[bool, Any]:
        if isinstance(value, Mapping):
            rule = self._matcher.match_key(key)
            if rule is not None:
                return self._redact_leaves(value, rule)
            return self._redact_mapping(value)

        if isinstance(value, (list, tuple)):
            redacted = False
            items = []
            for item in value:
                item_redacted, item = self._redact(key, item)
                redacted = redacted or item_redacted
                items.append(item)
            return (True, type(value)(items)) if redacted else (False, value)

        result = self._matcher.evaluate(key, value)
        if result.matched:
            return True, result.redacted_value
        return False, value

    def _redact_mapping(self, value: Mapping) -> Tuple[bool, Any]:
        redacted = False
        members = {}
        for member_key, member_value in value.items():
            member_redacted, member_value = self._redact(member_key, member_value)
            redacted = redacted or member_redacted
            members[member_key] = member_value
        return (True, members) if redacted else (False, value)

    def _redact_leaves(self, value: Any, rule: Rule) -> Tuple[bool, Any]:
        """Applies rule's strategy to every non-empty scalar leaf of value."""
        if isinstance(value, Mapping):
            redacted = False
            members = {}
            for member_key, member_value in value.items():
                member_redacted, members[member_key] = self._redact_leaves(member_value, rule)
                redacted = redacted or member_redacted
            return (True, members) if redacted else (False, value)

        if isinstance(value, (list, tuple)):
            results = [self._redact_leaves(item, rule) for item in value]
            if any(r for r, _ in results):
                return True, type(value)(v for _, v in results)
            return False, value

        text = project(value)
        if not text:
            return False, value
        return True, self._matcher.anonymizer.redact(text, rule.strategy)
