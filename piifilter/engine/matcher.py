# piifilter/engine/matcher.py

"""Rule matcher shared by every attribute filter."""

import logging
from typing import Any, List, Optional, Sequence, Tuple

from piifilter.core.definitions import RedactStrategy
from piifilter.core.domain import NO_MATCH, MatchResult, Rule, RuleDefinition
from piifilter.engine.anonymizer import TextAnonymizer

logger = logging.getLogger(__name__)

Span = Tuple[int, int]


def project(value: Any) -> Optional[str]:
    """Returns the canonical string form of a scalar attribute value.

    Booleans render as JSON literals, numbers in decimal and bytes are
    decoded as UTF-8. Containers, None and undecodable bytes have no
    projection and are never matched against value rules.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return None
    return None


class Matcher:
    """Evaluates key/value pairs against ordered key and value rules.

    Key rules are tried first, in declaration order, against the key. If
    none matches, value rules are tried in declaration order against the
    value. The first matching rule wins, so configuration order is
    significant.

    The matcher is immutable after construction and safe for concurrent use.
    """

    def __init__(
        self,
        key_rules: Sequence[RuleDefinition],
        value_rules: Sequence[RuleDefinition],
        default_strategy: RedactStrategy = RedactStrategy.FULL,
        anonymizer: Optional[TextAnonymizer] = None,
    ) -> None:
        """Compile the rule sets.

        Args:
            key_rules: Rules matched against keys, highest priority first
            value_rules: Rules matched against values, highest priority first
            default_strategy: Strategy for rules that declare none
            anonymizer: Strategy renderer; a default one is built if omitted

        Raises:
            InvalidRuleConfigurationError: If any pattern fails to compile.
        """
        self._default_strategy = RedactStrategy.parse(default_strategy)
        self._key_rules: Tuple[Rule, ...] = tuple(
            Rule.compile(r, self._default_strategy, "key") for r in key_rules
        )
        self._value_rules: Tuple[Rule, ...] = tuple(
            Rule.compile(r, self._default_strategy, "value") for r in value_rules
        )
        self._anonymizer = anonymizer or TextAnonymizer()

        logger.debug(
            "Matcher compiled",
            extra={
                "key_rule_count": len(self._key_rules),
                "value_rule_count": len(self._value_rules),
                "default_strategy": self._default_strategy.value,
            },
        )

    @property
    def key_rules(self) -> Tuple[Rule, ...]:
        return self._key_rules

    @property
    def value_rules(self) -> Tuple[Rule, ...]:
        return self._value_rules

    @property
    def default_strategy(self) -> RedactStrategy:
        return self._default_strategy

    @property
    def anonymizer(self) -> TextAnonymizer:
        return self._anonymizer

    def match_key(self, key: Optional[str]) -> Optional[Rule]:
        """Returns the first key rule matching key, if any."""
        if not key:
            return None
        for rule in self._key_rules:
            if rule.pattern.search(key):
                return rule
        return None

    def match_value(self, text: Optional[str]) -> Optional[Tuple[Rule, List[Span]]]:
        """Returns the first value rule matching text and all its match spans."""
        if not text:
            return None
        for rule in self._value_rules:
            spans = [m.span() for m in rule.pattern.finditer(text) if m.end() > m.start()]
            if spans:
                return rule, spans
        return None

    def evaluate(self, key: Optional[str], value: Any) -> MatchResult:
        """Evaluates one key/value pair.

        Args:
            key: Attribute or member name; None or empty for positional values
            value: Scalar value

        Returns:
            MatchResult; when matched, redacted_value is always a string
        """
        rule = self.match_key(key)
        if rule is not None:
            text = project(value)
            if text is None and isinstance(value, (bytes, bytearray)):
                text = bytes(value).hex()
            if not text:
                return NO_MATCH
            return MatchResult(rule, self._anonymizer.redact(text, rule.strategy))

        return self.evaluate_value(value)

    def evaluate_value(self, value: Any) -> MatchResult:
        """Evaluates value rules only, for values that have no matchable key."""
        text = project(value)
        found = self.match_value(text)
        if found is None:
            return NO_MATCH

        rule, spans = found
        return MatchResult(rule, self._anonymizer.redact_spans(text, spans, rule.strategy))
