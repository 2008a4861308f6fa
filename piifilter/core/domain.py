# piifilter/core/domain.py

"""Domain models for rules and match results."""

import re
from dataclasses import dataclass
from typing import Any, Optional, Pattern, Tuple

from piifilter.core.definitions import RedactStrategy
from piifilter.core.exceptions import InvalidRuleConfigurationError


@dataclass(frozen=True)
class RuleDefinition:
    """A rule as declared in configuration, before compilation.

    Attributes:
        regex: Regular expression source
        fqn: Logical label of the data the rule targets (e.g. user.email)
        strategy: Redaction strategy; None falls back to the matcher default
    """

    regex: str
    fqn: str = ""
    strategy: Optional[RedactStrategy] = None


@dataclass(frozen=True)
class Rule:
    """A compiled rule ready for matching.

    Attributes:
        pattern: Compiled regular expression
        strategy: Redaction strategy applied to matched text
        fqn: Logical label of the data the rule targets
    """

    pattern: Pattern
    strategy: RedactStrategy
    fqn: str

    @classmethod
    def compile(
        cls,
        definition: RuleDefinition,
        default_strategy: RedactStrategy,
        rule_set: str,
    ) -> "Rule":
        """Compiles a rule definition.

        Args:
            definition: Rule as declared in configuration
            default_strategy: Strategy used when the definition has none
            rule_set: Name of the owning rule set, for error reporting

        Returns:
            Compiled Rule

        Raises:
            InvalidRuleConfigurationError: If the pattern is empty or does
                not compile.
        """
        fqn = definition.fqn or definition.regex

        if not definition.regex:
            raise InvalidRuleConfigurationError(
                definition.regex, fqn, rule_set, "pattern is empty"
            )

        try:
            pattern = re.compile(definition.regex)
        except re.error as e:
            raise InvalidRuleConfigurationError(
                definition.regex, fqn, rule_set, str(e)
            ) from e

        return cls(
            pattern=pattern,
            strategy=definition.strategy or default_strategy,
            fqn=fqn,
        )


@dataclass(frozen=True)
class MatchResult:
    """Outcome of evaluating one key/value pair.

    Attributes:
        rule: Rule that matched, None when nothing matched
        redacted_value: Value after the rule's strategy was applied
    """

    rule: Optional[Rule] = None
    redacted_value: Any = None

    @property
    def matched(self) -> bool:
        return self.rule is not None

    @property
    def fqn(self) -> Optional[str]:
        return self.rule.fqn if self.rule else None


NO_MATCH = MatchResult()


@dataclass(frozen=True)
class RuleSet:
    """Ordered rule definitions read from a rule file.

    Attributes:
        key_rules: Rules matched against attribute keys, in priority order
        value_rules: Rules matched against attribute values, in priority order
        default_strategy: Strategy declared by the file, if any
    """

    key_rules: Tuple[RuleDefinition, ...] = ()
    value_rules: Tuple[RuleDefinition, ...] = ()
    default_strategy: Optional[RedactStrategy] = None
