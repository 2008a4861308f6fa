# piifilter/core/loader.py

"""Rule file loader for the PII filter."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from piifilter.core.definitions import RedactStrategy
from piifilter.core.domain import RuleDefinition, RuleSet
from piifilter.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent / "rules.yaml"

_RULE_SECTIONS = ("key_rules", "value_rules")


class RuleLoader:
    """Loads key and value rules from a YAML file.

    The file is read once per loader; the resulting RuleSet is cached so the
    matcher can be rebuilt without touching the disk again.

    The packaged rules.yaml labels its rules with the FieldLabel FQNs.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_RULES_PATH
        self._rules: Optional[RuleSet] = None

    def load(self) -> RuleSet:
        """Returns the rule set, reading the file on first use.

        Raises:
            ConfigurationError: If file is missing, invalid, or empty.
        """
        if self._rules is None:
            self._rules = self._load_config()
        return self._rules

    def _load_config(self) -> RuleSet:
        try:
            if not self.path.exists():
                error_msg = f"Rule file not found: {self.path}"
                logger.error(error_msg)
                raise ConfigurationError(error_msg)

            with open(self.path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)

            if not config:
                raise ConfigurationError("Rule file is empty or invalid")

            self._validate_config(config)

            rules = RuleSet(
                key_rules=self._parse_rules(config, "key_rules"),
                value_rules=self._parse_rules(config, "value_rules"),
                default_strategy=self._parse_strategy(
                    config.get("redact_strategy"), "redact_strategy"
                ),
            )

            logger.info(
                "Rule file loaded successfully",
                extra={
                    "rules_path": str(self.path),
                    "key_rule_count": len(rules.key_rules),
                    "value_rule_count": len(rules.value_rules),
                },
            )
            return rules

        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to parse {self.path.name}: {e}") from e
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Rule loading failed: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to load rules: {e}") from e

    def _validate_config(self, config: Any) -> None:
        """Validates the top-level shape of the rule file.

        Raises:
            ConfigurationError: If required sections are missing.
        """
        if not isinstance(config, dict):
            raise ConfigurationError("Rule file must contain a mapping")

        present = [s for s in _RULE_SECTIONS if s in config]
        if not present:
            error_msg = f"Rule file must define at least one of: {list(_RULE_SECTIONS)}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        for section in present:
            if config[section] is not None and not isinstance(config[section], list):
                raise ConfigurationError(f"Section '{section}' must be a list")

    def _parse_rules(
        self, config: Dict[str, Any], section: str
    ) -> Tuple[RuleDefinition, ...]:
        entries: List[Any] = config.get(section) or []
        rules = []

        for index, entry in enumerate(entries):
            where = f"{section}[{index}]"

            if not isinstance(entry, dict):
                raise ConfigurationError(f"{where} must be a mapping")

            regex = entry.get("regex")
            if not isinstance(regex, str) or not regex:
                raise ConfigurationError(f"{where} requires a non-empty 'regex' string")

            fqn = entry.get("fqn") or ""
            if not isinstance(fqn, str):
                raise ConfigurationError(f"{where}.fqn must be a string")

            rules.append(
                RuleDefinition(
                    regex=regex,
                    fqn=fqn,
                    strategy=self._parse_strategy(
                        entry.get("redact_strategy"), f"{where}.redact_strategy"
                    ),
                )
            )

        return tuple(rules)

    @staticmethod
    def _parse_strategy(value: Any, where: str) -> Optional[RedactStrategy]:
        if value is None:
            return None
        try:
            return RedactStrategy.parse(value)
        except ValueError as e:
            raise ConfigurationError(f"{where}: {e}") from e
