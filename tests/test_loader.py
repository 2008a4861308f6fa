"""Tests for the YAML rule loader."""

import textwrap

import pytest

from piifilter.core.definitions import FieldLabel, RedactStrategy
from piifilter.core.exceptions import ConfigurationError
from piifilter.core.loader import DEFAULT_RULES_PATH, RuleLoader


def _write(tmp_path, content):
    path = tmp_path / "rules.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


class TestRuleLoader:
    def test_loads_rules_in_order(self, tmp_path):
        path = _write(
            tmp_path,
            """
            redact_strategy: hash
            key_rules:
              - regex: "^authorization$"
                fqn: auth-token
                redact_strategy: full
              - regex: "^password$"
            value_rules:
              - regex: "[0-9]{3}-[0-9]{2}-[0-9]{4}"
                fqn: ssn
                redact_strategy: MASK
            """,
        )
        rules = RuleLoader(path).load()

        assert rules.default_strategy is RedactStrategy.HASH
        assert [r.regex for r in rules.key_rules] == ["^authorization$", "^password$"]
        assert rules.key_rules[0].strategy is RedactStrategy.FULL
        assert rules.key_rules[1].strategy is None
        assert rules.key_rules[1].fqn == ""
        assert rules.value_rules[0].fqn == "ssn"
        assert rules.value_rules[0].strategy is RedactStrategy.PARTIAL

    def test_one_section_is_enough(self, tmp_path):
        path = _write(tmp_path, 'value_rules:\n  - regex: "x"\n')
        rules = RuleLoader(path).load()
        assert rules.key_rules == ()
        assert len(rules.value_rules) == 1
        assert rules.default_strategy is None

    def test_result_is_cached(self, tmp_path):
        path = _write(tmp_path, 'key_rules:\n  - regex: "x"\n')
        loader = RuleLoader(path)
        first = loader.load()
        path.unlink()
        assert loader.load() is first

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            RuleLoader(tmp_path / "nope.yaml").load()

    def test_empty_file(self, tmp_path):
        path = _write(tmp_path, "")
        with pytest.raises(ConfigurationError, match="empty"):
            RuleLoader(path).load()

    def test_invalid_yaml(self, tmp_path):
        path = _write(tmp_path, "key_rules: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Failed to parse"):
            RuleLoader(path).load()

    def test_not_a_mapping(self, tmp_path):
        path = _write(tmp_path, "- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            RuleLoader(path).load()

    def test_no_rule_sections(self, tmp_path):
        path = _write(tmp_path, "redact_strategy: full\n")
        with pytest.raises(ConfigurationError, match="at least one"):
            RuleLoader(path).load()

    def test_section_must_be_list(self, tmp_path):
        path = _write(tmp_path, "key_rules:\n  regex: x\n")
        with pytest.raises(ConfigurationError, match="must be a list"):
            RuleLoader(path).load()

    def test_rule_requires_regex(self, tmp_path):
        path = _write(tmp_path, "key_rules:\n  - fqn: nothing\n")
        with pytest.raises(ConfigurationError, match=r"key_rules\[0\]"):
            RuleLoader(path).load()

    def test_unknown_strategy(self, tmp_path):
        path = _write(tmp_path, 'value_rules:\n  - regex: "x"\n    redact_strategy: shred\n')
        with pytest.raises(ConfigurationError, match="redact_strategy"):
            RuleLoader(path).load()


class TestDefaultRules:
    def test_default_path_is_packaged(self):
        assert RuleLoader().path == DEFAULT_RULES_PATH
        assert DEFAULT_RULES_PATH.exists()

    def test_default_rules_load(self):
        rules = RuleLoader().load()
        key_fqns = [r.fqn for r in rules.key_rules]
        value_fqns = [r.fqn for r in rules.value_rules]

        assert FieldLabel.AUTH_TOKEN in key_fqns
        assert FieldLabel.PASSWORD in key_fqns
        assert FieldLabel.API_KEY in key_fqns
        assert FieldLabel.SESSION_ID in key_fqns
        assert value_fqns[0] == FieldLabel.SSN
        assert FieldLabel.EMAIL in value_fqns
        assert FieldLabel.CREDIT_CARD in value_fqns
