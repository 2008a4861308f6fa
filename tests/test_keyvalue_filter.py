"""Tests for the key/value filter."""

import pytest

from piifilter.filters import KeyValueFilter

from tests.conftest import MARKER, SSN, SSN_HASH


@pytest.fixture
def kv_filter(matcher):
    return KeyValueFilter(matcher)


class TestKeyValueFilter:
    def test_name(self, kv_filter):
        assert kv_filter.name == "keyvalue"

    def test_redacts_by_key(self, kv_filter):
        assert kv_filter.redact_attribute("authorization", "Bearer xyz") == (True, MARKER)

    def test_redacts_by_value(self, kv_filter):
        redacted, value = kv_filter.redact_attribute("note", f"ssn {SSN} on file")
        assert redacted
        assert value == f"ssn {SSN_HASH} on file"

    def test_no_match_returns_original(self, kv_filter):
        original = "hello"
        redacted, value = kv_filter.redact_attribute("greeting", original)
        assert not redacted
        assert value is original

    def test_non_string_scalars_pass_through(self, kv_filter):
        assert kv_filter.redact_attribute("http.status_code", 200) == (False, 200)
        assert kv_filter.redact_attribute("error", False) == (False, False)

    def test_sequence_elements_use_attribute_key(self, kv_filter):
        redacted, value = kv_filter.redact_attribute("authorization", ("a", "b"))
        assert redacted
        assert value == (MARKER, MARKER)

    def test_sequence_elements_matched_by_value(self, kv_filter):
        redacted, value = kv_filter.redact_attribute("notes", ["fine", SSN])
        assert redacted
        assert value == ["fine", SSN_HASH]
        assert isinstance(value, list)

    def test_sequence_without_match_is_untouched(self, kv_filter):
        original = ("a", "b")
        redacted, value = kv_filter.redact_attribute("tags", original)
        assert not redacted
        assert value is original

    def test_mapping_members_use_their_own_keys(self, kv_filter):
        redacted, value = kv_filter.redact_attribute(
            "headers", {"authorization": "Bearer xyz", "accept": "*/*"}
        )
        assert redacted
        assert value == {"authorization": MARKER, "accept": "*/*"}

    def test_mapping_under_sensitive_key_is_fully_redacted(self, kv_filter):
        redacted, value = kv_filter.redact_attribute(
            "authorization", {"scheme": "Bearer", "params": ["xyz", ""], "n": 1}
        )
        assert redacted
        assert value == {"scheme": MARKER, "params": [MARKER, ""], "n": MARKER}

    def test_nested_mapping(self, kv_filter):
        redacted, value = kv_filter.redact_attribute("ctx", {"user": {"id": SSN}})
        assert redacted
        assert value == {"user": {"id": SSN_HASH}}
