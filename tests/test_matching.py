"""Tests for key pattern matching"""

import pytest

from hookstore.matching import matches
from hookstore.types import UNSET


class TestMatches:
    """Tests for matches()"""

    @pytest.mark.parametrize("key", ["foo", "user:1", "", "a b", "*"])
    def test_wildcard_matches_every_key(self, key):
        assert matches(key, "*") is True

    def test_exact_pattern_matches_key(self):
        assert matches("session", "session") is True

    def test_unrelated_literal_does_not_match(self):
        assert matches("session", "token") is False
        assert matches("session", "sess") is False

    def test_prefix_wildcard(self):
        assert matches("user:1", "user:*") is True
        assert matches("users", "user:*") is False

    def test_multiple_patterns(self):
        assert matches("token", "session,token") is True
        assert matches("token", "session token") is True
        assert matches("other", "session,token") is False

    def test_exclusion_wins(self):
        assert matches("user:admin", "user:*,-user:admin") is False
        assert matches("user:1", "user:*,-user:admin") is True

    def test_regex_characters_are_literal(self):
        assert matches("a.b", "a.b") is True
        assert matches("axb", "a.b") is False
        assert matches("a+b[1]", "a+b[*]") is True

    def test_missing_key_only_matches_wildcard(self):
        assert matches(None, "*") is True
        assert matches(UNSET, "*") is True
        assert matches(None, "user:*") is False
        assert matches(UNSET, "foo") is False

    def test_non_string_keys(self):
        assert matches(42, "42") is True
        assert matches(42, "4*") is True

    def test_none_pattern_never_matches(self):
        assert matches("foo", None) is False
