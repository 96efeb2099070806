"""
Unit tests for update classification
"""
import pytest

from helm_update_manager.utils.version_compare import classify_update, parse_version


class TestParseVersion:
    def test_plain(self):
        assert parse_version("1.2.3") is not None

    def test_v_prefix(self):
        assert parse_version("v1.2.3") == parse_version("1.2.3")

    def test_garbage(self):
        assert parse_version("latest") is None


class TestClassifyUpdate:
    @pytest.mark.parametrize("current,latest,expected", [
        ("1.0.0", "2.0.0", "major"),
        ("1.0.0", "1.1.0", "minor"),
        ("1.0.0", "1.0.1", "patch"),
        ("1.0.0", "1.0.0", "up-to-date"),
        ("2.0.0", "1.0.0", "downgrade"),
        ("1.0.0", "latest", "unknown"),
        ("1.0.0", "", "unknown"),
    ])
    def test_classify(self, current, latest, expected):
        assert classify_update(current, latest) == expected

    def test_equal_but_differently_formatted(self):
        """1.0 and 1.0.0 are different pins even though they compare equal"""
        assert classify_update("1.0", "1.0.0") == "equivalent"
