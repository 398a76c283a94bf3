"""Tests for scalar coercers."""
import pytest

from insolvex.core.coerce import as_bool, as_list, as_mapping, as_number, as_str, first_str, is_not_found
from insolvex.core.models import NOT_FOUND


class TestAsStr:

    def test_keeps_strings(self):
        assert as_str("Tribunalul Cluj") == "Tribunalul Cluj"

    @pytest.mark.parametrize("value", [None, "", "  \n", 12, 1.5, True, {}, []])
    def test_defaults(self, value):
        assert as_str(value) == NOT_FOUND

    def test_custom_default(self):
        assert as_str(None, default="other") == "other"


class TestAsNumber:

    @pytest.mark.parametrize("value", [0, 45255, 12.5, -3])
    def test_keeps_numbers(self, value):
        assert as_number(value) == value

    @pytest.mark.parametrize("value", [None, "45255", True, False, [1], {"value": 1}])
    def test_rejects_non_numbers(self, value):
        """Numeric strings and booleans are not numbers."""
        assert as_number(value) is None


class TestAsBool:

    def test_keeps_booleans(self):
        assert as_bool(True) is True
        assert as_bool(False) is False

    @pytest.mark.parametrize("value", [None, "true", "da", 1, 0])
    def test_rejects_non_booleans(self, value):
        assert as_bool(value) is None


class TestAsList:

    def test_keeps_list_without_inspecting_elements(self):
        entries = [{"creditorName": "ANAF"}, "garbage", None]
        assert as_list(entries) is entries

    @pytest.mark.parametrize("value", [None, {}, "a,b", 3])
    def test_defaults_to_fresh_list(self, value):
        first = as_list(value)
        second = as_list(value)
        assert first == [] and second == []
        assert first is not second


class TestHelpers:

    def test_as_mapping(self):
        assert as_mapping({"a": 1}) == {"a": 1}
        assert as_mapping([("a", 1)]) is None

    def test_first_str_skips_blank(self):
        assert first_str("", "  ", None, "RO 123", "later") == "RO 123"
        assert first_str(None, "") == NOT_FOUND

    def test_is_not_found(self):
        assert is_not_found(NOT_FOUND)
        assert is_not_found("")
        assert is_not_found(None)
        assert not is_not_found("ALFA SRL")
