"""
Tests for BigNumberField.cast_for_query.

Only the allow-listed conditionals are accepted; every value is cast and
rendered so the store compares the same text it stored.
"""

import pytest

from bignumber_kernel.exceptions import CastError, UnsupportedOperatorError
from bignumber_kernel.fields.big_number_field import BigNumberField
from bignumber_kernel.fields.query import (
    SCALAR_CONDITIONALS,
    SET_CONDITIONALS,
    Conditional,
    resolve_conditional,
)


@pytest.fixture
def field():
    return BigNumberField("value")


class TestNoOperator:
    def test_casts_and_renders(self, field):
        assert field.cast_for_query(None, 5) == "5"

    def test_applies_scale(self):
        assert BigNumberField("scaled", scale=2).cast_for_query(None, "1.234") == "1.23"

    def test_none_stays_none(self, field):
        assert field.cast_for_query(None, None) is None

    def test_cast_error_propagates(self, field):
        with pytest.raises(CastError):
            field.cast_for_query(None, "abc")


class TestScalarConditionals:
    @pytest.mark.parametrize("operator", ["lt", "lte", "gt", "gte", "eq", "ne"])
    def test_single_string(self, field, operator):
        assert field.cast_for_query(operator, 5) == "5"

    def test_dollar_prefix_accepted(self, field):
        assert field.cast_for_query("$gte", "7.0") == "7"


class TestSetConditionals:
    def test_scalar_is_wrapped(self, field):
        assert field.cast_for_query("in", 5) == ["5"]

    def test_list_preserves_order(self, field):
        assert field.cast_for_query("in", [4, 5, 6]) == ["4", "5", "6"]
        assert field.cast_for_query("$in", [6, 4]) == ["6", "4"]

    @pytest.mark.parametrize("operator", ["nin", "mod", "all"])
    def test_other_set_conditionals(self, field, operator):
        assert field.cast_for_query(operator, (1, "2")) == ["1", "2"]

    def test_cast_error_inside_list(self, field):
        with pytest.raises(CastError) as exc_info:
            field.cast_for_query("in", [1, "two", 3])
        assert exc_info.value.raw_value == "two"


class TestUnsupportedOperators:
    @pytest.mark.parametrize("operator", ["size", "regex", "exists", "$where", "IN"])
    def test_rejected(self, field, operator):
        with pytest.raises(UnsupportedOperatorError) as exc_info:
            field.cast_for_query(operator, 1)
        assert exc_info.value.operator == operator

    def test_message(self, field):
        with pytest.raises(UnsupportedOperatorError, match=r"^Can't use size with BigNumber\.$"):
            field.cast_for_query("size", 1)

    def test_rejection_is_logged(self, field, captured_logs):
        with pytest.raises(UnsupportedOperatorError):
            field.cast_for_query("size", 1)
        records = [r for r in captured_logs() if r["message"] == "unsupported_operator"]
        assert len(records) == 1
        assert records[0]["level"] == "WARNING"
        assert records[0]["operator"] == "size"


class TestConditionalTable:
    def test_allow_list_is_partitioned(self):
        assert SCALAR_CONDITIONALS | SET_CONDITIONALS == set(Conditional)
        assert not SCALAR_CONDITIONALS & SET_CONDITIONALS

    def test_resolve(self):
        assert resolve_conditional("$nin") is Conditional.NIN
