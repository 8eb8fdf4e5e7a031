"""
Query conditions against stored BigNumber text.

Rows are written through the column type and selected back with
condition(), so both sides of every comparison are rendered by the same
cast-and-render path.
"""

import pytest
from sqlalchemy import select

from bignumber_kernel.db.query import condition, field_of
from bignumber_kernel.exceptions import CastError, UnsupportedOperatorError


@pytest.fixture
def stored_five(session, sample_model):
    row = sample_model(label="five", value=5, scaled="1.234")
    session.add(row)
    session.flush()
    return row


def _labels(session, model, clause):
    return session.execute(select(model.label).where(clause)).scalars().all()


class TestComparisons:
    @pytest.mark.parametrize(
        "criterion, matches",
        [
            (5, True),
            ("5.0", True),
            ({"eq": 5}, True),
            ({"ne": 5}, False),
            ({"gt": 4}, True),
            ({"gt": 5}, False),
            ({"gte": 5}, True),
            ({"lt": 6}, True),
            ({"lt": 5}, False),
            ({"lte": 5}, True),
            ({"$gte": 4, "$lte": 6}, True),
            ({"gte": 4, "lte": 4}, False),
        ],
    )
    def test_scalar(self, session, sample_model, stored_five, criterion, matches):
        labels = _labels(session, sample_model, condition(sample_model.value, criterion))
        assert labels == (["five"] if matches else [])

    def test_ordering_follows_stored_text(self, session, sample_model, stored_five):
        # "5" sorts after "10" as text
        labels = _labels(session, sample_model, condition(sample_model.value, {"gt": 10}))
        assert labels == ["five"]


class TestSetConditions:
    @pytest.mark.parametrize(
        "criterion, matches",
        [
            ({"in": [4, 5, 6]}, True),
            ({"in": 5}, True),
            ({"in": [1, 2]}, False),
            ({"nin": [1, 2]}, True),
            ({"nin": [5]}, False),
            ({"all": [5, "5.0"]}, True),
            ({"all": [5, 6]}, False),
            ({"all": []}, False),
        ],
    )
    def test_set(self, session, sample_model, stored_five, criterion, matches):
        labels = _labels(session, sample_model, condition(sample_model.value, criterion))
        assert labels == (["five"] if matches else [])


class TestScaledColumn:
    def test_query_value_rendered_at_column_scale(self, session, sample_model, stored_five):
        assert _labels(session, sample_model, condition(sample_model.scaled, "1.234")) == ["five"]

    def test_plain_comparison_binds_through_column_type(
        self, session, sample_model, stored_five
    ):
        assert _labels(session, sample_model, sample_model.scaled == "1.231") == ["five"]
        assert _labels(session, sample_model, sample_model.value == 5) == ["five"]

    def test_null_condition(self, session, sample_model, stored_five):
        assert _labels(session, sample_model, condition(sample_model.nullable, None)) == ["five"]


class TestRejected:
    @pytest.mark.parametrize("operator", ["size", "$regex"])
    def test_unsupported_operator(self, sample_model, operator):
        with pytest.raises(UnsupportedOperatorError):
            condition(sample_model.value, {operator: 1})

    def test_mod_has_no_expression(self, sample_model):
        with pytest.raises(UnsupportedOperatorError, match="mod"):
            condition(sample_model.value, {"mod": [4, 1]})

    def test_cast_error(self, sample_model):
        with pytest.raises(CastError):
            condition(sample_model.value, {"in": ["abc"]})

    def test_empty_conditional_map(self, sample_model):
        with pytest.raises(ValueError):
            condition(sample_model.value, {})

    def test_non_big_number_column(self, sample_model):
        with pytest.raises(TypeError):
            field_of(sample_model.label)
