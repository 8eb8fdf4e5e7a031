"""
Query conditions over BigNumber columns.

Translates query specs written as conditionals into SQLAlchemy expressions:

    condition(Invoice.total, 5)                       # total = '5'
    condition(Invoice.total, {"gte": 1, "lt": 10})    # AND of both
    condition(Invoice.total, {"$in": [4, 5, 6]})      # leading $ accepted

Values are translated by BigNumberField.cast_for_query() before they reach
the expression, so the store compares rendered text. Ordering conditionals
therefore follow the text ordering of the column, as in any string-backed
store.
"""

import operator
from collections.abc import Mapping
from typing import Any

from sqlalchemy import and_, false
from sqlalchemy.sql.elements import ColumnElement

from bignumber_kernel.db.types import BigNumberColumn
from bignumber_kernel.exceptions import UnsupportedOperatorError
from bignumber_kernel.fields.big_number_field import BigNumberField
from bignumber_kernel.fields.query import Conditional, resolve_conditional

_COMPARATORS = {
    Conditional.LT: operator.lt,
    Conditional.LTE: operator.le,
    Conditional.GT: operator.gt,
    Conditional.GTE: operator.ge,
    Conditional.EQ: operator.eq,
    Conditional.NE: operator.ne,
}


def field_of(attribute: Any) -> BigNumberField:
    """The BigNumberField behind a mapped attribute or column."""
    expression = getattr(attribute, "expression", attribute)
    column_type = getattr(expression, "type", None)
    if not isinstance(column_type, BigNumberColumn):
        raise TypeError(f"{attribute!r} is not a BigNumber column")
    return column_type.field


def condition(attribute: Any, criterion: Any) -> ColumnElement[bool]:
    """
    Build a WHERE clause for attribute from a plain value or a conditional map.

    Raises:
        UnsupportedOperatorError: For conditionals outside the allow-list, and
            for ``mod``, which has no string-column expression.
        CastError: If a value cannot be cast.
    """
    field = field_of(attribute)

    if not isinstance(criterion, Mapping):
        return attribute == field.cast_for_query(None, criterion)

    if not criterion:
        raise ValueError("conditional map must name at least one conditional")

    clauses = []
    for name, raw in criterion.items():
        translated = field.cast_for_query(name, raw)
        conditional = resolve_conditional(name, field.type_name)

        if conditional in _COMPARATORS:
            clauses.append(_COMPARATORS[conditional](attribute, translated))
        elif conditional is Conditional.IN:
            clauses.append(attribute.in_(translated))
        elif conditional is Conditional.NIN:
            clauses.append(attribute.not_in(translated))
        elif conditional is Conditional.ALL:
            if not translated:
                clauses.append(false())
            else:
                clauses.append(and_(*(attribute == value for value in translated)))
        else:
            raise UnsupportedOperatorError(name, field.type_name)

    return and_(*clauses)
