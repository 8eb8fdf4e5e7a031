"""
Query conditional handlers -- translate raw query values into stored text.

The store only compares the rendered text form, so every value reaching it
goes through the field's cast and render first. Scalar conditionals take one
value; set conditionals take one value or an ordered sequence of values.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from bignumber_kernel.exceptions import UnsupportedOperatorError

if TYPE_CHECKING:
    from bignumber_kernel.fields.big_number_field import BigNumberField


class Conditional(str, Enum):
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    EQ = "eq"
    NE = "ne"
    IN = "in"
    NIN = "nin"
    MOD = "mod"
    ALL = "all"


SCALAR_CONDITIONALS = frozenset(
    {
        Conditional.LT,
        Conditional.LTE,
        Conditional.GT,
        Conditional.GTE,
        Conditional.EQ,
        Conditional.NE,
    }
)

SET_CONDITIONALS = frozenset(
    {Conditional.IN, Conditional.NIN, Conditional.MOD, Conditional.ALL}
)


def handle_single(field: BigNumberField, value: Any) -> str | None:
    return field.cast_for_query(None, value)


def handle_array(field: BigNumberField, value: Any) -> list[str | None]:
    if not isinstance(value, (list, tuple)):
        return [field.cast_for_query(None, value)]
    return [field.cast_for_query(None, item) for item in value]


CONDITIONAL_HANDLERS: dict[Conditional, Callable[[BigNumberField, Any], Any]] = {
    **{c: handle_single for c in SCALAR_CONDITIONALS},
    **{c: handle_array for c in SET_CONDITIONALS},
}


def resolve_conditional(operator: str, type_name: str = "BigNumber") -> Conditional:
    """
    Look up a conditional by name. A leading ``$`` is accepted.

    Raises:
        UnsupportedOperatorError: If the operator is not in the allow-list.
    """
    name = operator[1:] if isinstance(operator, str) and operator.startswith("$") else operator
    try:
        return Conditional(name)
    except ValueError:
        raise UnsupportedOperatorError(operator, type_name) from None
