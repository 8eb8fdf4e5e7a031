"""Field types -- cast, validation and query translation for mapped fields."""

from bignumber_kernel.fields.big_number_field import BigNumberField
from bignumber_kernel.fields.query import Conditional
from bignumber_kernel.fields.registry import TypeRegistry, register_big_number
from bignumber_kernel.fields.validators import (
    DEFAULT_MESSAGES,
    Validator,
    ValidatorFailure,
    ValidatorKind,
)

__all__ = [
    "BigNumberField",
    "Conditional",
    "DEFAULT_MESSAGES",
    "TypeRegistry",
    "Validator",
    "ValidatorFailure",
    "ValidatorKind",
    "register_big_number",
]
