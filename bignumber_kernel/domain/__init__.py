"""Domain layer -- pure value objects, zero I/O."""

from bignumber_kernel.domain.rounding import DEFAULT_ROUNDING, Rounding
from bignumber_kernel.domain.values import BigNumber, DecimalLike, parse_decimal

__all__ = [
    "BigNumber",
    "DecimalLike",
    "DEFAULT_ROUNDING",
    "Rounding",
    "parse_decimal",
]
