"""
Rounding -- the fixed set of rounding strategies and fixed-scale quantization.

Responsibility:
    Names every rounding strategy a BigNumber may carry and provides the
    single quantization routine used when a value is rendered at its scale.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - quantize_fixed() is the ONLY rounding routine for rendering. Precision
      and exponent limits are raised locally so no magnitude is truncated by
      the ambient decimal context.
    - A zero result never carries a sign.

Failure modes:
    - ValueError from Rounding.parse() for unknown names or codes.
"""

from __future__ import annotations

from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Decimal,
    localcontext,
)
from enum import Enum


class Rounding(str, Enum):
    """Rounding strategy applied to digits dropped on render."""

    UP = "up"  # away from zero
    DOWN = "down"  # toward zero
    CEILING = "ceiling"
    FLOOR = "floor"
    HALF_UP = "half_up"  # ties away from zero
    HALF_DOWN = "half_down"  # ties toward zero
    HALF_EVEN = "half_even"
    HALF_CEILING = "half_ceiling"  # ties toward +infinity
    HALF_FLOOR = "half_floor"  # ties toward -infinity

    @classmethod
    def parse(cls, value: Rounding | str | int) -> Rounding:
        """
        Resolve a rounding strategy from a member, a name, or a numeric code.

        Names are case-insensitive and may carry a ``ROUND_`` prefix
        (``"ROUND_HALF_UP"``, ``"half_up"``, ``"HALF-UP"``). Numeric codes
        follow the conventional big-number ordering 0..8.

        Raises:
            ValueError: If the value names no strategy.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unknown rounding mode: {value!r}")
        if isinstance(value, int):
            try:
                return _BY_CODE[value]
            except KeyError:
                raise ValueError(f"Unknown rounding mode: {value!r}") from None
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            if key.startswith("round_"):
                key = key[len("round_"):]
            key = _ALIASES.get(key, key)
            try:
                return cls(key)
            except ValueError:
                raise ValueError(f"Unknown rounding mode: {value!r}") from None
        raise ValueError(f"Unknown rounding mode: {value!r}")

    @property
    def code(self) -> int:
        """Conventional numeric code of this strategy."""
        return _CODES[self]

    def decimal_mode(self, value: Decimal) -> str:
        """The ``decimal`` module constant that realizes this strategy for value."""
        if self is Rounding.HALF_CEILING:
            return ROUND_HALF_DOWN if value.is_signed() else ROUND_HALF_UP
        if self is Rounding.HALF_FLOOR:
            return ROUND_HALF_UP if value.is_signed() else ROUND_HALF_DOWN
        return _DECIMAL_MODES[self]


_DECIMAL_MODES: dict[Rounding, str] = {
    Rounding.UP: ROUND_UP,
    Rounding.DOWN: ROUND_DOWN,
    Rounding.CEILING: ROUND_CEILING,
    Rounding.FLOOR: ROUND_FLOOR,
    Rounding.HALF_UP: ROUND_HALF_UP,
    Rounding.HALF_DOWN: ROUND_HALF_DOWN,
    Rounding.HALF_EVEN: ROUND_HALF_EVEN,
}

_CODES: dict[Rounding, int] = {
    Rounding.UP: 0,
    Rounding.DOWN: 1,
    Rounding.CEILING: 2,
    Rounding.FLOOR: 3,
    Rounding.HALF_UP: 4,
    Rounding.HALF_DOWN: 5,
    Rounding.HALF_EVEN: 6,
    Rounding.HALF_CEILING: 7,
    Rounding.HALF_FLOOR: 8,
}

_BY_CODE: dict[int, Rounding] = {code: mode for mode, code in _CODES.items()}

_ALIASES = {
    "ceil": "ceiling",
    "half_ceil": "half_ceiling",
}

DEFAULT_ROUNDING = Rounding.HALF_UP


def quantize_fixed(value: Decimal, scale: int, rounding: Rounding) -> Decimal:
    """
    Quantize value to exactly ``scale`` fractional digits.

    Preconditions:
        - value is a finite Decimal; scale is a non-negative int.
    Postconditions:
        - Result exponent is ``-scale``; a zero result is unsigned.
    """
    exponent = Decimal(1).scaleb(-scale)
    with localcontext() as ctx:
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        ctx.prec = min(MAX_PREC, max(ctx.prec, value.adjusted() + scale + 2))
        result = value.quantize(exponent, rounding=rounding.decimal_mode(value))
    if result.is_zero():
        result = result.copy_abs()
    return result


def format_fixed(value: Decimal, scale: int, rounding: Rounding) -> str:
    """Fixed-point text of value at scale, never in exponent notation."""
    return format(quantize_fixed(value, scale, rounding), "f")
