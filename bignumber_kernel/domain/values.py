"""
Values -- the BigNumber value object and the decimal-like capability marker.

Responsibility:
    Provides BigNumber, an exact arbitrary-precision decimal paired with the
    scale and rounding strategy used whenever it is rendered. Every field,
    validator and query translation in the kernel works on BigNumber.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by fields/, db/ and serialization. Depends only on
    domain.rounding and the kernel exceptions.

Invariants enforced:
    - The wrapped Decimal is exact and finite. It is never rounded by the
      ambient decimal context: arithmetic runs in an exact local context.
    - Only render() is lossy, and it is deterministic for a given
      (value, scale, rounding) triple.
    - Comparisons and equality use the exact value, never rendered text.

Failure modes:
    - ParseError on construction from text that is not a decimal numeral,
      from non-finite numbers, booleans, or unsupported types.
    - ValueError on a negative or non-integer scale, or unknown rounding.
"""

from __future__ import annotations

import math
import re
from abc import ABC
from dataclasses import dataclass
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    Context,
    Decimal,
    InvalidOperation,
)
from typing import Any

from bignumber_kernel.domain.rounding import DEFAULT_ROUNDING, Rounding, format_fixed
from bignumber_kernel.exceptions import ParseError


class DecimalLike(ABC):
    """
    Capability marker for foreign exact-decimal values.

    A type is decimal-like only when registered here, e.g.
    ``DecimalLike.register(MyDecimal)``. Registered values must render a
    decimal numeral through ``str()``. ``decimal.Decimal`` is registered.
    """


DecimalLike.register(Decimal)


# Optional sign, digits with optional fraction (or a bare fraction), optional exponent.
_NUMERAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# Exact arithmetic: no operation on finite operands is rounded.
_EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


def parse_decimal(raw: Any) -> Decimal:
    """
    Normalize a raw numeral into an exact, finite Decimal.

    Accepts BigNumber, int, finite float (via its shortest repr), Decimal and
    other DecimalLike values, and numeral strings (surrounding whitespace
    ignored).

    Raises:
        ParseError: If raw is not a finite decimal numeral.
    """
    if isinstance(raw, BigNumber):
        return raw.value
    if isinstance(raw, bool):
        raise ParseError(raw, "boolean is not a number")
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise ParseError(raw, "not finite")
        return Decimal(repr(raw))
    if isinstance(raw, Decimal):
        if not raw.is_finite():
            raise ParseError(raw, "not finite")
        return raw
    if isinstance(raw, DecimalLike):
        text = str(raw)
    elif isinstance(raw, str):
        text = raw
    else:
        raise ParseError(raw, f"unsupported type {type(raw).__name__}")

    text = text.strip()
    if not _NUMERAL.fullmatch(text):
        raise ParseError(raw)
    try:
        return Decimal(text)
    except (InvalidOperation, ValueError) as e:
        raise ParseError(raw, "exponent out of range") from e


def _operand(other: Any) -> Decimal | None:
    """Exact value of a numeric operand, or None when other is not numeric."""
    if isinstance(other, str):
        return None
    try:
        return parse_decimal(other)
    except ParseError:
        return None


def _compared(other: Any) -> Decimal | None:
    """
    Operand of a comparison.

    Floats compare by their exact binary value, as Decimal does, so that
    equal operands hash equal. Construction and arithmetic read a float
    through its repr instead: BigNumber(0.1) holds 0.1 yet != 0.1.
    """
    if isinstance(other, float) and math.isfinite(other):
        return Decimal(other)
    return _operand(other)


@dataclass(frozen=True, slots=True, eq=False)
class BigNumber:
    """
    Exact decimal value object with an attached display scale and rounding.

    Contract:
        ``value`` is held exactly. ``scale`` and ``rounding`` only govern how
        the value is rendered as fixed-point text.

    Guarantees:
        - Immutable and hashable (hash follows the exact value).
        - ``render()`` yields exactly ``scale`` fractional digits, never
          exponent notation.
        - ``a == b`` iff the exact values are equal, whatever the scales.
        - ``+``/``-`` return a BigNumber carrying the BigNumber operand's
          scale and rounding (the left one when both are BigNumbers).

    Non-goals:
        - Does NOT provide multiplication, division or other general arithmetic.
    """

    value: Decimal
    scale: int = 0
    rounding: Rounding = DEFAULT_ROUNDING

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", parse_decimal(self.value))
        if isinstance(self.scale, bool) or not isinstance(self.scale, int) or self.scale < 0:
            raise ValueError(f"scale must be a non-negative integer, got {self.scale!r}")
        object.__setattr__(self, "rounding", Rounding.parse(self.rounding))

    @classmethod
    def of(
        cls,
        value: Any,
        scale: int = 0,
        rounding: Rounding | str | int = DEFAULT_ROUNDING,
    ) -> BigNumber:
        """
        Factory that reuses value when it is already a BigNumber with the
        requested scale and rounding.

        Raises:
            ParseError: If value is not a decimal numeral.
        """
        if (
            isinstance(value, BigNumber)
            and value.scale == scale
            and value.rounding is Rounding.parse(rounding)
        ):
            return value
        return cls(value, scale, rounding)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> str:
        """Fixed-point text at ``scale`` digits, rounded per ``rounding``."""
        return format_fixed(self.value, self.scale, self.rounding)

    def to_decimal(self) -> Decimal:
        """The exact wrapped value."""
        return self.value

    def with_options(
        self,
        scale: int | None = None,
        rounding: Rounding | str | int | None = None,
    ) -> BigNumber:
        """Same exact value with a different scale and/or rounding."""
        return BigNumber(
            self.value,
            self.scale if scale is None else scale,
            self.rounding if rounding is None else rounding,
        )

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"BigNumber({str(self.value)!r}, scale={self.scale}, "
            f"rounding={self.rounding.name})"
        )

    # ------------------------------------------------------------------
    # Comparison (exact)
    # ------------------------------------------------------------------

    def compare(self, other: Any) -> int:
        """
        Exact three-way comparison: -1, 0 or 1.

        Unlike the operators, also accepts numeral strings.

        Raises:
            ParseError: If other is not a decimal numeral.
        """
        other_value = _compared(other)
        if other_value is None:
            other_value = parse_decimal(other)
        if self.value < other_value:
            return -1
        if self.value > other_value:
            return 1
        return 0

    def __eq__(self, other: object) -> bool:
        other_value = _compared(other)
        if other_value is None:
            return NotImplemented
        return self.value == other_value

    def __ne__(self, other: object) -> bool:
        other_value = _compared(other)
        if other_value is None:
            return NotImplemented
        return self.value != other_value

    def __hash__(self) -> int:
        return hash(self.value)

    def __lt__(self, other: Any) -> bool:
        other_value = _compared(other)
        if other_value is None:
            return NotImplemented
        return self.value < other_value

    def __le__(self, other: Any) -> bool:
        other_value = _compared(other)
        if other_value is None:
            return NotImplemented
        return self.value <= other_value

    def __gt__(self, other: Any) -> bool:
        other_value = _compared(other)
        if other_value is None:
            return NotImplemented
        return self.value > other_value

    def __ge__(self, other: Any) -> bool:
        other_value = _compared(other)
        if other_value is None:
            return NotImplemented
        return self.value >= other_value

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _derive(self, value: Decimal) -> BigNumber:
        return BigNumber(value, self.scale, self.rounding)

    def __add__(self, other: Any) -> BigNumber:
        other_value = _operand(other)
        if other_value is None:
            return NotImplemented
        return self._derive(_EXACT.add(self.value, other_value))

    def __radd__(self, other: Any) -> BigNumber:
        other_value = _operand(other)
        if other_value is None:
            return NotImplemented
        return self._derive(_EXACT.add(other_value, self.value))

    def __sub__(self, other: Any) -> BigNumber:
        other_value = _operand(other)
        if other_value is None:
            return NotImplemented
        return self._derive(_EXACT.subtract(self.value, other_value))

    def __rsub__(self, other: Any) -> BigNumber:
        other_value = _operand(other)
        if other_value is None:
            return NotImplemented
        return self._derive(_EXACT.subtract(other_value, self.value))

    def __neg__(self) -> BigNumber:
        return self._derive(_EXACT.minus(self.value))

    def __abs__(self) -> BigNumber:
        return self._derive(_EXACT.abs(self.value))

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    @property
    def is_zero(self) -> bool:
        return self.value.is_zero()

    @property
    def is_positive(self) -> bool:
        return self.value > 0

    @property
    def is_negative(self) -> bool:
        return self.value < 0

    def __bool__(self) -> bool:
        return not self.value.is_zero()
