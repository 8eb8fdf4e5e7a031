"""
Field options schema.

FieldOptions is the declarative, reviewable description of one BigNumber
field. YAML documents are parsed into these by the loader; nothing here
builds field adapters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from bignumber_kernel.domain.rounding import DEFAULT_ROUNDING, Rounding
from bignumber_kernel.exceptions import BigNumberKernelError


class ConfigError(BigNumberKernelError):
    """A field configuration entry is invalid."""

    code: str = "INVALID_FIELD_CONFIG"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for field '{field}': {reason}")


@dataclass(frozen=True)
class FieldOptions:
    """Options for one BigNumber field."""

    scale: int = 0
    rounding: Rounding = DEFAULT_ROUNDING
    required: bool = False
    min: str | None = None  # numeral text, cast by the field
    max: str | None = None
    min_message: str | None = None
    max_message: str | None = None

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for BigNumberField / big_number_column."""
        return {
            "scale": self.scale,
            "rounding": self.rounding,
            "required": self.required,
            "min": self.min,
            "max": self.max,
            "min_message": self.min_message,
            "max_message": self.max_message,
        }
