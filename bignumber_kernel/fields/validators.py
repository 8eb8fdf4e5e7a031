"""Validator records and message templates for field types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValidatorKind(str, Enum):
    """Tag identifying what a registered validator checks."""

    REQUIRED = "required"
    MIN = "min"
    MAX = "max"


# Host placeholders {PATH}/{VALUE} are filled at validation time;
# {MIN}/{MAX} are filled when the validator is registered.
DEFAULT_MESSAGES: dict[ValidatorKind, str] = {
    ValidatorKind.REQUIRED: "Path `{PATH}` is required.",
    ValidatorKind.MIN: "Path `{PATH}` ({VALUE}) is less than minimum allowed value ({MIN}).",
    ValidatorKind.MAX: "Path `{PATH}` ({VALUE}) is more than maximum allowed value ({MAX}).",
}


@dataclass(frozen=True, eq=False)
class Validator:
    """
    A named predicate registered on a field.

    Compared by identity so a field can remove exactly the validator it added.
    """

    predicate: Callable[[Any], bool]
    message: str
    kind: ValidatorKind

    def __call__(self, value: Any) -> bool:
        return self.predicate(value)


@dataclass(frozen=True)
class ValidatorFailure:
    """One failed validator, ready for host aggregation."""

    path: str
    kind: ValidatorKind
    message: str
    value: Any = None


def interpolate(template: str, **values: Any) -> str:
    """Replace ``{NAME}`` placeholders; unknown braces are left untouched."""
    message = template
    for name, value in values.items():
        message = message.replace("{" + name + "}", str(value))
    return message
