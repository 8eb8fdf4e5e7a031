"""
Field options loader (``bignumber_config.loader``).

Responsibility
--------------
Loads YAML documents of the form::

    fields:
      total:
        scale: 2
        rounding: half_even
        required: true
        min: "0"
        max_message: "Total {VALUE} exceeds {MAX}"

and parses each entry into a frozen ``FieldOptions``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid entries  -> ``ConfigError`` naming the field and the reason.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from bignumber_config.schema import ConfigError, FieldOptions
from bignumber_kernel.domain.rounding import Rounding
from bignumber_kernel.domain.values import parse_decimal
from bignumber_kernel.exceptions import ParseError

_KNOWN_KEYS = frozenset(
    {"scale", "rounding", "required", "min", "max", "min_message", "max_message"}
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _parse_threshold(name: str, key: str, value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float):
        # YAML floats lose the author's digits; require quoted numerals.
        raise ConfigError(name, f"{key} must be an integer or a quoted numeral")
    if not isinstance(value, (int, str, Decimal)) or isinstance(value, bool):
        raise ConfigError(name, f"{key} must be a numeral, got {type(value).__name__}")
    try:
        parse_decimal(value)
    except ParseError as e:
        raise ConfigError(name, f"{key} is not a numeral: {value!r}") from e
    return str(value)


def _parse_message(name: str, key: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ConfigError(name, f"{key} must be a string")


def parse_field_options(name: str, data: Mapping[str, Any] | None) -> FieldOptions:
    """
    Parse one field entry.

    Raises:
        ConfigError: On unknown keys or invalid values.
    """
    data = data or {}
    if not isinstance(data, Mapping):
        raise ConfigError(name, "entry must be a mapping")

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(name, f"unknown option(s): {sorted(unknown)}")

    scale = data.get("scale", 0)
    if isinstance(scale, bool) or not isinstance(scale, int) or scale < 0:
        raise ConfigError(name, f"scale must be a non-negative integer, got {scale!r}")

    try:
        rounding = Rounding.parse(data.get("rounding", "half_up"))
    except ValueError as e:
        raise ConfigError(name, str(e)) from e

    required = data.get("required", False)
    if not isinstance(required, bool):
        raise ConfigError(name, "required must be true or false")

    return FieldOptions(
        scale=scale,
        rounding=rounding,
        required=required,
        min=_parse_threshold(name, "min", data.get("min")),
        max=_parse_threshold(name, "max", data.get("max")),
        min_message=_parse_message(name, "min_message", data.get("min_message")),
        max_message=_parse_message(name, "max_message", data.get("max_message")),
    )


def parse_fields(data: Mapping[str, Any]) -> dict[str, FieldOptions]:
    """Parse the ``fields`` section of a loaded document."""
    fields = data.get("fields") or {}
    if not isinstance(fields, Mapping):
        raise ConfigError("fields", "section must be a mapping of field name to options")
    return {
        str(name): parse_field_options(str(name), entry)
        for name, entry in fields.items()
    }
