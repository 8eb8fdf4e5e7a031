"""
bignumber_config -- declarative field options for BigNumber columns.

Responsibility:
    Turns YAML field declarations into FieldOptions, and FieldOptions into
    field adapters through a caller-owned TypeRegistry.

Architecture position:
    Configuration -- sits above ``bignumber_kernel``. The kernel MUST NEVER
    import from ``bignumber_config``.

Failure modes:
    - ``FileNotFoundError`` / ``yaml.YAMLError`` from the loader.
    - ``ConfigError`` for invalid entries.
    - ``UnknownTypeError`` when the registry lacks the requested type.
"""

from __future__ import annotations

from pathlib import Path

from bignumber_config.loader import load_yaml_file, parse_field_options, parse_fields
from bignumber_config.schema import ConfigError, FieldOptions
from bignumber_kernel.fields.registry import TypeRegistry
from bignumber_kernel.logging_config import get_logger

_logger = get_logger("config")

__all__ = [
    "ConfigError",
    "FieldOptions",
    "build_fields",
    "load_field_options",
    "load_yaml_file",
    "parse_field_options",
    "parse_fields",
]


def load_field_options(path: Path) -> dict[str, FieldOptions]:
    """Load and validate every field entry of a YAML document."""
    options = parse_fields(load_yaml_file(Path(path)))
    _logger.info(
        "field_options_loaded",
        extra={"source": str(path), "field_count": len(options)},
    )
    return options


def build_fields(
    options: dict[str, FieldOptions],
    registry: TypeRegistry,
    type_name: str = "BigNumber",
) -> dict[str, object]:
    """Create one field adapter per entry, keyed and pathed by field name."""
    return {
        name: registry.create(type_name, name, **entry.to_kwargs())
        for name, entry in options.items()
    }
