"""TypeRegistry -- caller-owned name to field-type registry."""

from __future__ import annotations

from typing import Any

from bignumber_kernel.exceptions import TypeAlreadyRegisteredError, UnknownTypeError
from bignumber_kernel.fields.big_number_field import BigNumberField
from bignumber_kernel.logging_config import get_logger

logger = get_logger("fields.registry")


class TypeRegistry:
    """
    Registry for field types, keyed by type name.

    Owned by the application: build one at startup, register the types it
    uses, and pass it to whatever declares fields. There is no process-wide
    instance.
    """

    def __init__(self) -> None:
        self._types: dict[str, type] = {}

    def register(self, name: str, field_type: type) -> None:
        """Register field_type under name. Re-registering the same type is a no-op."""
        existing = self._types.get(name)
        if existing is not None:
            if existing is field_type:
                return
            raise TypeAlreadyRegisteredError(name, existing.__name__)
        self._types[name] = field_type
        logger.debug(
            "field_type_registered",
            extra={"type_name": name, "field_type": field_type.__name__},
        )

    def get(self, name: str) -> type:
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(name, sorted(self._types)) from None

    def create(self, name: str, path: str, **options: Any) -> Any:
        """Instantiate the field type registered under name for path."""
        return self.get(name)(path, **options)

    def names(self) -> list[str]:
        return sorted(self._types)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)


def register_big_number(registry: TypeRegistry) -> TypeRegistry:
    """Register BigNumberField under its type name; call once at startup."""
    registry.register(BigNumberField.type_name, BigNumberField)
    return registry
