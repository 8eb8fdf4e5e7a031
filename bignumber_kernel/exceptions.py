"""
Typed Exception Hierarchy for the BigNumber kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from BigNumberKernelError:

    BigNumberKernelError (base)
    |
    +-- ParseError
    +-- CastError
    +-- UnsupportedOperatorError
    +-- ValidationError
    |
    +-- TypeRegistryError
        +-- TypeAlreadyRegisteredError
        +-- UnknownTypeError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                      | When Raised
--------------------------|------------------------------------------------
PARSE_ERROR               | Raw input is not a decimal numeral
CAST_ERROR                | Field cannot normalize the input (field path set)
UNSUPPORTED_OPERATOR      | Query conditional outside the allow-list
VALIDATION_FAILED         | Host aggregated one or more validator failures
TYPE_ALREADY_REGISTERED   | Registry name already bound to another type
UNKNOWN_TYPE              | Registry has no type under that name

===============================================================================
HANDLING PATTERNS
===============================================================================

1. CAST ERRORS ARE FIELD-ATTRIBUTABLE:

    try:
        row.amount = "abc"
    except CastError as e:
        return {"error": e.code, "path": e.path, "value": e.raw_value}

2. QUERY ERRORS ARE NOT:

    except UnsupportedOperatorError as e:
        log.warning("bad_query", extra={"operator": e.operator})

3. VALIDATION FAILURES ARE COLLECTED:

    except ValidationError as e:
        for path, failure in e.errors.items():
            ...
"""

from typing import Any


class BigNumberKernelError(Exception):
    """
    Base exception for all BigNumber kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "BIGNUMBER_KERNEL_ERROR"


class ParseError(BigNumberKernelError):
    """Raw input cannot be parsed as a decimal numeral."""

    code: str = "PARSE_ERROR"

    def __init__(self, raw_value: Any, reason: str | None = None):
        self.raw_value = raw_value
        self.reason = reason
        msg = f"Not a decimal numeral: {raw_value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class CastError(BigNumberKernelError):
    """
    A field type could not normalize a raw value.

    Always carries the field path so the host can attribute the failure.
    """

    code: str = "CAST_ERROR"

    def __init__(self, type_name: str, raw_value: Any, path: str | None):
        self.type_name = type_name
        self.raw_value = raw_value
        self.path = path
        super().__init__(
            f'Cast to {type_name} failed for value "{_describe(raw_value)}" '
            f'at path "{path}"'
        )


class UnsupportedOperatorError(BigNumberKernelError):
    """A query conditional is not allowed for this field type."""

    code: str = "UNSUPPORTED_OPERATOR"

    def __init__(self, operator: str, type_name: str = "BigNumber"):
        self.operator = operator
        self.type_name = type_name
        super().__init__(f"Can't use {operator} with {type_name}.")


class ValidationError(BigNumberKernelError):
    """
    One or more field validators failed for a mapped instance.

    ``errors`` maps field path to the first failure recorded for that path.
    """

    code: str = "VALIDATION_FAILED"

    def __init__(self, model_name: str, errors: dict[str, Any]):
        self.model_name = model_name
        self.errors = errors
        details = ", ".join(
            f"{path}: {failure.message}" for path, failure in errors.items()
        )
        super().__init__(f"{model_name} validation failed: {details}")


# Registry exceptions


class TypeRegistryError(BigNumberKernelError):
    """Base exception for field-type registry errors."""

    code: str = "TYPE_REGISTRY_ERROR"


class TypeAlreadyRegisteredError(TypeRegistryError):
    """A different field type is already registered under this name."""

    code: str = "TYPE_ALREADY_REGISTERED"

    def __init__(self, type_name: str, existing: str):
        self.type_name = type_name
        self.existing = existing
        super().__init__(
            f"Field type already registered as {type_name}: {existing}"
        )


class UnknownTypeError(TypeRegistryError):
    """No field type is registered under this name."""

    code: str = "UNKNOWN_TYPE"

    def __init__(self, type_name: str, available: list[str]):
        self.type_name = type_name
        self.available = available
        super().__init__(
            f"Unknown field type: {type_name}. Available: {available}"
        )


def _describe(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value)
