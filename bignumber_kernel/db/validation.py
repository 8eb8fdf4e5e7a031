"""
ORM-level casting and validation for BigNumber columns.

===============================================================================
HOW IT WORKS
===============================================================================

Two kinds of SQLAlchemy event listeners are installed:

    obj.amount = raw
         |
         v
    [attribute "set" event, retval=True] --> BigNumberField.cast(raw)
         |                                      |
         |                                      +--> CastError (immediately)
         v
    obj.__dict__["amount"] is a BigNumber or None

    session.flush()
         |
         v
    [before_flush event] --> validate_instance(obj) for new + dirty objects
         |                         |
         |                         +--> ValidationError (all failures of one
         v                              instance aggregated)
    SQL sent to database (only if every instance validates)

Casting on assignment means mapped instances never hold raw input, so
to_plain()/to_json() and the bind path render the same BigNumber.

===============================================================================
USAGE
===============================================================================

Called once at application startup, after all models are imported:

    from bignumber_kernel.db.validation import register_big_number_listeners
    register_big_number_listeners(Base)

To remove (TESTS ONLY):

    unregister_big_number_listeners()
"""

from typing import Any

from sqlalchemy import event, inspect
from sqlalchemy.orm import Mapper, Session, configure_mappers

from bignumber_kernel.db.types import BigNumberColumn
from bignumber_kernel.exceptions import ValidationError
from bignumber_kernel.fields.big_number_field import BigNumberField
from bignumber_kernel.fields.validators import ValidatorFailure
from bignumber_kernel.logging_config import LogContext, get_logger

logger = get_logger("db.validation")

# (target, identifier, fn) triples for every installed listener
_listeners: list[tuple[Any, str, Any]] = []


def big_number_fields(model: type | Mapper) -> dict[str, BigNumberField]:
    """Map attribute key -> BigNumberField for every BigNumber column of model."""
    mapper = model if isinstance(model, Mapper) else inspect(model)
    fields: dict[str, BigNumberField] = {}
    for prop in mapper.column_attrs:
        for column in prop.columns:
            if isinstance(column.type, BigNumberColumn):
                fields[prop.key] = column.type.field
    return fields


def _cast_on_set(field: BigNumberField):
    def _listener(target, value, oldvalue, initiator):
        with LogContext.bind(model=type(target).__name__, path=field.path):
            return field.cast(value)

    return _listener


def validate_instance(obj: Any) -> dict[str, ValidatorFailure]:
    """
    Run every BigNumber field's validators against obj.

    Returns the first failure per field path; empty when obj is valid.
    """
    errors: dict[str, ValidatorFailure] = {}
    for key, field in big_number_fields(type(obj)).items():
        failures = field.validate(getattr(obj, key))
        if failures:
            errors[field.path or key] = failures[0]
    return errors


def assert_valid(obj: Any) -> None:
    """
    Raise ValidationError if obj fails any BigNumber validator.

    Raises:
        ValidationError: Aggregating every failing field of obj.
    """
    errors = validate_instance(obj)
    if errors:
        model_name = type(obj).__name__
        logger.info(
            "validation_failed",
            extra={
                "model": model_name,
                "paths": sorted(errors),
                "kinds": [errors[p].kind.value for p in sorted(errors)],
            },
        )
        raise ValidationError(model_name, errors)


def _validate_before_flush(session, flush_context, instances):
    for obj in list(session.new) + list(session.dirty):
        if big_number_fields(type(obj)):
            assert_valid(obj)


def register_big_number_listeners(base: type) -> None:
    """
    Install cast-on-assignment and validate-before-flush listeners.

    Preconditions: every model class deriving from base is imported.
    Postconditions: each BigNumber field without a path takes its attribute
        key as path. Calling again first removes the previous listeners.
    """
    unregister_big_number_listeners()
    configure_mappers()

    attribute_count = 0
    for mapper in base.registry.mappers:
        for key, field in big_number_fields(mapper).items():
            if field.path is None:
                field.path = key
            attribute = getattr(mapper.class_, key)
            listener = _cast_on_set(field)
            event.listen(attribute, "set", listener, retval=True)
            _listeners.append((attribute, "set", listener))
            attribute_count += 1

    event.listen(Session, "before_flush", _validate_before_flush)
    _listeners.append((Session, "before_flush", _validate_before_flush))

    logger.info(
        "listeners_registered",
        extra={"attribute_count": attribute_count},
    )


def unregister_big_number_listeners() -> None:
    """Remove every listener installed by register_big_number_listeners()."""
    while _listeners:
        target, identifier, fn = _listeners.pop()
        if event.contains(target, identifier, fn):
            event.remove(target, identifier, fn)
