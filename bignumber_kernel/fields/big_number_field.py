"""
BigNumberField -- field type adapter between raw input and BigNumber.

Responsibility:
    Normalizes heterogeneous assigned values into BigNumber, owns the
    required/min/max validators of one field, and translates query
    conditionals into the rendered text the store compares.

Architecture position:
    Kernel > Fields. Depends on domain/ and exceptions only. The SQLAlchemy
    column type in db/types.py composes one BigNumberField; nothing here
    imports SQLAlchemy.

Invariants enforced:
    - cast() never returns anything but None or a BigNumber.
    - At most one min and one max validator are registered; re-registering
      replaces the previous one of that kind (identity-tracked).
    - min/max predicates accept None: absence is a required-ness concern.
    - Range checks and query translation compare exact values, never text.

Failure modes:
    - CastError (with field path) for unparseable scalars and for any input
      shape outside {None, "", BigNumber, str, int, float, DecimalLike}.
    - UnsupportedOperatorError for query conditionals outside the allow-list.
    - Validator failures are returned by validate(), never raised here.
"""

from __future__ import annotations

from typing import Any, ClassVar

from bignumber_kernel.domain.rounding import DEFAULT_ROUNDING, Rounding
from bignumber_kernel.domain.values import BigNumber, DecimalLike
from bignumber_kernel.exceptions import CastError, ParseError, UnsupportedOperatorError
from bignumber_kernel.fields.query import CONDITIONAL_HANDLERS, resolve_conditional
from bignumber_kernel.fields.validators import (
    DEFAULT_MESSAGES,
    Validator,
    ValidatorFailure,
    ValidatorKind,
    interpolate,
)
from bignumber_kernel.logging_config import get_logger

logger = get_logger("fields.big_number")


class BigNumberField:
    """
    Field type for exact decimals stored as fixed-scale text.

    Conforms to the field-type protocol used by the host integration:
    ``cast``, ``check_required``, ``cast_for_query`` and ``validate``.
    """

    type_name: ClassVar[str] = "BigNumber"

    def __init__(
        self,
        path: str,
        *,
        scale: int = 0,
        rounding: Rounding | str | int = DEFAULT_ROUNDING,
        required: bool = False,
        min: Any = None,
        max: Any = None,
        min_message: str | None = None,
        max_message: str | None = None,
    ):
        if isinstance(scale, bool) or not isinstance(scale, int) or scale < 0:
            raise ValueError(f"scale must be a non-negative integer, got {scale!r}")
        self.path = path
        self.scale = scale
        self.rounding = Rounding.parse(rounding)
        self.required = required
        self.validators: list[Validator] = []
        self._min_validator: Validator | None = None
        self._max_validator: Validator | None = None

        if min is not None:
            self.min(min, min_message)
        if max is not None:
            self.max(max, max_message)

    def __repr__(self) -> str:
        return (
            f"BigNumberField({self.path!r}, scale={self.scale}, "
            f"rounding={self.rounding.name})"
        )

    # ------------------------------------------------------------------
    # Cast
    # ------------------------------------------------------------------

    def cast(self, value: Any) -> BigNumber | None:
        """
        Normalize value into a BigNumber.

        Rules, in order: None passes through; "" becomes None; a BigNumber
        passes through unchanged; str, int, float and DecimalLike values are
        parsed with this field's scale and rounding; anything else fails.

        Raises:
            CastError: If value cannot be normalized.
        """
        if value is None:
            return None
        if isinstance(value, str) and value == "":
            return None
        if isinstance(value, BigNumber):
            return value
        if isinstance(value, bool) or not isinstance(
            value, (str, int, float, DecimalLike)
        ):
            self._log_cast_failure(value, "unsupported_type")
            raise CastError(self.type_name, value, self.path)

        try:
            return BigNumber(value, self.scale, self.rounding)
        except ParseError as e:
            self._log_cast_failure(value, "not_a_numeral")
            raise CastError(self.type_name, value, self.path) from e

    def _log_cast_failure(self, value: Any, reason: str) -> None:
        logger.debug(
            "cast_failed",
            extra={
                "path": self.path,
                "value_type": type(value).__name__,
                "reason": reason,
            },
        )

    def check_required(self, value: Any) -> bool:
        """True only for a present BigNumber; foreign numerics do not count."""
        return value is not None and isinstance(value, BigNumber)

    # ------------------------------------------------------------------
    # Range validators
    # ------------------------------------------------------------------

    def min(self, threshold: Any, message: str | None = None) -> BigNumberField:
        """
        Register (or with None, remove) the minimum-value validator.

        ``{MIN}`` in message (or the default template) is replaced with the
        rendered threshold.

        Raises:
            CastError: If threshold cannot be cast.
        """
        previous, self._min_validator = self._min_validator, None
        self._min_validator = self._replace_range_validator(
            ValidatorKind.MIN,
            previous,
            threshold,
            message,
            lambda value, bound: value >= bound,
        )
        return self

    def max(self, threshold: Any, message: str | None = None) -> BigNumberField:
        """Symmetric to min(): accepts None or values <= threshold; ``{MAX}``."""
        previous, self._max_validator = self._max_validator, None
        self._max_validator = self._replace_range_validator(
            ValidatorKind.MAX,
            previous,
            threshold,
            message,
            lambda value, bound: value <= bound,
        )
        return self

    def _replace_range_validator(
        self,
        kind: ValidatorKind,
        previous: Validator | None,
        threshold: Any,
        message: str | None,
        accepts,
    ) -> Validator | None:
        if previous is not None:
            self.validators = [v for v in self.validators if v is not previous]
            logger.debug(
                "validator_replaced",
                extra={"path": self.path, "kind": kind.value},
            )

        if threshold is None:
            return None

        bound = self.cast(threshold)
        if bound is None:
            return None

        placeholder = kind.value.upper()
        text = interpolate(
            message or DEFAULT_MESSAGES[kind], **{placeholder: bound.render()}
        )

        def predicate(value: Any) -> bool:
            return value is None or accepts(value, bound)

        validator = Validator(predicate=predicate, message=text, kind=kind)
        self.validators.append(validator)
        logger.debug(
            "validator_registered",
            extra={"path": self.path, "kind": kind.value, "threshold": bound},
        )
        return validator

    @property
    def min_validator(self) -> Validator | None:
        return self._min_validator

    @property
    def max_validator(self) -> Validator | None:
        return self._max_validator

    def validate(self, value: Any) -> list[ValidatorFailure]:
        """
        Run the required check (when required) and every registered validator.

        Returns failures in registration order with ``{PATH}``/``{VALUE}``
        filled in. A missing required value skips the remaining validators.
        """
        if self.required and not self.check_required(value):
            return [
                ValidatorFailure(
                    path=self.path,
                    kind=ValidatorKind.REQUIRED,
                    message=interpolate(
                        DEFAULT_MESSAGES[ValidatorKind.REQUIRED], PATH=self.path
                    ),
                    value=value,
                )
            ]

        failures = []
        for validator in self.validators:
            if validator(value):
                continue
            rendered = value.render() if isinstance(value, BigNumber) else value
            failures.append(
                ValidatorFailure(
                    path=self.path,
                    kind=validator.kind,
                    message=interpolate(
                        validator.message, PATH=self.path, VALUE=rendered
                    ),
                    value=value,
                )
            )
        return failures

    # ------------------------------------------------------------------
    # Query translation
    # ------------------------------------------------------------------

    def cast_for_query(self, operator: str | None, value: Any) -> Any:
        """
        Translate a raw query value into what the store compares.

        With no operator, value is cast and rendered. With an operator, the
        allow-listed handler runs: scalar conditionals give one string, set
        conditionals give a list of strings in input order.

        Raises:
            UnsupportedOperatorError: If operator is not allowed.
            CastError: If a value cannot be cast.
        """
        if operator is None:
            cast = self.cast(value)
            return cast.render() if cast is not None else None

        try:
            conditional = resolve_conditional(operator, self.type_name)
        except UnsupportedOperatorError:
            logger.warning(
                "unsupported_operator",
                extra={"path": self.path, "operator": str(operator)},
            )
            raise
        return CONDITIONAL_HANDLERS[conditional](self, value)
