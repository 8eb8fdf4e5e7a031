"""
Module: bignumber_kernel.db.types
Responsibility: SQLAlchemy column type for BigNumber values. The store only
    ever sees the rendered fixed-scale text; Python code only ever sees
    BigNumber.
Architecture position: Kernel > DB. Composes fields.BigNumberField; may be
    imported by models, db/validation.py, db/query.py and serialization.

Invariants enforced:
    - Every bind (INSERT/UPDATE parameters, WHERE literals) goes through
      BigNumberField.cast() and BigNumber.render(), so stored text and
      compared text are produced by the same code path.
    - Loaded text is re-wrapped with the column's scale and rounding.

Failure modes:
    - CastError when a bound value cannot be cast.
    - ParseError when a stored value is not a decimal numeral (corrupt row).
"""

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import mapped_column
from sqlalchemy.types import TypeDecorator

from bignumber_kernel.domain.rounding import DEFAULT_ROUNDING, Rounding
from bignumber_kernel.domain.values import BigNumber
from bignumber_kernel.fields.big_number_field import BigNumberField


class BigNumberColumn(TypeDecorator):
    """
    String-backed column type holding a BigNumberField.

    The field adapter is composed, not inherited: the column delegates cast,
    validation and query translation to ``self.field``.
    """

    impl = String
    cache_ok = True

    def __init__(
        self,
        length: int | None = None,
        *,
        field: BigNumberField | None = None,
        **field_options: Any,
    ):
        super().__init__(length)
        if field is None:
            field = BigNumberField(field_options.pop("path", None), **field_options)
        self.field = field

    @property
    def python_type(self):
        return BigNumber

    @property
    def scale(self) -> int:
        return self.field.scale

    @property
    def rounding(self) -> Rounding:
        return self.field.rounding

    def process_bind_param(self, value, dialect):
        """Cast then render; the only way a value reaches storage."""
        cast = self.field.cast(value)
        if cast is None:
            return None
        return cast.render()

    def process_literal_param(self, value, dialect):
        rendered = self.process_bind_param(value, dialect)
        if rendered is None:
            return "NULL"
        return "'" + rendered + "'"

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return BigNumber(value, self.field.scale, self.field.rounding)

    def coerce_compared_value(self, op, value):
        # Compared literals bind through this type so they are rendered too.
        return self


def big_number_column(
    *,
    path: str | None = None,
    scale: int = 0,
    rounding: Rounding | str | int = DEFAULT_ROUNDING,
    required: bool = False,
    min: Any = None,
    max: Any = None,
    min_message: str | None = None,
    max_message: str | None = None,
    length: int | None = None,
    **column_kwargs: Any,
):
    """
    Declare a mapped BigNumber column.

    ``path`` defaults to the attribute key once the listeners in
    db/validation.py are registered. Remaining keyword arguments go to
    ``mapped_column``.

    Usage:
        class Invoice(Base):
            __tablename__ = "invoices"
            total: Mapped[BigNumber | None] = big_number_column(scale=2, min=0)
    """
    field = BigNumberField(
        path,
        scale=scale,
        rounding=rounding,
        required=required,
        min=min,
        max=max,
        min_message=min_message,
        max_message=max_message,
    )
    column_kwargs.setdefault("nullable", True)
    return mapped_column(BigNumberColumn(length, field=field), **column_kwargs)
