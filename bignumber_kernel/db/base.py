"""
Module: bignumber_kernel.db.base
Responsibility: Declarative base class for ORM models that carry BigNumber
    columns. Provides the UUID primary key convention and the portable
    UUID column type.
Architecture position: Kernel > DB. Lowest-level import target within db/.
    MUST NOT import from db/validation.py, db/query.py or serialization.

Invariants enforced:
    - UUID primary keys: every model inherits a uuid4-generated primary key.
    - UUIDs are stored as String(36) so any SQLAlchemy dialect works.
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    UUID type stored as String(36) for cross-database portability.

    Guarantees:
        - process_bind_param: UUID -> str on INSERT/UPDATE.
        - process_result_value: str -> UUID on SELECT.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return PyUUID(value)
        return None


class Base(DeclarativeBase):
    """
    Declarative base for models with BigNumber columns.

    BigNumber columns are declared explicitly with ``big_number_column()``
    (db/types.py) so each column owns its own field adapter.
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )
