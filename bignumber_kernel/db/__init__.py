"""Database layer - engine, base class, BigNumber column type, listeners."""

from bignumber_kernel.db.base import Base, UUIDString
from bignumber_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    session_scope,
)
from bignumber_kernel.db.query import condition
from bignumber_kernel.db.types import BigNumberColumn, big_number_column
from bignumber_kernel.db.validation import (
    assert_valid,
    register_big_number_listeners,
    unregister_big_number_listeners,
    validate_instance,
)

__all__ = [
    "Base",
    "BigNumberColumn",
    "UUIDString",
    "assert_valid",
    "big_number_column",
    "condition",
    "create_tables",
    "get_engine",
    "get_session",
    "init_engine_from_url",
    "register_big_number_listeners",
    "session_scope",
    "unregister_big_number_listeners",
    "validate_instance",
]
