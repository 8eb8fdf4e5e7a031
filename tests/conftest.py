"""
Pytest fixtures for the BigNumber kernel test suite.

Provides:
- Structured logging configured once per session, LogContext cleared per test
- captured_logs() to assert on emitted JSON log records
- An in-memory SQLite engine with the sample model tables and listeners
- A per-test session whose rows are deleted afterwards
"""

import json
import logging
from io import StringIO

import pytest
from sqlalchemy import String, delete
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from bignumber_kernel.db.base import Base
from bignumber_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from bignumber_kernel.db.types import big_number_column
from bignumber_kernel.db.validation import (
    register_big_number_listeners,
    unregister_big_number_listeners,
)
from bignumber_kernel.domain.values import BigNumber
from bignumber_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Sample model (mirrors a typical document with every field flavour)
# =============================================================================


class Sample(Base):
    __tablename__ = "samples"

    label: Mapped[str | None] = mapped_column(String(50), nullable=True)
    value: Mapped[BigNumber | None] = big_number_column(required=True)
    nullable: Mapped[BigNumber | None] = big_number_column()
    min_string: Mapped[BigNumber | None] = big_number_column(min="10")
    min_number: Mapped[BigNumber | None] = big_number_column(min=10)
    min_big_number: Mapped[BigNumber | None] = big_number_column(min=BigNumber("10"))
    max_string: Mapped[BigNumber | None] = big_number_column(max="10")
    max_number: Mapped[BigNumber | None] = big_number_column(max=10)
    max_big_number: Mapped[BigNumber | None] = big_number_column(max=BigNumber("10"))
    scaled: Mapped[BigNumber | None] = big_number_column(scale=2)
    half_down: Mapped[BigNumber | None] = big_number_column(scale=2, rounding="half_down")


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture bignumber_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            field.cast("abc")
            logs = captured_logs()
            assert any(r["message"] == "cast_failed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("bignumber_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture(scope="session")
def db_engine():
    """Single in-memory SQLite engine for the entire test session."""
    engine = init_engine_from_url(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_tables()
    register_big_number_listeners(Base)
    yield engine
    unregister_big_number_listeners()
    drop_tables()
    reset_engine()


@pytest.fixture
def session(db_engine):
    """Session for one test; sample rows are removed afterwards."""
    session = get_session()
    yield session
    session.rollback()
    session.execute(delete(Sample))
    session.commit()
    session.close()


@pytest.fixture
def sample_model(db_engine):
    """The mapped Sample class, with listeners installed."""
    return Sample
