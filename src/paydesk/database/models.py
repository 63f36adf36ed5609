"""SQLAlchemy models for the paydesk remote store.

Each model is one document collection. Nested employee data (allocations,
documents, payouts) is kept as JSON inside the employee document.
"""

import time
import uuid

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    Date,
    Numeric,
    String,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_document_id() -> str:
    """Return a fresh store-assigned document identifier."""
    return uuid.uuid4().hex


_last_position = 0


def next_position() -> int:
    """Strictly increasing insertion position (nanosecond timestamp based)."""
    global _last_position
    _last_position = max(time.time_ns(), _last_position + 1)
    return _last_position


class Department(Base):
    """Department document."""

    __tablename__ = "departments"

    id = Column(String(64), primary_key=True, default=new_document_id)
    name = Column(String, nullable=False)
    monthly_budget = Column(Numeric(14, 2), nullable=False)
    position = Column(BigInteger, default=next_position, nullable=False, index=True)


class Employee(Base):
    """Employee document."""

    __tablename__ = "employees"

    id = Column(String(64), primary_key=True, default=new_document_id)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="")
    primary_department = Column(String, nullable=True)
    total_annual_salary = Column(Numeric(14, 2), nullable=False)
    allocations = Column(JSON, nullable=False, default=list)
    status = Column(String, nullable=False)
    start_date = Column(Date, nullable=True)
    termination_date = Column(Date, nullable=True)
    documents = Column(JSON, nullable=False, default=list)
    payouts = Column(JSON, nullable=False, default=list)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    upi_id = Column(String, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    position = Column(BigInteger, default=next_position, nullable=False, index=True)


class Expense(Base):
    """Expense document."""

    __tablename__ = "expenses"

    id = Column(String(64), primary_key=True, default=new_document_id)
    description = Column(String, nullable=False, default="")
    amount = Column(Numeric(14, 2), nullable=False)
    department = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    category = Column(String, nullable=False)
    position = Column(BigInteger, default=next_position, nullable=False, index=True)


def create_session_factory(database_url: str) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an async engine and session factory for ``database_url``."""
    engine = create_async_engine(database_url, echo=False)
    return engine, async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
