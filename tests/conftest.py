"""Shared pytest fixtures for paydesk tests."""

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio

from paydesk.database.factories import sqlite_url
from paydesk.database.snapshot import SnapshotStore
from paydesk.database.sqlalchemy_store import SQLAlchemyStore
from paydesk.domain.entities import (
    Department,
    ExpenseCategory,
    Expense,
    WorkspaceSnapshot,
)
from paydesk.workspace.controller import WorkspaceController
from paydesk.workspace.identifiers import TemporaryIdFactory
from paydesk.workspace.strategies import SnapshotMirror

from fakes import MemoryStore, fixed_clock


@pytest.fixture
def small_snapshot():
    """Three departments with the default budget and one software expense."""
    departments = tuple(
        Department(id=f"dept-{i}", name=name, monthly_budget=Decimal("2500000"))
        for i, name in enumerate(["Tech", "Sales", "Content"])
    )
    expenses = (
        Expense(
            id="101",
            description="AWS Cloud Hosting",
            amount=Decimal("85000"),
            department="Tech",
            date=date(2025, 10, 1),
            category=ExpenseCategory.SOFTWARE,
        ),
    )
    return WorkspaceSnapshot(departments=departments, employees=(), expenses=expenses)


@pytest.fixture
def snapshot_store(tmp_path):
    """Create a snapshot store in a temporary directory."""
    return SnapshotStore(tmp_path / "data")


@pytest.fixture
def id_factory():
    """Deterministic temporary ID factory."""
    return TemporaryIdFactory(clock=fixed_clock())


@pytest.fixture
def local_controller(small_snapshot, snapshot_store, id_factory):
    """Controller in local mode over the small snapshot."""
    return WorkspaceController(small_snapshot, SnapshotMirror(snapshot_store), id_factory)


@pytest.fixture
def memory_store():
    """Configured, reachable in-memory remote store."""
    return MemoryStore()


@pytest_asyncio.fixture
async def remote_controller(memory_store, snapshot_store, small_snapshot, id_factory):
    """Controller in remote mode, seeded with the small snapshot."""
    controller = await WorkspaceController.start(
        memory_store, snapshot_store, seed=small_snapshot, id_factory=id_factory
    )
    for collection in memory_store.collections():
        collection.calls.clear()
    yield controller
    await controller.drain()


@pytest_asyncio.fixture
async def sqlite_store(tmp_path):
    """SQLAlchemy store on a temporary SQLite file."""
    store = SQLAlchemyStore(sqlite_url(tmp_path / "remote.db"))
    await store.initialize_schema()
    yield store
    await store.dispose()


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """Hide paydesk settings of the developer's environment and .env file."""
    for name in (
        "PAYDESK_DATABASE_URL",
        "PAYDESK_DATA_DIR",
        "PAYDESK_LOG_LEVEL",
        "OPENAI_API_KEY",
        "PAYDESK_OPENAI_API_KEY",
        "PAYDESK_OPENAI_MODEL",
        "PAYDESK_ORGANIZATION",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def cli_env(tmp_path, clean_env):
    """Global CLI options for an isolated local workspace."""
    data_dir = tmp_path / "cli-data"
    return ["--data-dir", str(data_dir)]
