"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the toolshare application,
including both record store backends and a few ready-made users and tools.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from toolshare.config import reset_config
from toolshare.db.sqlite import Database, reset_db
from toolshare.db.store import MemoryRecordStore, RecordStore, SqlRecordStore
from toolshare.lending.manager import LendingManager


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


@pytest.fixture(params=["memory", "sqlite"])
def store(request, db: Database) -> RecordStore:
    """Each test using this fixture runs once per store backend."""
    if request.param == "memory":
        return MemoryRecordStore()
    return SqlRecordStore(db)


@pytest.fixture
def manager(store: RecordStore) -> LendingManager:
    """Create a LendingManager on the parametrized store."""
    return LendingManager(store)


@pytest.fixture
def env_db(temp_db_path: Path) -> Generator[Path, None, None]:
    """Point the global configuration at a temporary SQLite file."""
    reset_db()
    reset_config()
    os.environ["TOOLSHARE_DB_PATH"] = str(temp_db_path)
    os.environ["TOOLSHARE_STORE"] = "sqlite"

    yield temp_db_path

    reset_db()
    reset_config()
    for key in ("TOOLSHARE_DB_PATH", "TOOLSHARE_STORE"):
        os.environ.pop(key, None)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def owner_id(manager: LendingManager) -> str:
    """A user who lists tools."""
    return manager.create_user("alice", "alice@example.com").data


@pytest.fixture
def borrower_id(manager: LendingManager) -> str:
    """A user who borrows tools."""
    return manager.create_user("bob", "555-0100").data


@pytest.fixture
def tool_id(manager: LendingManager, owner_id: str) -> str:
    """A tool owned by ``owner_id``."""
    return manager.create_tool(owner_id, "Cordless Drill", "18V with two batteries", "good").data


@pytest.fixture
def transaction_id(manager: LendingManager, borrower_id: str, tool_id: str) -> str:
    """A pending transaction of ``tool_id`` borrowed by ``borrower_id``."""
    return manager.create_transaction(borrower_id, tool_id).data


# ============================================================================
# Invariant Helpers
# ============================================================================


def assert_consistent(manager: LendingManager) -> None:
    """Check the cross-entity lending invariants against the store."""
    users = manager.list_users().data
    tools = manager.list_tools().data
    transactions = manager.list_transactions().data

    for tool in tools:
        active = [t for t in transactions if t.tool_id == tool.tool_id and t.is_active]
        assert len(active) <= 1
        assert tool.availability is (len(active) == 0)

    borrowed_by = {}
    for t in transactions:
        if t.is_active:
            borrowed_by.setdefault(t.borrower_id, set()).add(t.tool_id)

    for user in users:
        owned = {tool.tool_id for tool in tools if tool.owner_id == user.user_id}
        assert set(user.tools_owned) == owned
        assert len(user.tools_owned) == len(owned)
        assert set(user.tools_borrowed) == borrowed_by.get(user.user_id, set())


@pytest.fixture
def consistent(manager: LendingManager):
    """Callable that checks the lending invariants for ``manager``."""
    return lambda: assert_consistent(manager)
