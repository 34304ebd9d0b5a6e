"""Record store: per-entity key/value tables behind one session interface.

Each store hands out a ``Records`` view through ``session()``. All writes
made inside one session become visible together when the block exits
normally and are discarded when it raises.
"""

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Generic, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import Config, get_config
from ..errors import NotFoundError
from .models import Tool, Transaction, User
from .schemas import BorrowingTransaction, RecordModel, ToolListing, UserProfile
from .sqlite import Database, get_db

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=RecordModel)


class Table(ABC, Generic[R]):
    """Mapping from string ID to record for one entity type."""

    def __init__(self, entity: str):
        self.entity = entity

    @abstractmethod
    def get(self, record_id: str) -> R:
        """Return a copy of the record, raising NotFoundError if absent."""

    @abstractmethod
    def insert(self, record_id: str, value: R) -> None:
        """Insert or replace the record stored under ``record_id``."""

    @abstractmethod
    def remove(self, record_id: str) -> None:
        """Remove the record, raising NotFoundError if absent."""

    @abstractmethod
    def values(self) -> list[R]:
        """All records, order unspecified."""

    def find(self, record_id: str) -> Optional[R]:
        """Return the record or None."""
        try:
            return self.get(record_id)
        except NotFoundError:
            return None


@dataclass
class Records:
    """The three tables as seen from inside one store session."""

    users: Table[UserProfile]
    tools: Table[ToolListing]
    transactions: Table[BorrowingTransaction]


class RecordStore(ABC):
    """Durable storage for users, tools and transactions."""

    @abstractmethod
    def session(self) -> Generator[Records, None, None]:
        """Context manager yielding a ``Records`` view."""


# ============================================================================
# In-memory backend
# ============================================================================


class MemoryTable(Table[R]):
    """Dictionary-backed table. Records are copied on the way in and out."""

    def __init__(self, entity: str, rows: dict[str, R]):
        super().__init__(entity)
        self._rows = rows

    def get(self, record_id: str) -> R:
        row = self._rows.get(record_id)
        if row is None:
            raise NotFoundError(self.entity, record_id)
        return row.model_copy(deep=True)

    def insert(self, record_id: str, value: R) -> None:
        self._rows[record_id] = value.model_copy(deep=True)

    def remove(self, record_id: str) -> None:
        if record_id not in self._rows:
            raise NotFoundError(self.entity, record_id)
        del self._rows[record_id]

    def values(self) -> list[R]:
        return [row.model_copy(deep=True) for row in self._rows.values()]


class MemoryRecordStore(RecordStore):
    """Process-local store, used for tests and throwaway sessions."""

    def __init__(self):
        self._tables: dict[str, dict] = {"users": {}, "tools": {}, "transactions": {}}
        self._lock = threading.RLock()

    @contextmanager
    def session(self) -> Generator[Records, None, None]:
        with self._lock:
            # Stored records are never mutated in place, so copying the
            # mappings is enough to stage a session.
            staged = {name: dict(rows) for name, rows in self._tables.items()}
            yield Records(
                users=MemoryTable("User", staged["users"]),
                tools=MemoryTable("Tool", staged["tools"]),
                transactions=MemoryTable("Transaction", staged["transactions"]),
            )
            self._tables = staged


# ============================================================================
# SQLite backend
# ============================================================================


class SqlTable(Table[R]):
    """Table backed by one ORM model within an open SQLAlchemy session."""

    def __init__(self, entity: str, session: Session, model: type):
        super().__init__(entity)
        self._session = session
        self._model = model

    def get(self, record_id: str) -> R:
        row = self._session.get(self._model, record_id)
        if row is None:
            raise NotFoundError(self.entity, record_id)
        return row.to_record()

    def insert(self, record_id: str, value: R) -> None:
        row = self._session.get(self._model, record_id)
        if row is None:
            row = self._model(id=record_id)
            self._session.add(row)
        row.apply_record(value)
        self._session.flush()

    def remove(self, record_id: str) -> None:
        row = self._session.get(self._model, record_id)
        if row is None:
            raise NotFoundError(self.entity, record_id)
        self._session.delete(row)
        self._session.flush()

    def values(self) -> list[R]:
        rows = self._session.execute(select(self._model)).scalars().all()
        return [row.to_record() for row in rows]


class SqlRecordStore(RecordStore):
    """Store persisted in SQLite through SQLAlchemy."""

    def __init__(self, db: Database):
        self.db = db

    @contextmanager
    def session(self) -> Generator[Records, None, None]:
        # Every store on the same Database shares its lock.
        with self.db.lock, self.db.get_session() as s:
            yield Records(
                users=SqlTable("User", s, User),
                tools=SqlTable("Tool", s, Tool),
                transactions=SqlTable("Transaction", s, Transaction),
            )


def build_store(config: Optional[Config] = None) -> RecordStore:
    """Create the store selected by configuration."""
    config = config or get_config()
    if config.store_backend == "memory":
        logger.debug("Using in-memory record store")
        return MemoryRecordStore()
    return SqlRecordStore(get_db(str(config.db_path)))
