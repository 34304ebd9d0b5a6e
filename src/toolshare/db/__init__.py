"""Database module: SQLite storage and the record store interface."""

from .models import Tool, Transaction, User
from .schemas import BorrowingTransaction, ToolListing, TransactionStatus, UserProfile
from .sqlite import Database, get_db, reset_db
from .store import (
    MemoryRecordStore,
    Records,
    RecordStore,
    SqlRecordStore,
    Table,
    build_store,
)

__all__ = [
    "User",
    "Tool",
    "Transaction",
    "UserProfile",
    "ToolListing",
    "BorrowingTransaction",
    "TransactionStatus",
    "Database",
    "get_db",
    "reset_db",
    "RecordStore",
    "Records",
    "Table",
    "MemoryRecordStore",
    "SqlRecordStore",
    "build_store",
]
