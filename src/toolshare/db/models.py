"""SQLAlchemy ORM models for local SQLite storage.

Tables:
- users: User profiles with owned/borrowed tool IDs
- tools: Tool listings
- borrowing_transactions: Individual borrowing records

Rows reference each other by ID only; there are no foreign keys so that a
returned transaction can outlive the user or tool it mentions.
"""

import json
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .schemas import BorrowingTransaction, ToolListing, TransactionStatus, UserProfile


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def utc_now() -> str:
    """Current UTC time as an ISO string."""
    return datetime.now(timezone.utc).isoformat()


class User(Base):
    """User model - people who list and borrow tools."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    contact_info: Mapped[str] = mapped_column(String(200), nullable=False)
    tools_owned: Mapped[Optional[str]] = mapped_column(Text)  # JSON array
    tools_borrowed: Mapped[Optional[str]] = mapped_column(Text)  # JSON array

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)
    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now, onupdate=utc_now)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"

    # Helper methods for JSON fields
    def get_tools_owned(self) -> list[str]:
        """Get owned tool IDs as list."""
        if self.tools_owned:
            return json.loads(self.tools_owned)
        return []

    def set_tools_owned(self, tool_ids: list[str]) -> None:
        """Set owned tool IDs from list."""
        self.tools_owned = json.dumps(tool_ids) if tool_ids else None

    def get_tools_borrowed(self) -> list[str]:
        """Get borrowed tool IDs as list."""
        if self.tools_borrowed:
            return json.loads(self.tools_borrowed)
        return []

    def set_tools_borrowed(self, tool_ids: list[str]) -> None:
        """Set borrowed tool IDs from list."""
        self.tools_borrowed = json.dumps(tool_ids) if tool_ids else None

    def to_record(self) -> UserProfile:
        return UserProfile(
            user_id=self.id,
            username=self.username,
            contact_info=self.contact_info,
            tools_owned=self.get_tools_owned(),
            tools_borrowed=self.get_tools_borrowed(),
        )

    def apply_record(self, record: UserProfile) -> None:
        self.username = record.username
        self.contact_info = record.contact_info
        self.set_tools_owned(record.tools_owned)
        self.set_tools_borrowed(record.tools_borrowed)


class Tool(Base):
    """Tool model - a listing offered for lending."""

    __tablename__ = "tools"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    tool_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    condition: Mapped[str] = mapped_column(String(50), nullable=False)
    availability: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)
    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now, onupdate=utc_now)

    def __repr__(self) -> str:
        return f"<Tool(id={self.id}, name='{self.tool_name}', available={self.availability})>"

    def to_record(self) -> ToolListing:
        return ToolListing(
            tool_id=self.id,
            owner_id=self.owner_id,
            tool_name=self.tool_name,
            description=self.description,
            condition=self.condition,
            availability=self.availability,
        )

    def apply_record(self, record: ToolListing) -> None:
        self.owner_id = record.owner_id
        self.tool_name = record.tool_name
        self.description = record.description
        self.condition = record.condition
        self.availability = record.availability


class Transaction(Base):
    """Borrowing transaction model - tracks one tool loan."""

    __tablename__ = "borrowing_transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    tool_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    borrower_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=TransactionStatus.PENDING.value, index=True
    )

    # Dates
    borrow_date: Mapped[str] = mapped_column(String(32), nullable=False)  # ISO datetime
    return_date: Mapped[Optional[str]] = mapped_column(String(32))  # ISO datetime

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, tool_id={self.tool_id}, status={self.status})>"

    def to_record(self) -> BorrowingTransaction:
        return BorrowingTransaction(
            transaction_id=self.id,
            tool_id=self.tool_id,
            borrower_id=self.borrower_id,
            borrow_date=datetime.fromisoformat(self.borrow_date),
            return_date=datetime.fromisoformat(self.return_date) if self.return_date else None,
            status=TransactionStatus(self.status),
        )

    def apply_record(self, record: BorrowingTransaction) -> None:
        self.tool_id = record.tool_id
        self.borrower_id = record.borrower_id
        self.status = record.status.value
        self.borrow_date = record.borrow_date.isoformat()
        self.return_date = record.return_date.isoformat() if record.return_date else None
