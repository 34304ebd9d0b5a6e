"""Pydantic schemas for stored records.

These are the values held by the record store. Attribute names are
snake_case; every model also reads and writes the camelCase names used by
external payloads (``userId``, ``toolsOwned``, ...).
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TransactionStatus(str, Enum):
    """Status of a borrowing transaction."""

    PENDING = "pending"
    APPROVED = "approved"  # Reserved for approval workflows
    RETURNED = "returned"

    @property
    def is_active(self) -> bool:
        """Whether the tool is still out with the borrower."""
        return self is not TransactionStatus.RETURNED


class RecordModel(BaseModel):
    """Base class for all stored records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfile(RecordModel):
    """A registered user."""

    user_id: str
    username: str
    contact_info: str
    tools_owned: list[str] = Field(default_factory=list)
    tools_borrowed: list[str] = Field(default_factory=list)


class ToolListing(RecordModel):
    """A tool offered for lending."""

    tool_id: str
    owner_id: str
    tool_name: str
    description: str
    condition: str
    availability: bool = True


class BorrowingTransaction(RecordModel):
    """One borrowing event of one tool by one borrower."""

    transaction_id: str
    tool_id: str
    borrower_id: str
    borrow_date: datetime
    return_date: Optional[datetime] = None
    status: TransactionStatus = TransactionStatus.PENDING

    @property
    def is_active(self) -> bool:
        return self.status.is_active
