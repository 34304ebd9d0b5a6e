"""Read-only queries over the record store."""

from typing import Optional

from ..db.schemas import BorrowingTransaction, ToolListing, TransactionStatus
from ..db.store import Records
from .schemas import LendingStats


def available_tools(records: Records) -> list[ToolListing]:
    """Tools that can be borrowed right now, sorted by name."""
    tools = [tool for tool in records.tools.values() if tool.availability]
    return sorted(tools, key=lambda t: t.tool_name.lower())


def tools_owned_by(records: Records, owner_id: str) -> list[ToolListing]:
    return [tool for tool in records.tools.values() if tool.owner_id == owner_id]


def filter_transactions(
    records: Records,
    status: Optional[TransactionStatus] = None,
    tool_id: Optional[str] = None,
    borrower_id: Optional[str] = None,
) -> list[BorrowingTransaction]:
    """Transactions matching all given filters, newest first."""
    transactions = records.transactions.values()

    if status:
        transactions = [t for t in transactions if t.status == status]
    if tool_id:
        transactions = [t for t in transactions if t.tool_id == tool_id]
    if borrower_id:
        transactions = [t for t in transactions if t.borrower_id == borrower_id]

    return sorted(transactions, key=lambda t: t.borrow_date, reverse=True)


def active_transactions_for_tool(records: Records, tool_id: str) -> list[BorrowingTransaction]:
    return [t for t in records.transactions.values() if t.tool_id == tool_id and t.is_active]


def active_transactions_for_user(records: Records, user_id: str) -> list[BorrowingTransaction]:
    """Active transactions where the user is the borrower or the tool owner."""
    owned = {tool.tool_id for tool in tools_owned_by(records, user_id)}
    return [
        t
        for t in records.transactions.values()
        if t.is_active and (t.borrower_id == user_id or t.tool_id in owned)
    ]


def lending_stats(records: Records) -> LendingStats:
    tools = records.tools.values()
    transactions = records.transactions.values()
    available = sum(1 for t in tools if t.availability)
    active = sum(1 for t in transactions if t.is_active)

    return LendingStats(
        total_users=len(records.users.values()),
        total_tools=len(tools),
        available_tools=available,
        lent_tools=len(tools) - available,
        active_transactions=active,
        returned_transactions=len(transactions) - active,
    )
