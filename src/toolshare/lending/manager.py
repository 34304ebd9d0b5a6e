"""Lending manager: users, tool listings and borrowing transactions.

Every public method runs as one unit inside a single store session. The
store serialises sessions, so calls from any number of managers sharing a
store never interleave. A failed call leaves no partial writes behind.
Methods return an ``OperationResult`` instead of raising.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union
from uuid import uuid4

from ..db.schemas import BorrowingTransaction, ToolListing, TransactionStatus, UserProfile
from ..db.store import RecordStore, build_store
from ..errors import ConflictError, InvalidInputError, InvalidStateError, NotFoundError
from . import queries
from .results import operation
from .schemas import LendingStats
from .validation import (
    require_id,
    validate_tool,
    validate_tool_update,
    validate_transaction_update,
    validate_user,
    validate_user_update,
)

logger = logging.getLogger(__name__)

ACTIVE_TRANSACTIONS_EXIST = "active borrowing transactions exist"

# Status changes allowed through update_transaction. Moving to RETURNED
# has side effects on the tool and borrower and only happens in return_tool.
ALLOWED_STATUS_UPDATES = {
    TransactionStatus.PENDING: {TransactionStatus.APPROVED},
    TransactionStatus.APPROVED: set(),
    TransactionStatus.RETURNED: set(),
}


def generate_id() -> str:
    """Generate a UUID string for new records."""
    return str(uuid4())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LendingManager:
    """Manages tool lending operations."""

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize lending manager.

        Args:
            store: Record store instance (default: built from configuration)
            clock: Source of timestamps for borrow and return dates
        """
        self.store = store or build_store()
        self.clock = clock

    # -------------------------------------------------------------------------
    # User Management
    # -------------------------------------------------------------------------

    @operation("Failed to add user")
    def create_user(self, username: str, contact_info: str) -> str:
        """Register a user.

        Returns:
            New user ID
        """
        data = validate_user(username, contact_info)
        user = UserProfile(
            user_id=generate_id(),
            username=data.username,
            contact_info=data.contact_info,
        )
        with self.store.session() as records:
            records.users.insert(user.user_id, user)

        logger.info("Added user %s (%s)", user.user_id, user.username)
        return user.user_id

    @operation("Failed to get user")
    def get_user(self, user_id: str) -> UserProfile:
        require_id(user_id, "user_id")
        with self.store.session() as records:
            return records.users.get(user_id)

    @operation("Failed to list users")
    def list_users(self) -> list[UserProfile]:
        with self.store.session() as records:
            return sorted(records.users.values(), key=lambda u: u.username.lower())

    @operation("Failed to update user")
    def update_user(self, user_id: str, payload: Union[dict, Any]) -> UserProfile:
        """Merge profile fields onto an existing user.

        Identity and tool ID fields in the payload are ignored.
        """
        require_id(user_id, "user_id")
        update = validate_user_update(payload)
        with self.store.session() as records:
            user = records.users.get(user_id)
            user = user.model_copy(update=update.model_dump(exclude_unset=True, exclude_none=True))
            records.users.insert(user_id, user)

        logger.info("Updated user %s", user_id)
        return user

    @operation("Failed to delete user")
    def delete_user(self, user_id: str) -> str:
        """Delete a user together with the tools they list.

        Raises ConflictError while the user borrows a tool or one of their
        tools is lent out.
        """
        require_id(user_id, "user_id")
        with self.store.session() as records:
            records.users.get(user_id)
            if queries.active_transactions_for_user(records, user_id):
                raise ConflictError(ACTIVE_TRANSACTIONS_EXIST)

            for tool in queries.tools_owned_by(records, user_id):
                records.tools.remove(tool.tool_id)
            records.users.remove(user_id)

        logger.info("Deleted user %s", user_id)
        return user_id

    # -------------------------------------------------------------------------
    # Tool Management
    # -------------------------------------------------------------------------

    @operation("Failed to add tool")
    def create_tool(self, owner_id: str, tool_name: str, description: str, condition: str) -> str:
        """List a tool for lending.

        Returns:
            New tool ID
        """
        data = validate_tool(owner_id, tool_name, description, condition)
        with self.store.session() as records:
            owner = records.users.find(data.owner_id)
            if owner is None:
                raise NotFoundError("Owner", data.owner_id)

            tool = ToolListing(
                tool_id=generate_id(),
                owner_id=owner.user_id,
                tool_name=data.tool_name,
                description=data.description,
                condition=data.condition,
                availability=True,
            )
            records.tools.insert(tool.tool_id, tool)
            owner.tools_owned.append(tool.tool_id)
            records.users.insert(owner.user_id, owner)

        logger.info("Added tool %s (%s) for owner %s", tool.tool_id, tool.tool_name, owner.user_id)
        return tool.tool_id

    @operation("Failed to get tool")
    def get_tool(self, tool_id: str) -> ToolListing:
        require_id(tool_id, "tool_id")
        with self.store.session() as records:
            return records.tools.get(tool_id)

    @operation("Failed to list tools")
    def list_tools(self, owner_id: Optional[str] = None) -> list[ToolListing]:
        """List tools, optionally only those of one owner."""
        with self.store.session() as records:
            if owner_id:
                tools = queries.tools_owned_by(records, owner_id)
            else:
                tools = records.tools.values()
            return sorted(tools, key=lambda t: t.tool_name.lower())

    @operation("Failed to retrieve tools")
    def view_available_tools(self) -> list[ToolListing]:
        """All tools that can be borrowed right now."""
        with self.store.session() as records:
            return queries.available_tools(records)

    @operation("Failed to update tool")
    def update_tool(self, tool_id: str, payload: Union[dict, Any]) -> ToolListing:
        """Merge descriptive fields onto an existing tool.

        ``tool_id``, ``owner_id`` and ``availability`` are never taken from
        the payload.
        """
        require_id(tool_id, "tool_id")
        update = validate_tool_update(payload)
        with self.store.session() as records:
            tool = records.tools.get(tool_id)
            tool = tool.model_copy(update=update.model_dump(exclude_unset=True, exclude_none=True))
            records.tools.insert(tool_id, tool)

        logger.info("Updated tool %s", tool_id)
        return tool

    @operation("Failed to delete tool")
    def delete_tool(self, tool_id: str) -> str:
        require_id(tool_id, "tool_id")
        with self.store.session() as records:
            tool = records.tools.get(tool_id)
            if queries.active_transactions_for_tool(records, tool_id):
                raise ConflictError(ACTIVE_TRANSACTIONS_EXIST)

            records.tools.remove(tool_id)
            owner = records.users.find(tool.owner_id)
            if owner is not None:
                owner.tools_owned = [t for t in owner.tools_owned if t != tool_id]
                records.users.insert(owner.user_id, owner)

        logger.info("Deleted tool %s", tool_id)
        return tool_id

    # -------------------------------------------------------------------------
    # Borrowing Transactions
    # -------------------------------------------------------------------------

    @operation("Failed to borrow tool")
    def create_transaction(self, borrower_id: str, tool_id: str) -> str:
        """Borrow a tool.

        The availability check and the flip to unavailable happen in one store
        session, so of two concurrent borrows only one succeeds.

        Returns:
            New transaction ID
        """
        require_id(tool_id, "tool_id")
        with self.store.session() as records:
            tool = records.tools.find(tool_id)
            if tool is None or not tool.availability:
                raise ConflictError("Tool is not available for borrowing")
            if queries.active_transactions_for_tool(records, tool_id):
                raise ConflictError("Tool is not available for borrowing")

            require_id(borrower_id, "borrower_id")
            borrower = records.users.find(borrower_id)
            if borrower is None:
                raise NotFoundError("Borrower", borrower_id)

            transaction = BorrowingTransaction(
                transaction_id=generate_id(),
                tool_id=tool_id,
                borrower_id=borrower_id,
                borrow_date=self.clock(),
                return_date=None,
                status=TransactionStatus.PENDING,
            )
            records.transactions.insert(transaction.transaction_id, transaction)

            tool.availability = False
            records.tools.insert(tool_id, tool)

            if tool_id not in borrower.tools_borrowed:
                borrower.tools_borrowed.append(tool_id)
            records.users.insert(borrower_id, borrower)

        logger.info(
            "Tool %s borrowed by %s (transaction %s)",
            tool_id,
            borrower_id,
            transaction.transaction_id,
        )
        return transaction.transaction_id

    @operation("Failed to return tool")
    def return_tool(self, transaction_id: str) -> str:
        """Close a transaction and make the tool available again.

        Only a pending transaction can be returned. Returning the same
        transaction twice fails.

        Returns:
            Confirmation message
        """
        require_id(transaction_id, "transaction_id")
        with self.store.session() as records:
            transaction = records.transactions.find(transaction_id)
            if transaction is None:
                raise NotFoundError("Transaction", transaction_id)
            if transaction.status is TransactionStatus.RETURNED:
                raise InvalidStateError("Tool has already been returned")
            if transaction.status is not TransactionStatus.PENDING:
                raise InvalidStateError(
                    f"Cannot return a transaction with status '{transaction.status.value}'"
                )

            transaction.return_date = self.clock()
            transaction.status = TransactionStatus.RETURNED
            records.transactions.insert(transaction_id, transaction)

            tool = records.tools.find(transaction.tool_id)
            if tool is not None:
                tool.availability = True
                records.tools.insert(tool.tool_id, tool)

            borrower = records.users.find(transaction.borrower_id)
            if borrower is not None:
                borrower.tools_borrowed = [
                    t for t in borrower.tools_borrowed if t != transaction.tool_id
                ]
                records.users.insert(borrower.user_id, borrower)

        logger.info("Transaction %s returned (tool %s)", transaction_id, transaction.tool_id)
        return f"Tool with ID {transaction.tool_id} has been returned"

    @operation("Failed to get transaction")
    def get_transaction(self, transaction_id: str) -> BorrowingTransaction:
        require_id(transaction_id, "transaction_id")
        with self.store.session() as records:
            return records.transactions.get(transaction_id)

    @operation("Failed to list transactions")
    def list_transactions(
        self,
        status: Optional[Union[TransactionStatus, str]] = None,
        tool_id: Optional[str] = None,
        borrower_id: Optional[str] = None,
    ) -> list[BorrowingTransaction]:
        """List transactions with optional filters.

        Args:
            status: Filter by status
            tool_id: Filter by tool
            borrower_id: Filter by borrower

        Returns:
            List of transactions, newest first
        """
        if status is not None:
            try:
                status = TransactionStatus(status)
            except ValueError:
                raise InvalidInputError(f"status: unknown status '{status}'")

        with self.store.session() as records:
            return queries.filter_transactions(
                records, status=status, tool_id=tool_id, borrower_id=borrower_id
            )

    @operation("Failed to update transaction")
    def update_transaction(
        self, transaction_id: str, payload: Union[dict, Any]
    ) -> BorrowingTransaction:
        """Merge mergeable fields onto a transaction.

        Only ``status`` can change here, and only from pending to approved.
        Returning goes through ``return_tool``.
        """
        require_id(transaction_id, "transaction_id")
        update = validate_transaction_update(payload)
        with self.store.session() as records:
            transaction = records.transactions.get(transaction_id)

            target = update.status
            if target is not None and target != transaction.status:
                if target not in ALLOWED_STATUS_UPDATES[transaction.status]:
                    if target is TransactionStatus.RETURNED:
                        raise InvalidStateError("Use return_tool to return a tool")
                    raise InvalidStateError(
                        f"Cannot change status from {transaction.status.value} to {target.value}"
                    )
                transaction.status = target
                records.transactions.insert(transaction_id, transaction)

        logger.info("Updated transaction %s", transaction_id)
        return transaction

    @operation("Failed to delete transaction")
    def delete_transaction(self, transaction_id: str) -> str:
        """Delete a returned transaction.

        Active transactions cannot be deleted: the tool would stay
        unavailable with nothing left to return.
        """
        require_id(transaction_id, "transaction_id")
        with self.store.session() as records:
            transaction = records.transactions.get(transaction_id)
            if transaction.is_active:
                raise ConflictError("Transaction is still active; return the tool first")
            records.transactions.remove(transaction_id)

        logger.info("Deleted transaction %s", transaction_id)
        return transaction_id

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @operation("Failed to compute statistics")
    def lending_stats(self) -> LendingStats:
        with self.store.session() as records:
            return queries.lending_stats(records)
