"""Tests for record schemas."""

from datetime import datetime, timezone

from toolshare.db.schemas import BorrowingTransaction, ToolListing, TransactionStatus, UserProfile


class TestAliases:
    """Records read and write camelCase names."""

    def test_user_from_camel_case(self):
        """Test building a user from camelCase keys."""
        user = UserProfile.model_validate(
            {"userId": "u1", "username": "alice", "contactInfo": "a@example.com", "toolsOwned": ["t1"]}
        )
        assert user.user_id == "u1"
        assert user.contact_info == "a@example.com"
        assert user.tools_owned == ["t1"]
        assert user.tools_borrowed == []

    def test_tool_dump_by_alias(self):
        """Test dumping a tool with camelCase keys."""
        tool = ToolListing(
            tool_id="t1",
            owner_id="u1",
            tool_name="Saw",
            description="Hand saw",
            condition="new",
        )
        dumped = tool.model_dump(by_alias=True)
        assert dumped == {
            "toolId": "t1",
            "ownerId": "u1",
            "toolName": "Saw",
            "description": "Hand saw",
            "condition": "new",
            "availability": True,
        }


class TestTransactionStatus:
    """Tests for transaction status helpers."""

    def test_active_statuses(self):
        """Test which statuses count as active."""
        assert TransactionStatus.PENDING.is_active
        assert TransactionStatus.APPROVED.is_active
        assert not TransactionStatus.RETURNED.is_active

    def test_new_transaction_defaults(self):
        """Test transaction defaults."""
        tx = BorrowingTransaction(
            transaction_id="x1",
            tool_id="t1",
            borrower_id="u2",
            borrow_date=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        assert tx.status == TransactionStatus.PENDING
        assert tx.return_date is None
        assert tx.is_active
