"""Tests for lending payload validation."""

import pytest

from toolshare.errors import InvalidInputError
from toolshare.lending.schemas import ToolUpdate
from toolshare.lending.validation import (
    require_id,
    validate_tool,
    validate_tool_update,
    validate_transaction_update,
    validate_user,
)


class TestValidateUser:
    """Tests for user field checks."""

    def test_valid(self):
        """Test a valid user payload."""
        data = validate_user("alice", "alice@example.com")
        assert data.username == "alice"

    def test_limits(self):
        """Test user field length limits."""
        assert validate_user("a" * 100, "c" * 200).username == "a" * 100
        with pytest.raises(InvalidInputError, match="username"):
            validate_user("a" * 101, "x")
        with pytest.raises(InvalidInputError, match="contact_info|contactInfo"):
            validate_user("alice", "c" * 201)

    def test_missing(self):
        """Test missing user fields."""
        with pytest.raises(InvalidInputError):
            validate_user(None, None)


class TestValidateTool:
    """Tests for tool field checks."""

    def test_valid(self):
        """Test a valid tool payload."""
        data = validate_tool("u1", " Drill ", "Cordless", "good")
        assert data.tool_name == "Drill"
        assert data.owner_id == "u1"

    def test_description_limit(self):
        """Test the description length limit."""
        assert validate_tool("u1", "Drill", "d" * 1000, "good")
        with pytest.raises(InvalidInputError):
            validate_tool("u1", "Drill", "d" * 1001, "good")

    def test_message_names_every_field(self):
        """Test that the error message names each bad field."""
        with pytest.raises(InvalidInputError) as exc_info:
            validate_tool("u1", "", "", "")
        message = str(exc_info.value)
        assert "toolName" in message
        assert "description" in message
        assert "condition" in message


class TestValidateUpdates:
    """Tests for partial update payloads."""

    def test_unknown_keys_ignored(self):
        """Test that unknown update keys are dropped."""
        update = validate_tool_update({"toolId": "x", "ownerId": "y", "toolName": "Saw"})
        assert update.model_dump(exclude_unset=True) == {"tool_name": "Saw"}

    def test_schema_passes_through(self):
        """Test passing an update schema instance."""
        update = ToolUpdate(condition="new")
        assert validate_tool_update(update) is update

    def test_not_a_mapping(self):
        """Test an update that is not a mapping."""
        with pytest.raises(InvalidInputError):
            validate_tool_update(["toolName", "Saw"])

    def test_unknown_status(self):
        """Test an unknown transaction status."""
        with pytest.raises(InvalidInputError, match="status"):
            validate_transaction_update({"status": "lost"})


class TestRequireId:
    """Tests for identifier arguments."""

    def test_valid(self):
        """Test a valid ID."""
        assert require_id("abc", "tool_id") == "abc"

    @pytest.mark.parametrize("value", ["", "  ", None, 7])
    def test_invalid(self, value):
        """Test blank and non-string IDs."""
        with pytest.raises(InvalidInputError, match="tool_id"):
            require_id(value, "tool_id")
