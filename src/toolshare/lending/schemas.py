"""Pydantic schemas for lending operation payloads."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..db.schemas import TransactionStatus

USERNAME_MAX = 100
CONTACT_INFO_MAX = 200
TOOL_NAME_MAX = 100
DESCRIPTION_MAX = 1000
CONDITION_MAX = 50


class PayloadModel(BaseModel):
    """Base for incoming payloads. Unknown keys are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class UserCreate(PayloadModel):
    """Schema for registering a user."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX)
    contact_info: str = Field(..., min_length=1, max_length=CONTACT_INFO_MAX)


class UserUpdate(PayloadModel):
    """Schema for updating a user.

    Only profile fields are mergeable; ``user_id`` and the tool ID lists
    are maintained by the lending operations.
    """

    username: Optional[str] = Field(None, min_length=1, max_length=USERNAME_MAX)
    contact_info: Optional[str] = Field(None, min_length=1, max_length=CONTACT_INFO_MAX)


class ToolCreate(PayloadModel):
    """Schema for listing a tool."""

    owner_id: str = Field(..., min_length=1)
    tool_name: str = Field(..., min_length=1, max_length=TOOL_NAME_MAX)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX)
    condition: str = Field(..., min_length=1, max_length=CONDITION_MAX)


class ToolUpdate(PayloadModel):
    """Schema for updating a tool listing."""

    tool_name: Optional[str] = Field(None, min_length=1, max_length=TOOL_NAME_MAX)
    description: Optional[str] = Field(None, min_length=1, max_length=DESCRIPTION_MAX)
    condition: Optional[str] = Field(None, min_length=1, max_length=CONDITION_MAX)


class TransactionUpdate(PayloadModel):
    """Schema for updating a borrowing transaction."""

    status: Optional[TransactionStatus] = None


class LendingStats(BaseModel):
    """Overall lending statistics."""

    total_users: int
    total_tools: int
    available_tools: int
    lent_tools: int
    active_transactions: int
    returned_transactions: int
