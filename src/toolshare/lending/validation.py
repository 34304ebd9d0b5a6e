"""Field validation for lending payloads.

Every function returns a validated schema or raises InvalidInputError.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import InvalidInputError
from .schemas import ToolCreate, ToolUpdate, TransactionUpdate, UserCreate, UserUpdate

S = TypeVar("S", bound=BaseModel)


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into one line."""
    parts = []
    for item in error.errors():
        field = ".".join(str(p) for p in item["loc"]) or "payload"
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)


def _validate(schema: type[S], payload: Any) -> S:
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise InvalidInputError(describe_validation_error(e)) from e


def validate_user(username: Any, contact_info: Any) -> UserCreate:
    return _validate(UserCreate, {"username": username, "contact_info": contact_info})


def validate_tool(owner_id: Any, tool_name: Any, description: Any, condition: Any) -> ToolCreate:
    return _validate(
        ToolCreate,
        {
            "owner_id": owner_id,
            "tool_name": tool_name,
            "description": description,
            "condition": condition,
        },
    )


def validate_user_update(payload: Any) -> UserUpdate:
    return _validate(UserUpdate, payload)


def validate_tool_update(payload: Any) -> ToolUpdate:
    return _validate(ToolUpdate, payload)


def validate_transaction_update(payload: Any) -> TransactionUpdate:
    return _validate(TransactionUpdate, payload)


def require_id(value: Any, field: str) -> str:
    """Check that an identifier argument is a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{field}: must be a non-empty string")
    return value
