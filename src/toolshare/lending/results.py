"""Uniform result shape returned by every lending operation."""

import functools
import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel, ValidationError

from ..errors import ErrorKind, LendingError
from .validation import describe_validation_error

logger = logging.getLogger(__name__)


class OperationResult(BaseModel):
    """Outcome of one lending operation."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str, kind: ErrorKind) -> "OperationResult":
        return cls(success=False, error=message, error_kind=kind)

    def to_dict(self) -> dict:
        """Plain dict for front ends, records rendered with camelCase keys."""
        if self.success:
            return {"success": True, "data": _dump(self.data)}
        return {"success": False, "error": self.error, "errorKind": self.error_kind.value}


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


def operation(action: str) -> Callable:
    """Wrap a manager method so it returns an OperationResult and never raises.

    Args:
        action: Prefix for error messages, e.g. "Failed to borrow tool"
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> OperationResult:
            try:
                return OperationResult.ok(func(*args, **kwargs))
            except LendingError as e:
                logger.info("%s: %s", action, e)
                return OperationResult.fail(f"{action}: {e}", e.kind)
            except ValidationError as e:
                message = describe_validation_error(e)
                logger.info("%s: %s", action, message)
                return OperationResult.fail(f"{action}: {message}", ErrorKind.INVALID_INPUT)
            except Exception as e:
                logger.exception("%s: unexpected error", action)
                return OperationResult.fail(f"{action}: {e}", ErrorKind.INTERNAL)

        return wrapper

    return decorator
