"""Tool lending module.

Provides functionality for:
- Registering users and listing tools
- Borrowing and returning tools
- Guarding deletes while tools are lent out
- Browsing available tools
"""

from .manager import LendingManager
from .results import OperationResult
from .schemas import (
    LendingStats,
    ToolCreate,
    ToolUpdate,
    TransactionUpdate,
    UserCreate,
    UserUpdate,
)

__all__ = [
    "LendingManager",
    "OperationResult",
    "LendingStats",
    "UserCreate",
    "UserUpdate",
    "ToolCreate",
    "ToolUpdate",
    "TransactionUpdate",
]
