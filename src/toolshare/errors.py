"""Exceptions raised by the record store and the lending core."""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a failed operation."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_STATE = "invalid_state"
    INTERNAL = "internal"


class LendingError(Exception):
    """Base class for expected operation failures."""

    kind: ErrorKind = ErrorKind.INTERNAL


class InvalidInputError(LendingError):
    """Missing or oversized fields."""

    kind = ErrorKind.INVALID_INPUT


class NotFoundError(LendingError):
    """A referenced user, tool or transaction does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} not found: {record_id}")


class ConflictError(LendingError):
    """The operation conflicts with the current lending state."""

    kind = ErrorKind.CONFLICT


class InvalidStateError(LendingError):
    """The transaction is not in a state that allows the operation."""

    kind = ErrorKind.INVALID_STATE
