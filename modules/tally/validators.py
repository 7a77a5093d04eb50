"""Validation errors raised by the tally engine.

Every error here is recoverable: the operation is rejected, the state is left
untouched and the message is shown to the operator as-is.
"""

from __future__ import annotations

from . import labels
from .models.enums import Axis


class ValidationError(RuntimeError):
    """Raised when a tally operation is rejected."""


class CapacityError(ValidationError):
    """Allocation total would exceed the transported count."""

    def __init__(self, message: str = labels.MSG_CAPACITY_EXCEEDED) -> None:
        super().__init__(message)


class EmptyPoolError(ValidationError):
    """The S/D pool of an axis has no patient left to classify."""

    def __init__(self, axis: Axis) -> None:
        self.axis = axis
        super().__init__(labels.MSG_EMPTY_POOL.format(axis=labels.AXIS_LABELS[axis]))


class InvalidDirectionError(ValidationError):
    """S/D pools only grow through patient intake."""

    def __init__(self, message: str = labels.MSG_DIRECT_INCREMENT) -> None:
        super().__init__(message)


class LastAllocationError(ValidationError):
    """The destination list must keep at least one record."""

    def __init__(self, message: str = labels.MSG_LAST_ALLOCATION) -> None:
        super().__init__(message)


__all__ = [
    "ValidationError",
    "CapacityError",
    "EmptyPoolError",
    "InvalidDirectionError",
    "LastAllocationError",
]
