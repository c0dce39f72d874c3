"""
Operation results for the Hireflow Engine.

Every business operation reports its outcome through an OperationResult
instead of raising, so callers can inspect the failure kind and message
and retry with corrected input.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Category of an expected, recoverable failure."""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    UNAUTHORIZED = "UNAUTHORIZED"
    TERMINAL_STATE = "TERMINAL_STATE"
    STEP_TERMINAL = "STEP_TERMINAL"
    EMPTY_TEMPLATE = "EMPTY_TEMPLATE"


class OperationResult:
    """Result of a workflow or template operation."""

    def __init__(self, success: bool, message: str = "", data: Optional[Any] = None,
                 error: Optional[str] = None, kind: Optional[ErrorKind] = None):
        self.success = success
        self.message = message
        self.data = data
        self.error = error
        self.kind = kind

    @classmethod
    def ok(cls, data: Any = True, message: str = "") -> "OperationResult":
        """Build a successful result carrying ``data``."""
        return cls(True, message=message, data=data)

    @classmethod
    def fail(cls, kind: ErrorKind, error: str) -> "OperationResult":
        """Build a failed result with its kind and human-readable message."""
        return cls(False, message=error, error=error, kind=kind)

    @property
    def is_failure(self) -> bool:
        return not self.success

    def wrap(self, context: str) -> "OperationResult":
        """
        Propagate a failure one level up with extra context.

        The failure kind is preserved; only the message is prefixed.

        Args:
            context: Description of the operation that was attempted

        Returns:
            New failed OperationResult
        """
        return OperationResult.fail(self.kind, f"{context}: {self.error}")

    def __bool__(self):
        return self.success

    def __str__(self):
        if self.success:
            return f"✓ {self.message}"
        return f"✗ [{self.kind.value if self.kind else 'ERROR'}] {self.error}"

    def __repr__(self):
        return f"OperationResult(success={self.success!r}, kind={self.kind!r}, error={self.error!r})"
