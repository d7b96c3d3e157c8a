"""Evaluation outcomes."""

from dataclasses import dataclass
from enum import Enum


class FailureType(str, Enum):
    """Why an evaluation did not succeed."""
    CONDITION_FAILED = "condition_failed"
    TYPE_MISMATCHED = "type_mismatched"
    MISSING_OPERATOR = "missing_operator"
    INVALID_OPERAND = "invalid_operand"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Result:
    """Success or failure of an expression, with a diagnostic reason on failure."""
    success: bool
    reason: str | None = None
    failure_type: FailureType | None = None

    @classmethod
    def ok(cls) -> "Result":
        return cls(success=True)

    @classmethod
    def fail(cls, reason: str, failure_type: FailureType = FailureType.CONDITION_FAILED) -> "Result":
        return cls(success=False, reason=reason, failure_type=failure_type)

    def __bool__(self) -> bool:
        return self.success
