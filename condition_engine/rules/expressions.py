"""Expression trees and their evaluation.

Expressions are immutable and can be evaluated any number of times
against different contexts. Evaluation never raises for bad data: every
problem is reported through ``Result.reason``.

Logical groups evaluate their children in insertion order and stop as
soon as the outcome is known (first failure for AND, first success for
OR), so side-effecting transforms run a predictable number of times.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from condition_engine.rules.comparison import compare
from condition_engine.rules.context import Context
from condition_engine.rules.operands import Literal, MustacheToken, Operand, resolve_operand
from condition_engine.rules.results import FailureType, Result

logger = logging.getLogger(__name__)


class LogicalOperator(str, Enum):
    """Operators for logical groups."""
    AND = "and"
    OR = "or"
    NOT = "not"


class PresenceOperator(str, Enum):
    """Operators for presence checks on a single operand."""
    EXISTS = "exists"
    NOT_EXIST = "notExist"


_PRESENCE_LOOKUP = {
    "exists": PresenceOperator.EXISTS,
    "exist": PresenceOperator.EXISTS,
    "notexist": PresenceOperator.NOT_EXIST,
    "notexists": PresenceOperator.NOT_EXIST,
}


@dataclass(frozen=True)
class Comparison:
    """Binary comparison between two operands."""
    lhs: Operand
    operator: str
    rhs: Operand

    def evaluate(self, context: Context) -> Result:
        lhs = resolve_operand(self.lhs, context)
        rhs = resolve_operand(self.rhs, context)
        return compare(lhs, self.operator, rhs, context)


@dataclass(frozen=True)
class Presence:
    """Checks whether an operand resolves at all."""
    operand: Operand
    operator: str

    def evaluate(self, context: Context) -> Result:
        op = _PRESENCE_LOOKUP.get(self.operator.strip().lower()) if isinstance(self.operator, str) else None
        if op is None:
            return Result.fail(f"Unsupported operator '{self.operator}'", FailureType.MISSING_OPERATOR)

        present = not resolve_operand(self.operand, context).is_absent
        if op is PresenceOperator.EXISTS:
            return Result.ok() if present else Result.fail("Operand does not exist")
        return Result.fail("Operand exists") if present else Result.ok()


@dataclass(frozen=True)
class LogicalGroup:
    """AND/OR/NOT over an ordered tuple of child expressions."""
    operator: LogicalOperator | str
    children: tuple["Expression", ...]

    def __post_init__(self) -> None:
        operator = self.operator
        if isinstance(operator, str) and not isinstance(operator, LogicalOperator):
            try:
                operator = LogicalOperator(operator.strip().lower())
            except ValueError:
                pass
        object.__setattr__(self, "operator", operator)
        object.__setattr__(self, "children", tuple(self.children))

    def evaluate(self, context: Context) -> Result:
        if self.operator is LogicalOperator.AND:
            return self._evaluate_and(context)
        if self.operator is LogicalOperator.OR:
            return self._evaluate_or(context)
        if self.operator is LogicalOperator.NOT:
            return self._evaluate_not(context)
        return Result.fail(
            f"Unsupported logical operator '{self.operator}'", FailureType.MISSING_OPERATOR
        )

    def _evaluate_and(self, context: Context) -> Result:
        if not self.children:
            return Result.fail("'and' requires at least one operand", FailureType.INVALID_OPERAND)

        total = len(self.children)
        for index, child in enumerate(self.children, start=1):
            result = evaluate(child, context)
            if not result.success:
                return Result.fail(
                    f"'and' operand {index} of {total} failed: {result.reason}",
                    result.failure_type or FailureType.CONDITION_FAILED,
                )
        return Result.ok()

    def _evaluate_or(self, context: Context) -> Result:
        if not self.children:
            return Result.fail("'or' requires at least one operand", FailureType.INVALID_OPERAND)

        reasons = []
        for child in self.children:
            result = evaluate(child, context)
            if result.success:
                return Result.ok()
            reasons.append(result.reason or "failed")
        return Result.fail(
            f"'or' had no successful operand: {'; '.join(reasons)}",
            FailureType.CONDITION_FAILED,
        )

    def _evaluate_not(self, context: Context) -> Result:
        if len(self.children) != 1:
            return Result.fail(
                f"'not' requires exactly one operand, got {len(self.children)}",
                FailureType.INVALID_OPERAND,
            )

        if evaluate(self.children[0], context).success:
            return Result.fail("'not' operand succeeded", FailureType.CONDITION_FAILED)
        return Result.ok()


Expression = Comparison | LogicalGroup | Presence

_EXPRESSION_TYPES = (Comparison, LogicalGroup, Presence)
_OPERAND_TYPES = (Literal, MustacheToken)


def _check_operand(operand: object, role: str) -> None:
    if not isinstance(operand, _OPERAND_TYPES):
        raise TypeError(f"{role} must be an operand, got {type(operand).__name__}")


def comparison(lhs: Operand, operator: str, rhs: Operand) -> Comparison:
    """Build a comparison expression."""
    _check_operand(lhs, "lhs")
    _check_operand(rhs, "rhs")
    return Comparison(lhs=lhs, operator=operator, rhs=rhs)


def presence(operand: Operand, operator: str = PresenceOperator.EXISTS.value) -> Presence:
    """Build an ``exists``/``notExist`` check."""
    _check_operand(operand, "operand")
    return Presence(operand=operand, operator=operator)


def logical(kind: LogicalOperator | str, children: Iterable[Expression]) -> LogicalGroup:
    """Build a logical group.

    Args:
        kind: ``LogicalOperator`` or its name in any case; unknown names are
              kept and fail when evaluated
        children: Child expressions, evaluated in the given order

    Raises:
        TypeError: If a child is not an expression
    """
    children = tuple(children)
    for child in children:
        if not isinstance(child, _EXPRESSION_TYPES):
            raise TypeError(f"Logical operand must be an expression, got {type(child).__name__}")

    return LogicalGroup(operator=kind, children=children)


def evaluate(expression: Expression, context: Context) -> Result:
    """Evaluate an expression tree against a context.

    Args:
        expression: Root of the tree
        context: Resolver, transforms and comparison options for this call

    Returns:
        Result with success flag and, on failure, a reason
    """
    if isinstance(expression, _EXPRESSION_TYPES):
        return expression.evaluate(context)

    logger.debug(f"Cannot evaluate object of type {type(expression).__name__}")
    return Result.fail(
        f"Unsupported expression type '{type(expression).__name__}'", FailureType.UNKNOWN
    )
