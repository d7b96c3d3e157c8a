"""Comparison operators and cross-kind coercion.

Supported operators (with accepted aliases):
- equals (==, eq), notEquals (!=, neq)
- greaterThan (>, gt), greaterEqual (>=, gte), lessThan (<, lt), lessEqual (<=, lte)
- startsWith, endsWith, contains, notContains

Coercion between kinds, applied before equality and relational checks:
- same kind: compared natively
- number vs numeric string: compared as numbers (``numeric_strings``)
- boolean vs "true"/"false" string, any case: compared as booleans (``boolean_strings``)
- anything else: type mismatch

Relational operators require numbers after coercion; string operators
require strings on both sides. A comparison involving an unresolved
operand always fails.
"""

import logging
import math
import operator as _operator
from enum import Enum

from condition_engine.rules.context import CoercionPolicy, Context
from condition_engine.rules.results import FailureType, Result
from condition_engine.rules.values import Value, ValueKind

logger = logging.getLogger(__name__)


class ComparisonOperator(str, Enum):
    """Operators accepted by comparison expressions."""
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    GREATER_THAN = "greaterThan"
    GREATER_EQUAL = "greaterEqual"
    LESS_THAN = "lessThan"
    LESS_EQUAL = "lessEqual"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"


OPERATOR_ALIASES: dict[str, ComparisonOperator] = {
    "==": ComparisonOperator.EQUALS,
    "eq": ComparisonOperator.EQUALS,
    "!=": ComparisonOperator.NOT_EQUALS,
    "neq": ComparisonOperator.NOT_EQUALS,
    ">": ComparisonOperator.GREATER_THAN,
    "gt": ComparisonOperator.GREATER_THAN,
    ">=": ComparisonOperator.GREATER_EQUAL,
    "gte": ComparisonOperator.GREATER_EQUAL,
    "<": ComparisonOperator.LESS_THAN,
    "lt": ComparisonOperator.LESS_THAN,
    "<=": ComparisonOperator.LESS_EQUAL,
    "lte": ComparisonOperator.LESS_EQUAL,
}

_OPERATOR_LOOKUP: dict[str, ComparisonOperator] = {
    **{op.value.lower(): op for op in ComparisonOperator},
    **OPERATOR_ALIASES,
}

_RELATIONAL = {
    ComparisonOperator.GREATER_THAN: _operator.gt,
    ComparisonOperator.GREATER_EQUAL: _operator.ge,
    ComparisonOperator.LESS_THAN: _operator.lt,
    ComparisonOperator.LESS_EQUAL: _operator.le,
}

_STRING_OPERATORS = {
    ComparisonOperator.STARTS_WITH: lambda a, b: a.startswith(b),
    ComparisonOperator.ENDS_WITH: lambda a, b: a.endswith(b),
    ComparisonOperator.CONTAINS: lambda a, b: b in a,
    ComparisonOperator.NOT_CONTAINS: lambda a, b: b not in a,
}


def lookup_operator(name: object) -> ComparisonOperator | None:
    """Map an operator identifier or alias to a ``ComparisonOperator``."""
    if isinstance(name, ComparisonOperator):
        return name
    if not isinstance(name, str):
        return None
    return _OPERATOR_LOOKUP.get(name.strip().lower())


def _as_number(value: Value) -> Value | None:
    if value.kind is ValueKind.NUMBER:
        return value
    if value.kind is not ValueKind.STRING:
        return None

    text = value.raw.strip()
    try:
        return Value.number(int(text))
    except ValueError:
        pass
    try:
        parsed = float(text)
    except ValueError:
        return None
    if math.isnan(parsed):
        return None
    return Value.number(parsed)


def _as_boolean(value: Value) -> Value | None:
    if value.kind is ValueKind.BOOLEAN:
        return value
    if value.kind is ValueKind.STRING:
        text = value.raw.strip().lower()
        if text in ("true", "false"):
            return Value.boolean(text == "true")
    return None


def coerce_pair(lhs: Value, rhs: Value, policy: CoercionPolicy) -> tuple[Value, Value] | None:
    """Bring two resolved values to a common kind.

    Returns:
        The coerced pair, or None when the kinds cannot be reconciled
    """
    if lhs.kind is rhs.kind:
        return lhs, rhs

    kinds = {lhs.kind, rhs.kind}
    if ValueKind.ABSENT in kinds:
        return None

    if kinds == {ValueKind.NUMBER, ValueKind.STRING} and policy.numeric_strings:
        left, right = _as_number(lhs), _as_number(rhs)
        if left is not None and right is not None:
            return left, right

    if kinds == {ValueKind.BOOLEAN, ValueKind.STRING} and policy.boolean_strings:
        left, right = _as_boolean(lhs), _as_boolean(rhs)
        if left is not None and right is not None:
            return left, right

    return None


def _fold(text: str, context: Context) -> str:
    return text.casefold() if context.case_insensitive else text


def _values_equal(lhs: Value, rhs: Value, context: Context) -> bool:
    if lhs.kind is ValueKind.STRING:
        return _fold(lhs.raw, context) == _fold(rhs.raw, context)
    return lhs.raw == rhs.raw


def _unresolved(lhs: Value, rhs: Value) -> Result:
    if lhs.is_absent and rhs.is_absent:
        side = "Both operands"
    elif lhs.is_absent:
        side = "Left operand"
    else:
        side = "Right operand"
    return Result.fail(f"{side} did not resolve", FailureType.INVALID_OPERAND)


def _mismatch(lhs: Value, op: ComparisonOperator, rhs: Value) -> Result:
    return Result.fail(
        f"Type mismatch: cannot apply '{op.value}' to {lhs.describe()} and {rhs.describe()}",
        FailureType.TYPE_MISMATCHED,
    )


def compare(lhs: Value, operator: object, rhs: Value, context: Context) -> Result:
    """Compare two resolved values.

    Args:
        lhs: Left value
        operator: Operator identifier, alias or ``ComparisonOperator``
        rhs: Right value
        context: Supplies the comparison option and coercion policy

    Returns:
        Result; failures carry a reason and failure type
    """
    op = lookup_operator(operator)
    if op is None:
        return Result.fail(f"Unsupported operator '{operator}'", FailureType.MISSING_OPERATOR)

    if lhs.is_absent or rhs.is_absent:
        if (
            lhs.is_absent
            and rhs.is_absent
            and op is ComparisonOperator.EQUALS
            and context.policy.absent_equals_absent
        ):
            return Result.ok()
        return _unresolved(lhs, rhs)

    if op in _STRING_OPERATORS:
        if lhs.kind is not ValueKind.STRING or rhs.kind is not ValueKind.STRING:
            return _mismatch(lhs, op, rhs)
        outcome = _STRING_OPERATORS[op](_fold(lhs.raw, context), _fold(rhs.raw, context))
    else:
        pair = coerce_pair(lhs, rhs, context.policy)
        if pair is None:
            return _mismatch(lhs, op, rhs)
        left, right = pair

        if op is ComparisonOperator.EQUALS:
            outcome = _values_equal(left, right, context)
        elif op is ComparisonOperator.NOT_EQUALS:
            outcome = not _values_equal(left, right, context)
        else:
            if left.kind is not ValueKind.NUMBER:
                return _mismatch(lhs, op, rhs)
            outcome = _RELATIONAL[op](left.raw, right.raw)

    if outcome:
        return Result.ok()

    logger.debug(f"Comparison '{op.value}' did not hold", extra={"operator": op.value})
    return Result.fail(
        f"Condition not met: {lhs.describe()} {op.value} {rhs.describe()}",
        FailureType.CONDITION_FAILED,
    )
