"""Rule condition evaluation engine.

Resolves ``{{token}}`` references against runtime values, applies named
transforms and evaluates typed comparison and logical expressions.
"""

from condition_engine.rules import (
    ABSENT,
    CoercionPolicy,
    ComparisonOption,
    Context,
    FailureType,
    LogicalOperator,
    Result,
    TransformRegistry,
    Value,
    ValueKind,
    build_context,
    comparison,
    evaluate,
    literal,
    logical,
    mustache_token,
    presence,
    render_template,
)
from condition_engine.engine import ConditionEngine, evaluate_condition

__all__ = [
    "ABSENT",
    "CoercionPolicy",
    "ComparisonOption",
    "ConditionEngine",
    "Context",
    "FailureType",
    "LogicalOperator",
    "Result",
    "TransformRegistry",
    "Value",
    "ValueKind",
    "build_context",
    "comparison",
    "evaluate",
    "evaluate_condition",
    "literal",
    "logical",
    "mustache_token",
    "presence",
    "render_template",
]
