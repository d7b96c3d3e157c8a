"""Rule condition interpreter.

This package resolves mustache tokens against a runtime context, applies
named transforms and evaluates comparison and logical expressions to a
success/failure result with a diagnostic reason.
"""

from condition_engine.rules.comparison import ComparisonOperator, compare, lookup_operator
from condition_engine.rules.context import (
    CoercionPolicy,
    ComparisonOption,
    Context,
    build_context,
    mapping_resolver,
)
from condition_engine.rules.expressions import (
    Comparison,
    Expression,
    LogicalGroup,
    LogicalOperator,
    Presence,
    PresenceOperator,
    comparison,
    evaluate,
    logical,
    presence,
)
from condition_engine.rules.operands import (
    Literal,
    MustacheToken,
    Operand,
    literal,
    mustache_token,
    resolve_operand,
)
from condition_engine.rules.results import FailureType, Result
from condition_engine.rules.templates import render_template
from condition_engine.rules.tokens import DEFAULT_DELIMITER, Delimiter, ParsedToken, parse_token
from condition_engine.rules.transforms import BUILTIN_TRANSFORMS, TransformRegistry
from condition_engine.rules.values import ABSENT, Value, ValueKind

__all__ = [
    "ABSENT",
    "BUILTIN_TRANSFORMS",
    "DEFAULT_DELIMITER",
    "CoercionPolicy",
    "Comparison",
    "ComparisonOperator",
    "ComparisonOption",
    "Context",
    "Delimiter",
    "Expression",
    "FailureType",
    "Literal",
    "LogicalGroup",
    "LogicalOperator",
    "MustacheToken",
    "Operand",
    "ParsedToken",
    "Presence",
    "PresenceOperator",
    "Result",
    "TransformRegistry",
    "Value",
    "ValueKind",
    "build_context",
    "compare",
    "comparison",
    "evaluate",
    "literal",
    "logical",
    "lookup_operator",
    "mapping_resolver",
    "mustache_token",
    "parse_token",
    "presence",
    "render_template",
    "resolve_operand",
]
