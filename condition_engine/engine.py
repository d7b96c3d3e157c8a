"""Condition engine facade.

Owns a transform registry and the configured comparison defaults, and
builds a fresh ``Context`` for every call so no state leaks between
evaluations.
"""

import logging
from collections.abc import Mapping
from typing import Any

from condition_engine.core.config import Settings, get_settings
from condition_engine.rules.context import ComparisonOption, Context, Resolver, build_context
from condition_engine.rules.expressions import Expression, evaluate
from condition_engine.rules.operands import mustache_token
from condition_engine.rules.results import Result
from condition_engine.rules.templates import render_template
from condition_engine.rules.transforms import TransformRegistry
from condition_engine.rules.values import Value

logger = logging.getLogger(__name__)

Values = Mapping[str, Any] | Resolver


class ConditionEngine:
    """Evaluates expressions against runtime values.

    Example:
        >>> engine = ConditionEngine()
        >>> engine.transforms.register("shout", lambda v: f"{v}!")
        >>> expr = comparison(mustache_token("{{shout(name)}}"), "equals", literal("Ada!"))
        >>> engine.evaluate(expr, {"name": "Ada"}).success
        True
    """

    def __init__(
        self,
        transforms: TransformRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            transforms: Registry to use; a new one is created when omitted
            settings: Engine settings, defaults to the cached environment settings
        """
        self.settings = settings or get_settings()
        if transforms is None:
            transforms = (
                TransformRegistry.with_builtins()
                if self.settings.register_builtin_transforms
                else TransformRegistry()
            )
        self.transforms = transforms

    def context_for(self, values: Values, option: ComparisonOption | str | None = None) -> Context:
        """Build the context for one evaluation."""
        return build_context(
            values,
            transforms=self.transforms,
            option=option or self.settings.comparison_option,
            policy=self.settings.coercion_policy,
        )

    def evaluate(
        self,
        expression: Expression,
        values: Values,
        option: ComparisonOption | str | None = None,
    ) -> Result:
        """Evaluate ``expression`` against ``values``.

        Args:
            expression: Expression tree to evaluate
            values: Mapping of token names to values, or a resolver callable
            option: Comparison option overriding the configured default

        Returns:
            Result of the evaluation
        """
        result = evaluate(expression, self.context_for(values, option))
        if result.success:
            logger.debug("Expression succeeded")
        else:
            logger.debug(
                f"Expression failed: {result.reason}",
                extra={"failure_type": result.failure_type.value if result.failure_type else None},
            )
        return result

    def resolve(self, text: str | None, values: Values) -> Value:
        """Resolve operand token text such as ``{{name}}``."""
        return mustache_token(text).resolve(self.context_for(values))

    def render(self, template: str | None, values: Values) -> str:
        """Replace every token in ``template`` with its resolved text."""
        return render_template(template, self.context_for(values))


def evaluate_condition(
    expression: Expression,
    values: Values,
    transforms: TransformRegistry | None = None,
    option: ComparisonOption | str | None = None,
) -> Result:
    """Convenience function to evaluate an expression with default settings.

    Args:
        expression: Expression tree to evaluate
        values: Mapping of token names to values, or a resolver callable
        transforms: Optional transform registry
        option: Optional comparison option

    Returns:
        Result
    """
    engine = ConditionEngine(transforms=transforms)
    return engine.evaluate(expression, values, option=option)
