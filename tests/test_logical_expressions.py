"""Tests for logical groups, presence checks and tree evaluation."""

import pytest

from condition_engine.rules.context import Context, build_context
from condition_engine.rules.expressions import (
    LogicalGroup,
    LogicalOperator,
    comparison,
    evaluate,
    logical,
    presence,
)
from condition_engine.rules.operands import literal, mustache_token
from condition_engine.rules.results import FailureType


def counted(name: str, expected: str):
    """Comparison whose lhs goes through the counting transform."""
    return comparison(mustache_token(f"{{{{count({name})}}}}"), "equals", literal(expected))


class TestAnd:
    """Tests for AND groups."""

    def test_all_children_succeed(self, context: Context) -> None:
        """Test that AND succeeds when every child does."""
        expression = logical("and", [counted("Hero", "Soldier"), counted("Soda", "Pepsi")])
        assert evaluate(expression, context).success is True

    def test_short_circuits_on_first_failure(self, context: Context, counting_transform) -> None:
        """Test that children after the first failure are not evaluated."""
        expression = logical(
            LogicalOperator.AND,
            [counted("Hero", "Pilot"), counted("Soda", "Pepsi")],
        )

        result = evaluate(expression, context)

        assert result.success is False
        assert counting_transform.calls == ["Soldier"]
        assert result.reason.startswith("'and' operand 1 of 2 failed")

    def test_failure_type_propagates(self, context: Context) -> None:
        """Test that AND reports the failing child's failure type."""
        expression = logical("and", [comparison(mustache_token("{{nope}}"), "equals", literal(1))])

        assert evaluate(expression, context).failure_type is FailureType.INVALID_OPERAND


class TestOr:
    """Tests for OR groups."""

    def test_short_circuits_on_first_success(self, context: Context, counting_transform) -> None:
        """Test that children after the first success are not evaluated."""
        expression = logical(
            "OR",
            [counted("Beer", "Pepsi"), counted("Soda", "Pepsi"), counted("Hero", "Soldier")],
        )

        result = evaluate(expression, context)

        assert result.success is True
        assert counting_transform.calls == ["Corona", "Pepsi"]

    def test_all_children_fail(self, context: Context) -> None:
        """Test that OR collects every child's reason when all fail."""
        expression = logical("or", [counted("Beer", "x"), counted("Soda", "y")])
        result = evaluate(expression, context)

        assert result.success is False
        assert result.failure_type is FailureType.CONDITION_FAILED
        assert result.reason.count("Condition not met") == 2


class TestNot:
    """Tests for NOT groups."""

    def test_inverts_failure(self, context: Context) -> None:
        """Test that NOT turns a failure into success."""
        expression = logical("not", [counted("Hero", "Pilot")])
        assert evaluate(expression, context).success is True

    def test_inverts_success_with_synthesized_reason(self, context: Context) -> None:
        """Test that NOT of a success fails with its own reason."""
        result = evaluate(logical("not", [counted("Hero", "Soldier")]), context)

        assert result.success is False
        assert result.reason == "'not' operand succeeded"

    @pytest.mark.parametrize("count", [0, 2])
    def test_requires_exactly_one_child(self, context: Context, count: int) -> None:
        """Test that NOT with zero or several children is invalid."""
        children = [counted("Hero", "Soldier")] * count
        result = evaluate(logical("not", children), context)

        assert result.success is False
        assert result.failure_type is FailureType.INVALID_OPERAND


class TestGroupEdgeCases:
    """Tests for malformed groups and trees."""

    @pytest.mark.parametrize("kind", ["and", "or"])
    def test_empty_group_fails(self, context: Context, kind: str) -> None:
        """Test that empty AND and OR groups are invalid."""
        result = evaluate(logical(kind, []), context)
        assert result.failure_type is FailureType.INVALID_OPERAND

    def test_unknown_logical_operator(self, context: Context) -> None:
        """Test that an unknown group operator fails at evaluation."""
        expression = logical("xor", [counted("Hero", "Soldier")])

        result = evaluate(expression, context)

        assert expression.operator == "xor"
        assert result.failure_type is FailureType.MISSING_OPERATOR

    def test_unknown_expression_type(self, context: Context) -> None:
        """Test that evaluating a non-expression fails as unknown."""
        result = evaluate("not an expression", context)  # type: ignore[arg-type]

        assert result.success is False
        assert result.failure_type is FailureType.UNKNOWN

    def test_builders_reject_non_operands(self) -> None:
        """Test that builders reject children of the wrong type."""
        with pytest.raises(TypeError):
            comparison("{{Hero}}", "equals", literal("Soldier"))  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            logical("and", [literal("x")])  # type: ignore[list-item]

    def test_nested_tree(self, context: Context) -> None:
        """Test (Hero == Soldier AND (integerToken > 40 OR NOT booleanToken == true))."""
        expression = logical(
            "and",
            [
                comparison(mustache_token("{{Hero}}"), "equals", literal("Soldier")),
                logical(
                    "or",
                    [
                        comparison(mustache_token("{{integerToken}}"), "greaterThan", literal(40)),
                        logical(
                            "not",
                            [comparison(mustache_token("{{booleanToken}}"), "equals", literal(True))],
                        ),
                    ],
                ),
            ],
        )

        assert evaluate(expression, context).success is True

    def test_children_stored_as_tuple(self) -> None:
        """Test that a generator of children is frozen into a tuple."""
        group = logical("and", (c for c in [counted("Hero", "Soldier")]))

        assert isinstance(group, LogicalGroup)
        assert isinstance(group.children, tuple)

    def test_direct_construction_with_operator_name(self) -> None:
        """Test that LogicalGroup built directly from a name evaluates like the builder."""
        group = LogicalGroup(
            "and", (comparison(mustache_token("{{a}}"), "equals", literal(1)),)
        )

        assert group.operator is LogicalOperator.AND
        assert evaluate(group, build_context({"a": 1})).success is True

    def test_direct_construction_normalises_case_and_children(self) -> None:
        """Test that an upper-case name and a list of children are normalised."""
        group = LogicalGroup(
            "OR", [comparison(mustache_token("{{a}}"), "equals", literal(2))]
        )

        assert group.operator is LogicalOperator.OR
        assert isinstance(group.children, tuple)
        assert evaluate(group, build_context({"a": 1})).success is False


class TestPresence:
    """Tests for exists/notExist checks."""

    def test_exists(self, context: Context) -> None:
        """Test that exists holds only for resolved tokens."""
        assert evaluate(presence(mustache_token("{{Hero}}")), context).success is True
        assert evaluate(presence(mustache_token("{{Corona}}")), context).success is False

    def test_not_exist(self, context: Context) -> None:
        """Test that notExist holds only for unresolved tokens."""
        assert evaluate(presence(mustache_token("{{Corona}}"), "notExist"), context).success is True
        assert evaluate(presence(mustache_token("{{Hero}}"), "notExist"), context).success is False

    def test_false_boolean_exists(self, context: Context) -> None:
        """Test that a falsy value is still present."""
        assert evaluate(presence(mustache_token("{{booleanToken}}")), context).success is True

    def test_unknown_presence_operator(self, context: Context) -> None:
        """Test that an unknown presence operator fails as missing."""
        result = evaluate(presence(mustache_token("{{Hero}}"), "defined"), context)
        assert result.failure_type is FailureType.MISSING_OPERATOR


class TestIdempotence:
    """Tests for reusing immutable trees."""

    def test_same_tree_same_result(self, default_values, transforms) -> None:
        """Test that a tree gives equal results over equal contexts."""
        expression = logical(
            "or",
            [
                comparison(mustache_token("{{Soda}}"), "equals", literal("Coke")),
                comparison(mustache_token("{{integerToken}}"), "lessThan", literal("10")),
            ],
        )

        first = evaluate(expression, build_context(default_values, transforms=transforms))
        second = evaluate(expression, build_context(dict(default_values), transforms=transforms))

        assert first == second
        assert first.success is False
