"""Operand leaves of an expression tree.

Two variants exist: ``Literal`` wraps a fixed value and ignores the
context; ``MustacheToken`` holds unparsed token text and resolves it
against the context on every evaluation (nothing is cached, so the same
operand can be reused with different contexts).
"""

from dataclasses import dataclass
from typing import Any

from condition_engine.rules.context import Context
from condition_engine.rules.tokens import parse_token
from condition_engine.rules.values import ABSENT, Value


@dataclass(frozen=True)
class Literal:
    """A constant operand."""
    value: Value

    def resolve(self, context: Context) -> Value:
        return self.value


@dataclass(frozen=True)
class MustacheToken:
    """An operand resolved from ``{{name}}`` or ``{{func(name)}}`` text."""
    text: str | None

    def resolve(self, context: Context) -> Value:
        """Resolve the token against ``context``.

        Steps:
        1. Parse the token text
        2. Look the referenced name up through the context resolver
        3. For function calls, pass the value through the named transform

        Malformed text resolves to ``ABSENT``. Kinds are preserved: a
        number in the context resolves to a number, not its string form.
        """
        token = parse_token(self.text)
        if token is None:
            return ABSENT

        return context.resolve_token(token)


Operand = Literal | MustacheToken


def literal(value: Any) -> Literal:
    """Build a literal operand from a Python scalar or a ``Value``."""
    return Literal(Value.of(value))


def mustache_token(text: str | None) -> MustacheToken:
    """Build a token operand from raw token text."""
    return MustacheToken(text)


def resolve_operand(operand: Operand, context: Context) -> Value:
    """Resolve any operand to a ``Value``; unknown operand types give ``ABSENT``."""
    if isinstance(operand, (Literal, MustacheToken)):
        return operand.resolve(context)
    return ABSENT
