"""Evaluation context.

A ``Context`` bundles everything one evaluation needs from its
environment: a resolver mapping token names to values, the transform
registry, and the string comparison mode plus coercion policy.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from condition_engine.rules.tokens import ParsedToken
from condition_engine.rules.transforms import TransformRegistry
from condition_engine.rules.values import ABSENT, Value

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Any]


class ComparisonOption(str, Enum):
    """String comparison modes."""
    DEFAULT = "DEFAULT"
    CASE_INSENSITIVE = "CASE_INSENSITIVE"


@dataclass(frozen=True)
class CoercionPolicy:
    """Which cross-kind comparisons are attempted before a type mismatch."""
    numeric_strings: bool = True        # "33" == 33
    boolean_strings: bool = True        # "TRUE" == true
    absent_equals_absent: bool = False  # two unresolved operands are equal


def mapping_resolver(data: Mapping[str, Any]) -> Resolver:
    """Build a resolver over a (possibly nested) mapping.

    The exact key is tried first so flat names containing dots still
    resolve; otherwise the name is walked as a dot-separated path.
    """

    def resolve(name: str) -> Any:
        if name in data:
            return data[name]

        current: Any = data
        for part in name.split("."):
            if isinstance(current, Mapping):
                current = current.get(part)
            else:
                return None

            if current is None:
                return None

        return current

    return resolve


@dataclass(frozen=True)
class Context:
    """Collaborators for a single evaluation."""
    resolver: Resolver
    transforms: TransformRegistry = field(default_factory=TransformRegistry)
    option: ComparisonOption | str = ComparisonOption.DEFAULT
    policy: CoercionPolicy = field(default_factory=CoercionPolicy)

    def __post_init__(self) -> None:
        option = self.option
        if isinstance(option, str) and not isinstance(option, ComparisonOption):
            try:
                option = ComparisonOption(option.strip().upper())
            except ValueError:
                pass
        object.__setattr__(self, "option", option)

    @property
    def case_insensitive(self) -> bool:
        return self.option is ComparisonOption.CASE_INSENSITIVE

    def resolve(self, name: str) -> Value:
        """Look up ``name``; unknown names and failing resolvers give ``ABSENT``."""
        try:
            raw = self.resolver(name)
        except Exception:
            logger.warning(f"Resolver failed for token '{name}'", exc_info=True, extra={"token": name})
            return ABSENT
        return Value.of(raw)

    def transform(self, name: str, value: Value) -> Value:
        return self.transforms.apply(name, value)

    def resolve_token(self, token: ParsedToken) -> Value:
        """Resolve a parsed token, applying its transform for function-call tokens."""
        value = self.resolve(token.name)
        if token.function is not None:
            return self.transform(token.function, value)
        return value


def build_context(
    values: Mapping[str, Any] | Resolver,
    transforms: TransformRegistry | Mapping[str, Callable[[Any], Any]] | None = None,
    option: ComparisonOption | str | None = None,
    policy: CoercionPolicy | None = None,
) -> Context:
    """Assemble a ``Context`` from loosely typed parts.

    Args:
        values: Mapping of token names to values, or a resolver callable
        transforms: Transform registry, or a plain name -> callable mapping
        option: Comparison option (enum or its name)
        policy: Coercion policy

    Returns:
        Context ready for evaluation
    """
    if isinstance(values, Mapping):
        resolver = mapping_resolver(values)
    elif callable(values):
        resolver = values
    else:
        raise TypeError(f"values must be a mapping or a callable, got {type(values).__name__}")

    if transforms is None:
        registry = TransformRegistry()
    elif isinstance(transforms, TransformRegistry):
        registry = transforms
    else:
        registry = TransformRegistry(dict(transforms))

    return Context(
        resolver=resolver,
        transforms=registry,
        option=option or ComparisonOption.DEFAULT,
        policy=policy or CoercionPolicy(),
    )
