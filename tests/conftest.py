"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from condition_engine.rules.context import ComparisonOption, Context, build_context
from condition_engine.rules.transforms import TransformRegistry


class CountingTransform:
    """Transform that records every call, for short-circuit assertions."""

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, value: Any) -> Any:
        self.calls.append(value)
        return value


@pytest.fixture
def default_values() -> dict[str, Any]:
    """Token values shared by most tests."""
    return {
        "Beer": "Corona",
        "Hero": "Soldier",
        "Soda": "Pepsi",
        "answer": "Corona extra",
        "integerToken": 33,
        "booleanToken": False,
        "priceString": "12.5",
        "flagString": "TRUE",
        "device": {"os": {"name": "Android", "version": 14}},
    }


@pytest.fixture
def counting_transform() -> CountingTransform:
    return CountingTransform()


@pytest.fixture
def transforms(counting_transform: CountingTransform) -> TransformRegistry:
    """Registry with the builtins plus test transforms."""
    registry = TransformRegistry.with_builtins()
    registry.register("addExtraString", lambda value: f"{value} extra")
    registry.register("count", counting_transform)
    return registry


@pytest.fixture
def context(default_values: dict[str, Any], transforms: TransformRegistry) -> Context:
    """Case-sensitive context over the default values."""
    return build_context(default_values, transforms=transforms)


@pytest.fixture
def case_insensitive_context(
    default_values: dict[str, Any],
    transforms: TransformRegistry,
) -> Context:
    """Case-insensitive context over the default values."""
    return build_context(
        default_values,
        transforms=transforms,
        option=ComparisonOption.CASE_INSENSITIVE,
    )
