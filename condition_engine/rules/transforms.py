"""Named transforms applied to resolved token values.

A transform is a plain unary callable registered under a name and used in
token text as ``{{name(token)}}``. It receives the raw Python value
(``None`` when the token did not resolve) and may return either a raw
object or a ``Value``.
"""

import logging
from collections.abc import Callable
from typing import Any

from condition_engine.rules.values import ABSENT, Value, ValueKind

logger = logging.getLogger(__name__)

Transform = Callable[[Any], Any]


class TransformRegistry:
    """Registry of named unary transforms."""

    def __init__(self, transforms: dict[str, Transform] | None = None) -> None:
        self._transforms: dict[str, Transform] = {}
        for name, fn in (transforms or {}).items():
            self.register(name, fn)

    @classmethod
    def with_builtins(cls) -> "TransformRegistry":
        """Create a registry preloaded with the ``int``, ``double``, ``string`` and ``bool`` transforms."""
        registry = cls()
        for name, fn in BUILTIN_TRANSFORMS.items():
            registry.register(name, fn)
        return registry

    def register(self, name: str, fn: Transform) -> None:
        """Register ``fn`` under ``name``, replacing any previous entry."""
        if not name:
            raise ValueError("Transform name cannot be empty")
        if not callable(fn):
            raise TypeError(f"Transform '{name}' must be callable")
        self._transforms[name] = fn

    def unregister(self, name: str) -> bool:
        return self._transforms.pop(name, None) is not None

    def names(self) -> list[str]:
        return sorted(self._transforms)

    def __contains__(self, name: object) -> bool:
        return name in self._transforms

    def __len__(self) -> int:
        return len(self._transforms)

    def apply(self, name: str, value: Value) -> Value:
        """Apply the transform registered as ``name`` to ``value``.

        Unknown names pass the value through unchanged. A transform that
        raises yields ``ABSENT`` so evaluation can carry on.
        """
        fn = self._transforms.get(name)
        if fn is None:
            logger.debug(f"Unknown transform '{name}', passing value through", extra={"transform": name})
            return value

        try:
            result = fn(value.raw)
        except Exception:
            logger.warning(f"Transform '{name}' raised", exc_info=True, extra={"transform": name})
            return ABSENT

        return Value.of(result)


def _parse_number(text: str) -> int | float | None:
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def _to_int(raw: Any) -> Any:
    value = Value.of(raw)
    if value.kind is ValueKind.BOOLEAN:
        return 1 if raw else 0
    if value.kind is ValueKind.NUMBER:
        return int(raw)
    if value.kind is ValueKind.STRING:
        parsed = _parse_number(raw)
        return raw if parsed is None else int(parsed)
    return raw


def _to_double(raw: Any) -> Any:
    value = Value.of(raw)
    if value.kind is ValueKind.BOOLEAN:
        return 1.0 if raw else 0.0
    if value.kind is ValueKind.NUMBER:
        return float(raw)
    if value.kind is ValueKind.STRING:
        parsed = _parse_number(raw)
        return raw if parsed is None else float(parsed)
    return raw


def _to_string(raw: Any) -> Any:
    value = Value.of(raw)
    if value.is_absent:
        return ABSENT
    return value.to_text()


def _to_bool(raw: Any) -> Any:
    value = Value.of(raw)
    if value.kind is ValueKind.NUMBER:
        return raw != 0
    if value.kind is ValueKind.STRING:
        return raw.strip().lower() == "true"
    return raw


BUILTIN_TRANSFORMS: dict[str, Transform] = {
    "int": _to_int,
    "double": _to_double,
    "string": _to_string,
    "bool": _to_bool,
}
