"""Typed values produced by operand resolution.

Every token lookup, transform and literal ends up as a ``Value``: a closed
union over strings, numbers, booleans and the ``ABSENT`` marker for
anything that could not be resolved. ``ABSENT`` is distinct from an empty
string.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Kinds of resolved values."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ABSENT = "absent"


@dataclass(frozen=True)
class Value:
    """A resolved scalar tagged with its kind."""
    kind: ValueKind
    raw: str | int | float | bool | None = None

    @classmethod
    def string(cls, raw: str) -> "Value":
        return cls(ValueKind.STRING, raw)

    @classmethod
    def number(cls, raw: int | float) -> "Value":
        return cls(ValueKind.NUMBER, raw)

    @classmethod
    def boolean(cls, raw: bool) -> "Value":
        return cls(ValueKind.BOOLEAN, raw)

    @classmethod
    def of(cls, obj: Any) -> "Value":
        """Adapt an untyped Python object to a ``Value``.

        ``bool`` is checked before numbers since it subclasses ``int``.
        NaN, containers and arbitrary objects have no scalar reading and
        become ``ABSENT``.
        """
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return ABSENT
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, (int, float)):
            if isinstance(obj, float) and math.isnan(obj):
                return ABSENT
            return cls.number(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        return ABSENT

    @property
    def is_absent(self) -> bool:
        return self.kind is ValueKind.ABSENT

    def to_text(self) -> str:
        """Render the value the way templates print it."""
        if self.kind is ValueKind.ABSENT:
            return ""
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.raw else "false"
        if self.kind is ValueKind.NUMBER:
            if isinstance(self.raw, float) and self.raw.is_integer():
                return str(int(self.raw))
            return str(self.raw)
        return str(self.raw)

    def describe(self) -> str:
        """Short form used in failure reasons."""
        if self.kind is ValueKind.ABSENT:
            return "<absent>"
        return f"{self.kind.value} {self.raw!r}"


ABSENT = Value(ValueKind.ABSENT)
