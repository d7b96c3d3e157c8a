"""Mustache token syntax.

Recognized token forms:
- ``{{name}}`` - a reference into the context's named values
- ``{{func(name)}}`` - the same reference passed through a named transform

A string is an operand token only when it consists entirely of token
spans. When several spans are concatenated (``{{A}}{{B}}``) only the first
one is honoured and the rest is discarded. Any other text yields ``None``.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Delimiter:
    """Opening and closing markers of a token span."""
    start: str = "{{"
    end: str = "}}"

    def __post_init__(self) -> None:
        if not self.start or not self.end:
            raise ValueError("Token delimiters must be non-empty")


DEFAULT_DELIMITER = Delimiter()

_FUNCTION_CALL = re.compile(r"([A-Za-z_][\w\-]*)\((.*)\)", re.DOTALL)
_FORBIDDEN_NAME_CHARS = frozenset("{}()")


@dataclass(frozen=True)
class ParsedToken:
    """Name referenced by a token and the optional transform wrapping it."""
    name: str
    function: str | None = None

    @property
    def is_function_call(self) -> bool:
        return self.function is not None


@dataclass(frozen=True)
class TokenSpan:
    """A delimited span found in free text."""
    start: int
    end: int
    source: str
    token: ParsedToken | None


@lru_cache(maxsize=32)
def _span_pattern(delimiter: Delimiter) -> re.Pattern[str]:
    return re.compile(re.escape(delimiter.start) + r"(.*?)" + re.escape(delimiter.end), re.DOTALL)


def _parse_body(body: str) -> ParsedToken | None:
    """Parse the text between delimiters."""
    body = body.strip()
    if not body:
        return None

    call = _FUNCTION_CALL.fullmatch(body)
    if call:
        name = call.group(2).strip()
        if not name or _FORBIDDEN_NAME_CHARS.intersection(name):
            return None
        return ParsedToken(name=name, function=call.group(1))

    if _FORBIDDEN_NAME_CHARS.intersection(body):
        return None
    return ParsedToken(name=body)


def iter_token_spans(
    text: str,
    delimiter: Delimiter = DEFAULT_DELIMITER,
) -> Iterator[TokenSpan]:
    """Yield every delimited span in ``text``, in order.

    Spans whose body is not a valid token are still yielded, with
    ``token`` set to ``None``.
    """
    for match in _span_pattern(delimiter).finditer(text):
        yield TokenSpan(
            start=match.start(),
            end=match.end(),
            source=match.group(0),
            token=_parse_body(match.group(1)),
        )


def parse_token(text: str | None) -> ParsedToken | None:
    """Parse operand token text.

    Args:
        text: Raw token text, e.g. ``"{{Hero}}"`` or ``"{{int(launches)}}"``

    Returns:
        The first token when the whole string is made of token spans,
        otherwise None
    """
    if not text or not isinstance(text, str):
        return None

    position = 0
    first: ParsedToken | None = None
    for span in iter_token_spans(text):
        if span.start != position or span.token is None:
            return None
        if first is None:
            first = span.token
        position = span.end

    if position != len(text):
        return None
    return first
