"""Token replacement in free text.

``render_template("Hello {{name}}!", context)`` replaces every token span
with the text form of its resolved value. Function-call tokens apply their
transform first. Unresolved tokens render as an empty string; spans that
are not valid tokens are left as they are.
"""

from condition_engine.rules.context import Context
from condition_engine.rules.tokens import DEFAULT_DELIMITER, Delimiter, iter_token_spans


def render_template(
    template: str | None,
    context: Context,
    delimiter: Delimiter = DEFAULT_DELIMITER,
) -> str:
    """Render ``template`` against ``context``.

    Args:
        template: Text containing token spans
        context: Evaluation context used to resolve each token
        delimiter: Span markers, ``{{`` and ``}}`` by default

    Returns:
        The rendered text
    """
    if not template:
        return ""

    parts: list[str] = []
    position = 0
    for span in iter_token_spans(template, delimiter):
        parts.append(template[position:span.start])
        if span.token is None:
            parts.append(span.source)
        else:
            parts.append(context.resolve_token(span.token).to_text())
        position = span.end

    parts.append(template[position:])
    return "".join(parts)
