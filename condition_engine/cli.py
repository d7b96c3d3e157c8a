"""Command line interface for the condition engine.

Usage:
    condition-engine resolve "{{name}}" --context values.yaml
    condition-engine render "Hello {{name}}!" --context values.yaml
    condition-engine compare "{{age}}" greaterEqual 18 --context values.yaml

Context files are YAML (or JSON) mappings of token names to values.
``compare`` exits 0 when the comparison holds and 1 otherwise, printing
the failure reason on stderr.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from condition_engine.core.logging import setup_logging
from condition_engine.engine import ConditionEngine
from condition_engine.rules.context import ComparisonOption
from condition_engine.rules.expressions import comparison
from condition_engine.rules.operands import Operand, literal, mustache_token
from condition_engine.rules.tokens import parse_token


class ContextFileError(ValueError):
    """Raised when a context file cannot be used."""


def load_context_file(path: Path | None) -> dict[str, Any]:
    """Load token values from a YAML or JSON file.

    Args:
        path: File to read; None gives an empty context

    Returns:
        Mapping of token names to values

    Raises:
        ContextFileError: If the file is missing, unparsable or not a mapping
    """
    if path is None:
        return {}

    if not path.exists():
        raise ContextFileError(f"Context file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContextFileError(f"Cannot read context file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ContextFileError(f"Invalid context file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ContextFileError(f"Context file {path} must contain a mapping")
    return data


def parse_operand(text: str) -> Operand:
    """Treat token text as a token and anything else as a literal.

    Literal text is JSON-decoded when possible so ``18`` and ``true`` keep
    their kinds; everything else stays a string.
    """
    if parse_token(text) is not None:
        return mustache_token(text)

    try:
        decoded = json.loads(text)
    except ValueError:
        return literal(text)

    if isinstance(decoded, (str, int, float, bool)):
        return literal(decoded)
    return literal(text)


def build_parser() -> argparse.ArgumentParser:
    # Options accepted after every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--context",
        type=Path,
        default=None,
        help="YAML or JSON file with token values",
    )
    common.add_argument("--log-level", default=None, help="Override the configured log level")

    parser = argparse.ArgumentParser(
        prog="condition-engine",
        description="Resolve tokens and evaluate rule conditions",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser("resolve", parents=[common], help="Resolve a single token")
    resolve_parser.add_argument("token", help='Token text, e.g. "{{name}}"')

    render_parser = subparsers.add_parser("render", parents=[common], help="Replace tokens in a template")
    render_parser.add_argument("template", help="Template text")

    compare_parser = subparsers.add_parser("compare", parents=[common], help="Evaluate a comparison")
    compare_parser.add_argument("lhs", help="Left operand (token or literal)")
    compare_parser.add_argument("operator", help="Operator, e.g. equals or greaterThan")
    compare_parser.add_argument("rhs", help="Right operand (token or literal)")
    compare_parser.add_argument(
        "--case-insensitive",
        action="store_true",
        help="Compare strings without regard to case",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        setup_logging(args.log_level)

    try:
        values = load_context_file(args.context)
    except ContextFileError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    engine = ConditionEngine()

    if args.command == "resolve":
        value = engine.resolve(args.token, values)
        print(json.dumps(value.raw))
        return 0

    if args.command == "render":
        print(engine.render(args.template, values))
        return 0

    option = ComparisonOption.CASE_INSENSITIVE if args.case_insensitive else None
    expression = comparison(parse_operand(args.lhs), args.operator, parse_operand(args.rhs))
    result = engine.evaluate(expression, values, option=option)
    if result.success:
        print("true")
        return 0

    print("false")
    print(result.reason, file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
