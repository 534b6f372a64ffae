"""A small calculator command-line tool with an interactive mode."""

from __future__ import annotations

import argparse
import math
import re
import sys
from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import TextIO

PROG = "calc-cli"
VERSION = "0.1.0"

_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class CalcError(Exception):
    """Base class for calculator errors."""


class DivisionByZeroError(CalcError):
    """Raised when dividing by zero."""

    def __init__(self) -> None:
        super().__init__("Division by zero")


class InvalidExpressionError(CalcError):
    """Raised for malformed expressions and invalid results."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid expression: {detail}")
        self.detail = detail


class UnknownOperationError(CalcError):
    """Raised for an operation the calculator does not know."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Unknown operation: {operation}")
        self.operation = operation


def _parse_float(text: str) -> float:
    """Parse a number strictly: no whitespace, no digit separators."""
    if not _FLOAT.fullmatch(text):
        raise ValueError(f"invalid float literal: {text!r}")
    return float(text)


def _format_number(value: float) -> str:
    """Format a float the plain way: no exponent, no trailing '.0'."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _checked(result: float, detail: str = "Result overflow") -> float:
    if math.isinf(result) or math.isnan(result):
        raise InvalidExpressionError(detail)
    return result


def add(a: float, b: float) -> float:
    """Return ``a + b``."""
    return _checked(a + b)


def subtract(a: float, b: float) -> float:
    """Return ``a - b``."""
    return _checked(a - b)


def multiply(a: float, b: float) -> float:
    """Return ``a * b``."""
    return _checked(a * b)


def divide(a: float, b: float) -> float:
    """Return ``a / b``; dividing by zero raises DivisionByZeroError."""
    if b == 0.0:
        raise DivisionByZeroError()
    try:
        result = a / b
    except OverflowError:
        result = math.inf
    return _checked(result)


def power(base: float, exp: float) -> float:
    """Return ``base`` raised to ``exp``."""
    has_fraction = not math.isfinite(exp) or exp != math.trunc(exp)
    if base < 0.0 and has_fraction:
        raise InvalidExpressionError(
            "Cannot calculate non-integer power of negative number"
        )
    try:
        result = math.pow(base, exp)
    except (OverflowError, ValueError):
        result = math.inf
    return _checked(result, "Result overflow or invalid")


def square_root(number: float) -> float:
    """Return the square root of a non-negative number."""
    if number < 0.0:
        raise InvalidExpressionError(
            "Cannot calculate square root of negative number"
        )
    return math.sqrt(number)


def evaluate_expression(expr: str) -> float:
    """Evaluate an expression of numbers joined by + - * /."""
    expr = expr.replace(" ", "")

    pos = expr.rfind("+")
    if pos != -1:
        return add(evaluate_expression(expr[:pos]), evaluate_expression(expr[pos + 1:]))

    pos = expr.rfind("-")
    if pos != -1:
        if pos == 0:
            return -evaluate_expression(expr[1:])
        return subtract(
            evaluate_expression(expr[:pos]), evaluate_expression(expr[pos + 1:])
        )

    pos = expr.rfind("*")
    if pos != -1:
        return multiply(
            evaluate_expression(expr[:pos]), evaluate_expression(expr[pos + 1:])
        )

    pos = expr.rfind("/")
    if pos != -1:
        return divide(evaluate_expression(expr[:pos]), evaluate_expression(expr[pos + 1:]))

    try:
        return _parse_float(expr)
    except ValueError:
        raise InvalidExpressionError(expr) from None


def help_text() -> str:
    """Return the interactive-mode help text."""
    return "\n".join(
        [
            "Available operations:",
            "  Basic: +, -, *, /",
            "  Special: sqrt <number>",
            "  Commands: help, quit, exit",
            "Examples:",
            "  2 + 3",
            "  10 / 2",
            "  sqrt 16",
            "  -5 + 3",
        ]
    )


def run_interactive(stdin: TextIO, stdout: TextIO) -> None:
    """Read expressions from ``stdin`` and write results to ``stdout``."""

    def say(line: str) -> None:
        stdout.write(line + "\n")

    say("Calculator Interactive Mode")
    say("Enter mathematical expressions or 'quit' to exit")
    say("Examples: 2 + 3, 10 / 2, sqrt 16")

    while True:
        stdout.write("calc> ")
        stdout.flush()
        raw = stdin.readline()
        if not raw:
            break
        line = raw.strip()
        if not line:
            continue
        if line in ("quit", "exit"):
            say("Goodbye!")
            break
        if line == "help":
            say(help_text())
            continue
        if line.startswith("sqrt "):
            try:
                number = _parse_float(line[len("sqrt "):])
            except ValueError:
                say("Error: Invalid number format")
                continue
            try:
                say(f"√{_format_number(number)} = {_format_number(square_root(number))}")
            except CalcError as exc:
                say(f"Error: {exc}")
            continue
        try:
            say(f"{line} = {_format_number(evaluate_expression(line))}")
        except CalcError as exc:
            say(f"Error: {exc}")


def _number(text: str) -> float:
    try:
        return _parse_float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid float literal: {text!r}") from None


def _binary(symbol: str, func: Callable[[float, float], float], first: str, second: str):
    def run(args: argparse.Namespace) -> str:
        a, b = getattr(args, first), getattr(args, second)
        result = func(a, b)
        return f"{_format_number(a)}{symbol}{_format_number(b)} = {_format_number(result)}"

    return run


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the calculator."""
    parser = argparse.ArgumentParser(prog=PROG, description="A simple calculator CLI tool")
    parser.add_argument("--version", action="version", version=f"{PROG} {VERSION}")
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    binaries = [
        ("add", "a", "Basic arithmetic operations", " + ", add, ("a", "First number"), ("b", "Second number")),
        ("subtract", "s", "Subtract two numbers", " - ", subtract, ("a", "First number"), ("b", "Second number to subtract")),
        ("multiply", "m", "Multiply two numbers", " * ", multiply, ("a", "First number"), ("b", "Second number")),
        ("divide", "d", "Divide two numbers", " / ", divide, ("a", "Dividend"), ("b", "Divisor")),
        ("power", "p", "Calculate power (a^b)", "^", power, ("base", "Base"), ("exp", "Exponent")),
    ]
    for name, alias, summary, symbol, func, first, second in binaries:
        sub = commands.add_parser(name, aliases=[alias], help=summary)
        sub.add_argument(first[0], type=_number, help=first[1])
        sub.add_argument(second[0], type=_number, help=second[1])
        sub.set_defaults(run=_binary(symbol, func, first[0], second[0]))

    sqrt = commands.add_parser("square-root", aliases=["sqrt"], help="Calculate square root")
    sqrt.add_argument("number", type=_number, help="Number to calculate square root")
    sqrt.set_defaults(
        run=lambda args: f"√{_format_number(args.number)} = "
        f"{_format_number(square_root(args.number))}"
    )

    ev = commands.add_parser("eval", aliases=["e"], help="Evaluate mathematical expression")
    ev.add_argument("expression", help='Mathematical expression (e.g., "2 + 3 * 4")')
    ev.set_defaults(
        run=lambda args: f"{args.expression} = "
        f"{_format_number(evaluate_expression(args.expression))}"
    )

    inter = commands.add_parser("interactive", aliases=["i"], help="Interactive mode")
    inter.set_defaults(run=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the calculator and return its exit status."""
    args = build_parser().parse_args(argv)
    if args.command is None:
        print("No command provided. Use --help for usage information.")
        print("Quick examples:")
        print(f"  {PROG} add 10 5")
        print(f'  {PROG} eval "2 + 3 * 4"')
        print(f"  {PROG} interactive")
        return 0
    try:
        if args.run is None:
            run_interactive(sys.stdin, sys.stdout)
        else:
            print(args.run(args))
    except CalcError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())