"""A small greeting command-line tool."""

from __future__ import annotations

import argparse
import re
import sys
from collections.abc import Sequence

PROG = "hello-cli"
VERSION = "0.1.0"
DEFAULT_NAME = "World"

_U32_MAX = 2**32 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


def _count(text: str) -> int:
    """Parse an unsigned 32-bit repeat count."""
    if not _UNSIGNED.fullmatch(text):
        raise argparse.ArgumentTypeError(f"invalid digit found in string: {text!r}")
    value = int(text)
    if value > _U32_MAX:
        raise argparse.ArgumentTypeError(f"number too large: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the greeting tool."""
    parser = argparse.ArgumentParser(
        prog=PROG, description="A simple Hello World CLI tool"
    )
    parser.add_argument(
        "--version", action="version", version=f"{PROG} {VERSION}"
    )
    parser.add_argument(
        "-n", "--name", metavar="NAME", default=None, help="Name to greet"
    )
    parser.add_argument(
        "-c",
        "--count",
        metavar="NUMBER",
        type=_count,
        default=1,
        help="Number of times to greet",
    )
    parser.add_argument(
        "-u",
        "--uppercase",
        action="store_true",
        help="Display greeting in uppercase",
    )
    return parser


def greet(name: str, count: int, uppercase: bool) -> list[str]:
    """Return the greeting lines for ``name`` repeated ``count`` times."""
    if uppercase:
        message = f"HELLO, {name.upper()}!"
    else:
        message = f"Hello, {name}!"
    if count > 1:
        return [f"{message} ({i})" for i in range(1, count + 1)]
    return [message] * count


def main(argv: Sequence[str] | None = None) -> int:
    """Run the greeting tool and return its exit status."""
    args = build_parser().parse_args(argv)
    name = args.name if args.name is not None else DEFAULT_NAME
    for line in greet(name, args.count, args.uppercase):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())