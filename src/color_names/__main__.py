"""エントリーポイント: python -m color_names "#FF0000" 250,10,10"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from color_names.application.builder import ColorNamesBuilder
from color_names.application.color_names import UNKNOWN_COLOR_NAME, ColorQuery
from color_names.domain.color import RGB


def parse_color_arg(text: str) -> ColorQuery:
    """'#RRGGBB' または 'r,g,b' を検索入力に変換。"""
    if text.startswith("#"):
        return text
    parts = text.split(",")
    if len(parts) != 3:
        raise ValueError(f"Expected '#RRGGBB' or 'r,g,b': {text!r}")
    return RGB(*(int(p) for p in parts))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="color_names",
        description="Find the nearest named color for RGB or hex values.",
    )
    parser.add_argument("colors", nargs="*", metavar="COLOR", help="'#RRGGBB' or 'r,g,b'")
    parser.add_argument("--palette", help="CSV palette (name,hex); defaults to the bundled palette")
    parser.add_argument("--random", action="store_true", help="print a random palette color")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    builder = ColorNamesBuilder()
    try:
        if args.palette:
            builder.add_from_csv(args.palette)
        else:
            builder.load_default()
        queries = [(text, parse_color_arg(text)) for text in args.colors]
    except (OSError, ValueError) as e:
        print(f"color_names: {e}", file=sys.stderr)
        return 2

    color_names = builder.build()

    if args.random:
        color = color_names.get_random_color()
        print(f"{color.name}\t{color.hex}" if color is not None else UNKNOWN_COLOR_NAME)

    for text, query in queries:
        try:
            match = color_names.find_closest_color(query)
        except ValueError as e:
            print(f"color_names: {e}", file=sys.stderr)
            return 2
        if match is None:
            print(f"{text}\t{UNKNOWN_COLOR_NAME}")
        else:
            print(f"{text}\t{match.name}\t{match.hex}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
