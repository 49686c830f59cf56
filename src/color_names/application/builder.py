"""パレット組み立てのビルダー。"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from color_names.application.color_names import ColorNames
from color_names.domain.color import NamedColor
from color_names.infrastructure.palette_io import (
    load_default_palette,
    parse_palette_lines,
    read_palette_csv,
)


class ColorNamesBuilder:
    """名前付き色を追加していき、最後に ColorNames を構築する。

    各 add 系メソッドは自身を返すのでメソッドチェーンで使える。
    """

    def __init__(self) -> None:
        self._named_colors: list[NamedColor] = []

    @property
    def named_colors(self) -> list[NamedColor]:
        return self._named_colors

    def add(self, name: str, r: int, g: int, b: int) -> ColorNamesBuilder:
        self._named_colors.append(NamedColor.from_rgb(name, r, g, b))
        return self

    def add_hex(self, name: str, text: str) -> ColorNamesBuilder:
        """#RRGGBB 形式で色を追加。不正な形式は InvalidHexFormatError。"""
        self._named_colors.append(NamedColor.from_hex(name, text))
        return self

    def add_color(self, color: NamedColor) -> ColorNamesBuilder:
        self._named_colors.append(color)
        return self

    def add_from_lines(self, lines: Iterable[str]) -> ColorNamesBuilder:
        """区切りテキストの行から追加。1行目はヘッダとして無視。"""
        # 途中で失敗した場合は1色も追加しない
        self._named_colors.extend(parse_palette_lines(lines))
        return self

    def add_from_csv(self, path: str | Path) -> ColorNamesBuilder:
        """CSVファイルから追加。

        形式は ``name,hex``。1行目は無視する。
        """
        self._named_colors.extend(read_palette_csv(path))
        return self

    def load_default(self) -> ColorNamesBuilder:
        """同梱のデフォルトパレットを追加。

        複数回呼ぶとその回数だけ同じ色が追加される。
        """
        self._named_colors.extend(load_default_palette())
        return self

    def build(self) -> ColorNames:
        return ColorNames(self._named_colors)
