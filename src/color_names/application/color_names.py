"""名前付き色の最近傍検索ユースケース。

パレットから一度だけk-d木を構築し、RGB・16進・LAB・既存エントリの
いずれからでも最も近い色を検索する。
"""

from __future__ import annotations

import logging
import numbers
import random
from typing import Sequence, Union

from color_names.domain.color import LAB, RGB, NamedColor, hex_to_rgb, rgb_to_lab
from color_names.domain.kd_tree import KDNode, build_tree, search_nearest, tree_height

logger = logging.getLogger(__name__)

# パレットが空のときに返す名前
UNKNOWN_COLOR_NAME = "Unknown"

ColorQuery = Union[
    RGB, LAB, NamedColor, str, tuple[int, int, int], tuple[float, float, float],
]


def to_query_point(color: ColorQuery) -> LAB:
    """検索入力を単精度のLAB座標に正規化。

    Args:
        color: RGB, LAB, NamedColor, "#RRGGBB" 文字列, (r, g, b) 整数タプル,
            (l, a, b) 浮動小数点タプル

    Raises:
        InvalidHexFormatError: 文字列が #RRGGBB 形式でない場合
        TypeError: 対応しない型の場合
    """
    if isinstance(color, NamedColor):
        return color.lab
    if isinstance(color, RGB):
        return rgb_to_lab(color)
    if isinstance(color, LAB):
        return color.to_single()
    if isinstance(color, str):
        return rgb_to_lab(hex_to_rgb(color))
    if isinstance(color, tuple) and len(color) == 3:
        # 全て整数なら RGB、実数を含めば LAB として扱う
        if all(_is_integer(c) for c in color):
            return rgb_to_lab(RGB(*color))
        if all(isinstance(c, numbers.Real) and not isinstance(c, bool) for c in color):
            return LAB(*(float(c) for c in color)).to_single()
    raise TypeError(f"Unsupported color query: {color!r}")


class ColorNames:
    """名前付き色パレットの最近傍検索。

    構築後の木は変更しない。検索状態は呼び出しごとに持つので、
    1つのインスタンスを複数スレッドで共有できる。
    """

    def __init__(self, colors: Sequence[NamedColor]) -> None:
        self._colors: tuple[NamedColor, ...] = tuple(colors)
        self._root = build_tree(self._colors)
        logger.debug(
            "Built color tree: %d colors, height %d",
            len(self._colors), tree_height(self._root),
        )

    def __len__(self) -> int:
        return len(self._colors)

    @property
    def colors(self) -> tuple[NamedColor, ...]:
        return self._colors

    @property
    def root(self) -> KDNode | None:
        return self._root

    def get_random_color(self, rng: random.Random | None = None) -> NamedColor | None:
        """パレットから一様にランダムな1色を返す。空のパレットでは None。"""
        if not self._colors:
            return None
        return (rng or random).choice(self._colors)

    # --- エントリを返す検索 ---

    def find_closest_color(self, color: ColorQuery) -> NamedColor | None:
        """最も近いエントリを返す。空のパレットでは None。"""
        return search_nearest(self._root, to_query_point(color))

    def find_closest_rgb(self, r: int, g: int, b: int) -> NamedColor | None:
        return self.find_closest_color(RGB(r, g, b))

    def find_closest_hex(self, text: str) -> NamedColor | None:
        return self.find_closest_color(hex_to_rgb(text))

    def find_closest_lab(self, l: float, a: float, b: float) -> NamedColor | None:  # noqa: E741
        return self.find_closest_color(LAB(l, a, b))

    # --- 名前を返す検索 ---

    def find_closest_color_name(self, color: ColorQuery) -> str:
        """最も近いエントリの名前を返す。空のパレットでは UNKNOWN_COLOR_NAME。"""
        return _name_or_unknown(self.find_closest_color(color))

    def find_closest_rgb_name(self, r: int, g: int, b: int) -> str:
        return _name_or_unknown(self.find_closest_rgb(r, g, b))

    def find_closest_hex_name(self, text: str) -> str:
        return _name_or_unknown(self.find_closest_hex(text))

    def find_closest_lab_name(self, l: float, a: float, b: float) -> str:  # noqa: E741
        return _name_or_unknown(self.find_closest_lab(l, a, b))


def _name_or_unknown(color: NamedColor | None) -> str:
    return color.name if color is not None else UNKNOWN_COLOR_NAME


def _is_integer(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)
