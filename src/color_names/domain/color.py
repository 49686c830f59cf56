"""名前付き色の定義とRGB→LAB変換。

LAB値は単精度(float32)で計算する。木の構築時と検索時で
同じ丸めを通すことで、距離比較の精度ずれを防ぐ。
"""

from __future__ import annotations

import numbers
import re
from dataclasses import dataclass
from functools import cached_property

import numpy as np

_F32 = np.float32

_HEX_PATTERN = re.compile(r"#[0-9A-Fa-f]{6}")


class InvalidHexFormatError(ValueError):
    """#RRGGBB 形式でない色文字列。"""


@dataclass(frozen=True)
class RGB:
    """RGB色空間の色。各チャンネル 0-255。"""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            channel = getattr(self, name)
            if isinstance(channel, bool) or not isinstance(channel, numbers.Integral):
                raise TypeError(f"RGB channel must be an integer: {channel!r}")
            if not 0 <= channel <= 255:
                raise ValueError(f"RGB channel out of range 0-255: {channel}")
            # numpy の整数型なども int に揃える
            object.__setattr__(self, name, int(channel))

    def to_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class LAB:
    """CIE L*a*b* 色空間の色。"""

    l: float  # noqa: E741
    a: float
    b: float

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.l, self.a, self.b)

    def to_single(self) -> LAB:
        """各成分を単精度に丸めたLABを返す。単精度の範囲外は ±inf になる。"""
        with np.errstate(over="ignore"):
            return LAB(float(_F32(self.l)), float(_F32(self.a)), float(_F32(self.b)))

    def __getitem__(self, axis: int) -> float:
        # 0→L, 1→a, 2→b
        return (self.l, self.a, self.b)[axis]


@dataclass(frozen=True)
class NamedColor:
    """名前付きの色。同じ座標で名前違いのエントリも許容する。"""

    name: str
    rgb: RGB

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("NamedColor name must not be empty")

    @classmethod
    def from_rgb(cls, name: str, r: int, g: int, b: int) -> NamedColor:
        return cls(name, RGB(r, g, b))

    @classmethod
    def from_hex(cls, name: str, text: str) -> NamedColor:
        return cls(name, hex_to_rgb(text))

    @cached_property
    def lab(self) -> LAB:
        return rgb_to_lab(self.rgb)

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)


# --- RGB → LAB 変換（単精度） ---

# sRGB → XYZ 行列 (D65)
_M = (
    (_F32(0.412453), _F32(0.357580), _F32(0.180423)),
    (_F32(0.212671), _F32(0.715160), _F32(0.072169)),
    (_F32(0.019334), _F32(0.119193), _F32(0.950227)),
)

# D65 白色点 (×100)
_WHITE = (_F32(95.047), _F32(100.0), _F32(108.883))

_GAMMA_THRESHOLD = _F32(0.04045)
_LAB_EPSILON = _F32(0.008856)
_LAB_KAPPA = _F32(7.787)
_LAB_OFFSET = _F32(16.0) / _F32(116.0)


def _srgb_to_linear(c: int) -> np.float32:
    """sRGBコンポーネント(0-255)をリニアRGB(×100)に変換。"""
    v = _F32(c) / _F32(255.0)
    if v > _GAMMA_THRESHOLD:
        # べき乗のみ倍精度で計算して単精度に戻す
        v = _F32(((float(v) + 0.055) / 1.055) ** 2.4)
    else:
        v = v / _F32(12.92)
    return v * _F32(100.0)


def _lab_f(t: np.float32) -> np.float32:
    """LAB変換の補助関数。"""
    if t > _LAB_EPSILON:
        return _F32(float(t) ** (1.0 / 3.0))
    return t * _LAB_KAPPA + _LAB_OFFSET


def rgb_to_lab(color: RGB) -> LAB:
    """RGB色をCIE L*a*b*に変換。D65光源基準。

    全ての中間値を float32 で保持する。結果の各成分は単精度で
    正確に表現できる値になる。
    """
    r = _srgb_to_linear(color.r)
    g = _srgb_to_linear(color.g)
    b = _srgb_to_linear(color.b)

    # リニアRGB → XYZ → 白色点で正規化
    x, y, z = (
        (row[0] * r + row[1] * g + row[2] * b) / white
        for row, white in zip(_M, _WHITE)
    )

    fx = _lab_f(x)
    fy = _lab_f(y)
    fz = _lab_f(z)

    l_star = _F32(116.0) * fy - _F32(16.0)
    a_star = _F32(500.0) * (fx - fy)
    b_star = _F32(200.0) * (fy - fz)

    return LAB(float(l_star), float(a_star), float(b_star))


def lab_distance_sq(p: LAB, q: LAB) -> float:
    """2色間のユークリッド距離の2乗（3軸すべて）。"""
    dl = p.l - q.l
    da = p.a - q.a
    db = p.b - q.b
    return dl * dl + da * da + db * db


# --- 16進表記 ---


def hex_to_rgb(text: str) -> RGB:
    """#RRGGBB 形式の文字列をRGBに変換。

    Raises:
        InvalidHexFormatError: 7文字でない、先頭が # でない、16進数でない場合
    """
    if not isinstance(text, str) or _HEX_PATTERN.fullmatch(text) is None:
        raise InvalidHexFormatError(f"Invalid hex string: {text!r}")
    return RGB(int(text[1:3], 16), int(text[3:5], 16), int(text[5:7], 16))


def rgb_to_hex(color: RGB) -> str:
    """RGBを #RRGGBB（大文字）に変換。"""
    return f"#{color.r:02X}{color.g:02X}{color.b:02X}"
