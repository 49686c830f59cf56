"""色空間変換（NumPyベースのバッチ処理）と線形探索による参照実装。

rgb_to_lab_batch は domain.color.rgb_to_lab と同じ float32 演算を
配列全体に適用する。nearest_index_brute_force は全件走査の最近色検索で、
k-d木の検索結果の検証に使う。
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import numpy.typing as npt

from color_names.domain.color import LAB, NamedColor

_M = np.array(
    [
        [0.412453, 0.357580, 0.180423],
        [0.212671, 0.715160, 0.072169],
        [0.019334, 0.119193, 0.950227],
    ],
    dtype=np.float32,
)
_WHITE = np.array([95.047, 100.0, 108.883], dtype=np.float32)


def rgb_to_lab_batch(rgb_array: npt.NDArray[np.uint8]) -> npt.NDArray[np.float32]:
    """RGB配列をLAB色空間に一括変換（単精度）。

    Args:
        rgb_array: (..., 3) の uint8 配列 (RGB)

    Returns:
        (..., 3) の float32 配列 (LAB)
    """
    rgb = rgb_array.astype(np.float32) / np.float32(255.0)

    # sRGB → リニアRGB（べき乗は倍精度）
    expanded = (((rgb.astype(np.float64) + 0.055) / 1.055) ** 2.4).astype(np.float32)
    linear = np.where(rgb > np.float32(0.04045), expanded, rgb / np.float32(12.92))
    linear = linear * np.float32(100.0)

    r, g, b = linear[..., 0], linear[..., 1], linear[..., 2]

    # リニアRGB → XYZ (D65) を左から順に加算
    xyz = [
        (r * _M[i, 0] + g * _M[i, 1] + b * _M[i, 2]) / _WHITE[i]
        for i in range(3)
    ]

    def f(t: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
        cube_root = (t.astype(np.float64) ** (1.0 / 3.0)).astype(np.float32)
        linear_part = t * np.float32(7.787) + np.float32(16.0) / np.float32(116.0)
        return np.where(t > np.float32(0.008856), cube_root, linear_part)

    fx, fy, fz = (f(t) for t in xyz)

    l_star = np.float32(116.0) * fy - np.float32(16.0)
    a_star = np.float32(500.0) * (fx - fy)
    b_star = np.float32(200.0) * (fy - fz)

    return np.stack([l_star, a_star, b_star], axis=-1).astype(np.float32)


def palette_lab_array(colors: Sequence[NamedColor]) -> npt.NDArray[np.float32]:
    """パレットのLAB値を (N, 3) の float32 配列にまとめる。

    各エントリのキャッシュ済み lab を使うので、木の検索と同じ値になる。
    """
    labs = [c.lab.to_tuple() for c in colors]
    return np.array(labs, dtype=np.float32).reshape(-1, 3)


def nearest_index_brute_force(
    palette_lab: npt.NDArray[np.float32],
    query: LAB,
) -> int:
    """全エントリを走査して最も近いインデックスを返す。空のパレットでは -1。

    同距離の場合は最小インデックス。距離は倍精度で計算する。
    """
    if len(palette_lab) == 0:
        return -1
    q = np.array(query.to_tuple(), dtype=np.float64)
    diff = palette_lab.astype(np.float64) - q[np.newaxis, :]
    dist_sq = np.sum(diff**2, axis=-1)
    return int(np.argmin(dist_sq))
