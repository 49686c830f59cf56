"""LAB空間の3次元k-d木。

パレットを中央値で再帰分割して平衡木を構築し、
分割平面による枝刈りで最近傍の名前付き色を検索する。
構築後の木は読み取り専用。検索状態は呼び出しごとに持つため、
同じ木を複数スレッドから同時に検索できる。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator

from color_names.domain.color import LAB, NamedColor, lab_distance_sq

# 分割軸の数 (L, a, b)
AXES = 3


@dataclass(frozen=True)
class KDNode:
    """木の1ノード。パレットの1エントリを保持する。

    深さ d のノードの分割軸は d % 3。左部分木の全要素はその軸の
    値がノード以下、右部分木の全要素はノード以上。
    """

    color: NamedColor
    left: KDNode | None = None
    right: KDNode | None = None


def build_tree(colors: Iterable[NamedColor], depth: int = 0) -> KDNode | None:
    """名前付き色の列からk-d木を構築。

    呼び出し元の列は並べ替えない（内部でコピーをソートする）。

    Args:
        colors: パレットのエントリ（順不同、重複座標可）
        depth: 根の深さ。分割軸は depth % 3 (0→L, 1→a, 2→b)

    Returns:
        根ノード。空の入力では None
    """
    return _build(list(colors), depth)


def _build(colors: list[NamedColor], depth: int) -> KDNode | None:
    if not colors:
        return None

    axis = depth % AXES
    # 安定ソートなので同値の順序は入力順で決まる
    colors.sort(key=lambda c: c.lab[axis])
    mid = len(colors) // 2

    return KDNode(
        colors[mid],
        _build(colors[:mid], depth + 1),
        _build(colors[mid + 1:], depth + 1),
    )


def search_nearest(root: KDNode | None, query: LAB) -> NamedColor | None:
    """クエリに最も近い（LABユークリッド距離）エントリを返す。空の木では None。"""
    color, _ = search_nearest_with_distance(root, query)
    return color


def search_nearest_with_distance(
    root: KDNode | None, query: LAB,
) -> tuple[NamedColor | None, float]:
    """最近傍エントリと距離の2乗を返す。空の木では (None, inf)。

    同距離のエントリが複数ある場合は走査順（前順、近い側が先）で
    最初に見つかったものを返す。
    """
    best, best_dist = _search(root, query, 0, None, math.inf)
    return (best.color if best is not None else None), best_dist


def _search(
    node: KDNode | None,
    query: LAB,
    depth: int,
    best: KDNode | None,
    best_dist: float,
) -> tuple[KDNode | None, float]:
    if node is None:
        return best, best_dist

    axis = depth % AXES
    node_lab = node.color.lab
    dim = query[axis] - node_lab[axis]

    dist = lab_distance_sq(query, node_lab)
    # 距離が inf や NaN でも空でない木なら必ず1件返す
    if best is None or dist < best_dist:
        best, best_dist = node, dist

    # 分割平面上 (dim == 0) は左を近い側とする
    if dim <= 0:
        near, far = node.left, node.right
    else:
        near, far = node.right, node.left

    best, best_dist = _search(near, query, depth + 1, best, best_dist)

    # 平面までの距離だけで現在の最良より遠ければ反対側は調べない
    if dim * dim < best_dist:
        best, best_dist = _search(far, query, depth + 1, best, best_dist)

    return best, best_dist


def iter_nodes(root: KDNode | None, depth: int = 0) -> Iterator[tuple[KDNode, int]]:
    """全ノードを (ノード, 深さ) の前順で列挙。"""
    if root is None:
        return
    yield root, depth
    yield from iter_nodes(root.left, depth + 1)
    yield from iter_nodes(root.right, depth + 1)


def count_nodes(root: KDNode | None) -> int:
    return sum(1 for _ in iter_nodes(root))


def tree_height(root: KDNode | None) -> int:
    """木の高さ。空の木は0、葉のみは1。"""
    if root is None:
        return 0
    return 1 + max(tree_height(root.left), tree_height(root.right))
