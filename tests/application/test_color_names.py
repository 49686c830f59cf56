"""color_names.py（最近傍検索ユースケース）のテスト。"""

import math
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from color_names.application.color_names import UNKNOWN_COLOR_NAME, ColorNames, to_query_point
from color_names.domain.color import LAB, RGB, InvalidHexFormatError, NamedColor, lab_distance_sq
from color_names.infrastructure.palette_io import load_default_palette

RED = NamedColor.from_rgb("Red", 255, 0, 0)
BLACK = NamedColor.from_rgb("Black", 0, 0, 0)
WHITE = NamedColor.from_rgb("White", 255, 255, 255)


@pytest.fixture
def basic() -> ColorNames:
    return ColorNames([RED, BLACK, WHITE])


@pytest.fixture
def empty() -> ColorNames:
    return ColorNames([])


def _unique_random_palette(seed: int, n: int) -> list[NamedColor]:
    rng = random.Random(seed)
    seen: set[tuple[int, int, int]] = set()
    colors = []
    while len(colors) < n:
        rgb = (rng.randrange(256), rng.randrange(256), rng.randrange(256))
        if rgb in seen:
            continue
        seen.add(rgb)
        colors.append(NamedColor.from_rgb(f"c{len(colors)}", *rgb))
    return colors


class TestFindClosestColor:
    def test_example_scenario(self, basic: ColorNames) -> None:
        assert basic.find_closest_rgb_name(250, 10, 10) == "Red"
        assert basic.find_closest_rgb_name(10, 10, 10) == "Black"

    def test_rgb_object(self, basic: ColorNames) -> None:
        assert basic.find_closest_color(RGB(250, 10, 10)) == RED

    def test_rgb_tuple(self, basic: ColorNames) -> None:
        assert basic.find_closest_color((245, 245, 245)) == WHITE

    def test_hex(self, basic: ColorNames) -> None:
        assert basic.find_closest_hex("#F00A0A") == RED
        assert basic.find_closest_color("#0A0A0A") == BLACK
        assert basic.find_closest_hex_name("#FAFAFA") == "White"

    def test_lab(self, basic: ColorNames) -> None:
        assert basic.find_closest_lab(52.0, 75.0, 60.0) == RED
        assert basic.find_closest_color(LAB(2.0, 0.0, 0.0)) == BLACK
        assert basic.find_closest_lab_name(99.0, 0.0, 0.0) == "White"

    def test_float_tuple_is_lab(self, basic: ColorNames) -> None:
        """実数を含むタプルは LAB 座標として扱う。"""
        assert basic.find_closest_color(RED.lab.to_tuple()) == RED
        assert basic.find_closest_color((99.0, 0.0, 0.0)) == WHITE
        assert basic.find_closest_color_name((2, 0.5, 0)) == "Black"

    def test_int_tuple_is_rgb(self, basic: ColorNames) -> None:
        # (52, 75, 60) は RGB として暗い色 → Black
        assert basic.find_closest_color((52, 75, 60)) == BLACK

    def test_float_rgb_rejected(self, basic: ColorNames) -> None:
        with pytest.raises(TypeError):
            basic.find_closest_rgb(12.7, 0.5, 0.0)  # type: ignore[arg-type]

    def test_huge_lab_query_still_matches(self, basic: ColorNames) -> None:
        """単精度の範囲外の LAB でも空でないパレットなら結果を返す。"""
        assert basic.find_closest_lab(1e39, 0.0, 0.0) in (RED, BLACK, WHITE)
        assert basic.find_closest_lab_name(1e200, 0.0, 0.0) != UNKNOWN_COLOR_NAME
        assert basic.find_closest_lab(math.nan, 0.0, 0.0) is not None

    def test_named_color(self, basic: ColorNames) -> None:
        crimson = NamedColor.from_hex("Crimson", "#DC143C")
        assert basic.find_closest_color(crimson) == RED
        assert basic.find_closest_color_name(crimson) == "Red"

    def test_invalid_hex(self, basic: ColorNames) -> None:
        with pytest.raises(InvalidHexFormatError):
            basic.find_closest_hex("FF0000")
        with pytest.raises(InvalidHexFormatError):
            basic.find_closest_color_name("#FF00")

    def test_unsupported_type(self, basic: ColorNames) -> None:
        with pytest.raises(TypeError):
            basic.find_closest_color(12345)  # type: ignore[arg-type]

    def test_exact_match_default_palette(self) -> None:
        """パレット色自体を入力すると同じ座標のエントリが返る。"""
        palette = load_default_palette()
        color_names = ColorNames(palette)
        for color in palette:
            found = color_names.find_closest_color(color.rgb)
            assert found is not None
            assert found.rgb == color.rgb
            assert lab_distance_sq(found.lab, color.lab) == 0.0

    def test_default_palette_names(self) -> None:
        color_names = ColorNames(load_default_palette())
        assert color_names.find_closest_hex_name("#FE0101") == "Red"
        assert color_names.find_closest_rgb_name(1, 1, 1) == "Black"
        assert color_names.find_closest_rgb_name(102, 51, 153) == "RebeccaPurple"

    def test_deterministic_regardless_of_input_order(self) -> None:
        """入力順を変えて構築しても同じ名前が返る。"""
        palette = _unique_random_palette(5, 300)
        shuffled = list(palette)
        random.Random(6).shuffle(shuffled)
        first = ColorNames(palette)
        second = ColorNames(shuffled)
        rng = random.Random(7)
        for _ in range(300):
            rgb = RGB(rng.randrange(256), rng.randrange(256), rng.randrange(256))
            assert first.find_closest_color_name(rgb) == second.find_closest_color_name(rgb)

    def test_palette_not_reordered(self) -> None:
        palette = [WHITE, RED, BLACK]
        ColorNames(palette)
        assert palette == [WHITE, RED, BLACK]

    def test_concurrent_queries(self) -> None:
        """1つのインスタンスを複数スレッドで共有しても結果は逐次と同じ。"""
        color_names = ColorNames(_unique_random_palette(8, 500))
        rng = random.Random(9)
        queries = [
            RGB(rng.randrange(256), rng.randrange(256), rng.randrange(256)) for _ in range(2000)
        ]
        sequential = [color_names.find_closest_color(q) for q in queries]
        with ThreadPoolExecutor(max_workers=8) as pool:
            concurrent = list(pool.map(color_names.find_closest_color, queries))
        assert concurrent == sequential


class TestEmptyPalette:
    def test_find_returns_none(self, empty: ColorNames) -> None:
        assert empty.find_closest_color(RGB(1, 2, 3)) is None
        assert empty.find_closest_rgb(1, 2, 3) is None
        assert empty.find_closest_hex("#010203") is None
        assert empty.find_closest_lab(50.0, 0.0, 0.0) is None

    def test_name_returns_unknown(self, empty: ColorNames) -> None:
        assert empty.find_closest_color_name(RGB(1, 2, 3)) == UNKNOWN_COLOR_NAME
        assert empty.find_closest_rgb_name(1, 2, 3) == "Unknown"
        assert empty.find_closest_hex_name("#010203") == "Unknown"
        assert empty.find_closest_lab_name(50.0, 0.0, 0.0) == "Unknown"

    def test_invalid_hex_still_raises(self, empty: ColorNames) -> None:
        """空のパレットでも不正な16進は結果なしではなくエラー。"""
        with pytest.raises(InvalidHexFormatError):
            empty.find_closest_hex_name("#XYZXYZ")

    def test_random_returns_none(self, empty: ColorNames) -> None:
        assert empty.get_random_color() is None

    def test_len_and_root(self, empty: ColorNames) -> None:
        assert len(empty) == 0
        assert empty.root is None


class TestRandomColor:
    def test_result_in_palette(self, basic: ColorNames) -> None:
        rng = random.Random(0)
        for _ in range(20):
            assert basic.get_random_color(rng) in (RED, BLACK, WHITE)

    def test_seeded_rng_reproducible(self, basic: ColorNames) -> None:
        first = [basic.get_random_color(random.Random(3)) for _ in range(5)]
        second = [basic.get_random_color(random.Random(3)) for _ in range(5)]
        assert first == second

    def test_every_entry_reachable(self, basic: ColorNames) -> None:
        rng = random.Random(1)
        seen = {basic.get_random_color(rng) for _ in range(200)}
        assert seen == {RED, BLACK, WHITE}


class TestToQueryPoint:
    def test_lab_rounded_to_single_precision(self) -> None:
        lab = to_query_point(LAB(0.1, 0.2, 0.3))
        assert lab == LAB(0.1, 0.2, 0.3).to_single()

    def test_sources_agree(self) -> None:
        expected = RED.lab
        assert to_query_point(RED) == expected
        assert to_query_point(RGB(255, 0, 0)) == expected
        assert to_query_point((255, 0, 0)) == expected
        assert to_query_point("#FF0000") == expected

    def test_bad_tuple(self) -> None:
        with pytest.raises(TypeError):
            to_query_point((1, 2))  # type: ignore[arg-type]

    def test_mixed_tuple_types(self) -> None:
        assert to_query_point((255, 0, 0)) == RED.lab
        assert to_query_point((53.5, 80.0, 67.0)) == LAB(53.5, 80.0, 67.0).to_single()
        with pytest.raises(TypeError):
            to_query_point((True, 0, 0))  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            to_query_point(("1", 2, 3))  # type: ignore[arg-type]
