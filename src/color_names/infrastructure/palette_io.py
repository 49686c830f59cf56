"""パレットの読み込み（区切りテキスト形式）。

1行目はヘッダとして読み飛ばし、以降の各行を ``name,#RRGGBB`` として解釈する。
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable

from color_names.domain.color import NamedColor

logger = logging.getLogger(__name__)

DEFAULT_PALETTE_PATH = Path(__file__).with_name("default_palette.csv")


class PaletteFormatError(ValueError):
    """パレットのレコードに必要な列が無い。"""


def parse_palette_lines(lines: Iterable[str]) -> list[NamedColor]:
    """区切りテキストの行からパレットを組み立てる。

    Args:
        lines: 1行目がヘッダの行列。空行は無視する

    Returns:
        名前付き色のリスト（ファイル順）

    Raises:
        PaletteFormatError: 名前または色の列が無い行がある場合
        InvalidHexFormatError: 色が #RRGGBB 形式でない場合
    """
    colors: list[NamedColor] = []
    reader = csv.reader(line.rstrip("\r\n") for line in lines)
    for line_no, row in enumerate(reader, start=1):
        if line_no == 1 or not any(cell.strip() for cell in row):
            continue
        if len(row) < 2 or not row[0].strip():
            raise PaletteFormatError(f"line {line_no}: expected 'name,#RRGGBB', got {row!r}")
        colors.append(NamedColor.from_hex(row[0].strip(), row[1].strip()))
    return colors


def read_palette_csv(path: str | Path) -> list[NamedColor]:
    """CSVファイル（UTF-8）からパレットを読み込む。

    Args:
        path: CSVファイルパス。形式は ``name,hex``、1行目はヘッダ
    """
    with open(path, encoding="utf-8", newline="") as f:
        colors = parse_palette_lines(f)
    logger.info("Loaded %d colors from %s", len(colors), path)
    return colors


def load_default_palette() -> list[NamedColor]:
    """同梱のデフォルトパレット（CSS名前付き色）を読み込む。"""
    return read_palette_csv(DEFAULT_PALETTE_PATH)
