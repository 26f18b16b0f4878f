"""LUT 出力の線形 / バイリニア補間。

丸めモード: 浮動小数点で a + (b - a) * w を計算し、int() で切り捨てる。
結果は a と b の間 (>= 0) なので切り捨て = floor。
四捨五入とは最大 1 階調異なる。
"""

from __future__ import annotations

from tile_clahe.domain.lut_grid import LutGrid
from tile_clahe.domain.region import Border, Corner, Interior, Region


def linear_blend(a: int, b: int, weight: float) -> int:
    """2値の線形補間 (切り捨て)。"""
    return int(a + (b - a) * weight)


def bilinear_blend(
    top_left: int,
    top_right: int,
    bottom_right: int,
    bottom_left: int,
    x_weight: float,
    y_weight: float,
) -> int:
    """4値のバイリニア補間。

    上段・下段をそれぞれ x_weight で横方向に補間（各々切り捨て）した後、
    その2値を y_weight で縦方向に補間する。
    """
    top = linear_blend(top_left, top_right, x_weight)
    bottom = linear_blend(bottom_left, bottom_right, x_weight)
    return linear_blend(top, bottom, y_weight)


def interpolate_pixel(region: Region, luts: LutGrid, value: int) -> int:
    """分類済み領域の LUT を補間して出力画素値を求める。

    各タイルの LUT は入力画素値 value そのものでルックアップする。
    """
    if isinstance(region, Corner):
        return luts.lookup(region.tile, value)
    if isinstance(region, Border):
        return linear_blend(
            luts.lookup(region.first, value),
            luts.lookup(region.second, value),
            region.weight,
        )
    if isinstance(region, Interior):
        return bilinear_blend(
            luts.lookup(region.top_left, value),
            luts.lookup(region.top_right, value),
            luts.lookup(region.bottom_right, value),
            luts.lookup(region.bottom_left, value),
            region.x_weight,
            region.y_weight,
        )
    raise TypeError(f"unknown region type: {type(region).__name__}")
