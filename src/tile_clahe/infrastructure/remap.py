"""LUT グリッドによる全画素リマッピング（NumPy ベース）。

軸ごとに (タイル1, タイル2, 重み) の表を domain/region.py の規則で作り、
全画素を1回のバイリニア式で処理する。
コーナー / ボーダーは片軸または両軸の重みが 0 かつ同一タイルとなるため、
Pure Python 版 (classify_pixel + interpolate_pixel) とビット一致する。
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from tile_clahe.domain.grid import TileGrid
from tile_clahe.domain.region import AxisZone, axis_pair, axis_zone


def axis_table(
    length: int,
    extent: int,
    tiles: int,
) -> tuple[npt.NDArray[np.intp], npt.NDArray[np.intp], npt.NDArray[np.float64]]:
    """1軸分の補間表。

    Args:
        length: 軸方向の画素数
        extent: 公称タイル寸法
        tiles: 軸方向のタイル数

    Returns:
        (first, second, weight) 各 (length,) 配列。
        端の区分では first == second, weight == 0。
    """
    first = np.empty(length, dtype=np.intp)
    second = np.empty(length, dtype=np.intp)
    weight = np.zeros(length, dtype=np.float64)

    for coord in range(length):
        zone = axis_zone(coord, extent, tiles)
        if zone is AxisZone.LOW:
            first[coord] = second[coord] = 0
        elif zone is AxisZone.HIGH:
            first[coord] = second[coord] = tiles - 1
        else:
            first[coord], second[coord], weight[coord] = axis_pair(coord, extent, tiles)
    return first, second, weight


def _blend(
    a: npt.NDArray[np.generic],
    b: npt.NDArray[np.generic],
    weight: npt.NDArray[np.float64],
) -> npt.NDArray[np.int64]:
    """a + (b - a) * w を float64 で計算して切り捨て。"""
    a = a.astype(np.float64)
    return (a + (b.astype(np.float64) - a) * weight).astype(np.int64)


def remap_image(
    image: npt.NDArray[np.uint8],
    luts: npt.NDArray[np.uint8],
    grid: TileGrid,
) -> npt.NDArray[np.uint8]:
    """LUT グリッドで画像全体を変換。

    Args:
        image: (H, W) uint8 配列
        luts: (tiles_vt, tiles_hz, 256) uint8 配列
        grid: タイルグリッド

    Returns:
        新しい (H, W) uint8 配列
    """
    cols0, cols1, wx = axis_table(grid.width, grid.tile_width, grid.tiles_hz)
    rows0, rows1, wy = axis_table(grid.height, grid.tile_height, grid.tiles_vt)

    r0 = rows0[:, np.newaxis]
    r1 = rows1[:, np.newaxis]
    c0 = cols0[np.newaxis, :]
    c1 = cols1[np.newaxis, :]

    # 各タイルの LUT は入力画素値そのものでルックアップ
    top_left = luts[r0, c0, image]
    top_right = luts[r0, c1, image]
    bottom_right = luts[r1, c1, image]
    bottom_left = luts[r1, c0, image]

    x_weight = wx[np.newaxis, :]
    top = _blend(top_left, top_right, x_weight)
    bottom = _blend(bottom_left, bottom_right, x_weight)
    result = _blend(top, bottom, wy[:, np.newaxis])
    return result.astype(np.uint8)
