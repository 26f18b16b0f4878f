"""画素の領域分類（コーナー / ボーダー / 内部）。

各画素の出力を決める LUT を、タイル中心との位置関係から選ぶ。

    コーナー: 1タイルの LUT をそのまま使用
    ボーダー: 画像端に沿った隣接2タイルを線形補間
    内部    : 周囲4タイルをバイリニア補間

軸ごとの判定 (extent=タイル幅/高さ, half=extent//2, n=タイル数):
    c <= half              → 低端側
    c >  extent*n - half   → 高端側
    それ以外               → 中間 (n == 1 の軸は補間先がないため低端側扱い)

境界比較の <= / > はタイル継ぎ目が出ない位置を決めるため変更しないこと。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from tile_clahe.domain.grid import TileCoordinate, TileGrid


class AxisZone(Enum):
    """1軸上での画素の位置区分。"""

    LOW = "low"
    MID = "mid"
    HIGH = "high"


@dataclass(frozen=True)
class Corner:
    """単一タイルが支配する領域。"""

    tile: TileCoordinate


@dataclass(frozen=True)
class Border:
    """画像端に沿った2タイル間の線形補間領域。

    weight は first のタイル中心からの距離 / タイル寸法 (0-1)。
    """

    first: TileCoordinate
    second: TileCoordinate
    weight: float


@dataclass(frozen=True)
class Interior:
    """周囲4タイルのバイリニア補間領域。"""

    top_left: TileCoordinate
    top_right: TileCoordinate
    bottom_right: TileCoordinate
    bottom_left: TileCoordinate
    x_weight: float
    y_weight: float


Region = Union[Corner, Border, Interior]


def axis_zone(coord: int, extent: int, tiles: int) -> AxisZone:
    """1軸上の座標を低端 / 中間 / 高端に区分。"""
    half = extent // 2
    if coord <= half:
        return AxisZone.LOW
    if coord > extent * tiles - half:
        return AxisZone.HIGH
    if tiles == 1:
        return AxisZone.LOW
    return AxisZone.MID


def tile_center(index: int, extent: int) -> int:
    """タイル index の中心座標（公称タイル寸法基準）。"""
    return extent // 2 + index * extent


def axis_pair(coord: int, extent: int, tiles: int) -> tuple[int, int, float]:
    """座標を挟む2タイルと補間重みを求める。

    下側タイルは (coord - half) // extent を [0, tiles-2] にクランプして得る。
    基準タイル中心より手前 (オフセット負) の場合はタイル順を入れ替え、
    重みが [0, 1] に収まるようにする。

    Args:
        coord: 画素座標
        extent: タイル寸法
        tiles: 軸方向のタイル数 (>= 2)

    Returns:
        (first, second, weight)
    """
    lower = (coord - extent // 2) // extent
    lower = max(0, min(tiles - 2, lower))
    first, second = lower, lower + 1

    offset = coord - tile_center(lower, extent)
    if offset < 0:
        first, second = second, first
        offset = -offset
    # 奇数寸法では最終中心の1画素先まで中間区分に入る
    weight = min(offset / extent, 1.0)
    return first, second, weight


def classify_pixel(x: int, y: int, grid: TileGrid) -> Region:
    """画素 (x, y) の領域を分類。

    全画素が Corner / Border / Interior のいずれか1つに必ず分類される。

    Args:
        x: 画素の x 座標
        y: 画素の y 座標
        grid: タイルグリッド

    Returns:
        Corner, Border, Interior のいずれか

    Raises:
        ValueError: 座標が画像外の場合
    """
    if not (0 <= x < grid.width and 0 <= y < grid.height):
        raise ValueError(f"pixel ({x}, {y}) is outside a {grid.width}x{grid.height} image")

    zone_x = axis_zone(x, grid.tile_width, grid.tiles_hz)
    zone_y = axis_zone(y, grid.tile_height, grid.tiles_vt)
    edge_col = 0 if zone_x is AxisZone.LOW else grid.tiles_hz - 1
    edge_row = 0 if zone_y is AxisZone.LOW else grid.tiles_vt - 1

    if zone_x is not AxisZone.MID and zone_y is not AxisZone.MID:
        return Corner(TileCoordinate(edge_col, edge_row))

    if zone_y is not AxisZone.MID:
        # 上端 / 下端: 横方向に隣接する2タイル
        first, second, weight = axis_pair(x, grid.tile_width, grid.tiles_hz)
        return Border(
            TileCoordinate(first, edge_row),
            TileCoordinate(second, edge_row),
            weight,
        )

    if zone_x is not AxisZone.MID:
        # 左端 / 右端: 縦方向に隣接する2タイル
        first, second, weight = axis_pair(y, grid.tile_height, grid.tiles_vt)
        return Border(
            TileCoordinate(edge_col, first),
            TileCoordinate(edge_col, second),
            weight,
        )

    left, right, x_weight = axis_pair(x, grid.tile_width, grid.tiles_hz)
    top, bottom, y_weight = axis_pair(y, grid.tile_height, grid.tiles_vt)
    return Interior(
        top_left=TileCoordinate(left, top),
        top_right=TileCoordinate(right, top),
        bottom_right=TileCoordinate(right, bottom),
        bottom_left=TileCoordinate(left, bottom),
        x_weight=x_weight,
        y_weight=y_weight,
    )
