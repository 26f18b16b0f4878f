"""タイル LUT 生成（NumPy ベース）。

domain/histogram.py の Pure Python 実装と同じ規則を NumPy で実行する:
ヒストグラム → クリッピング（余り破棄の均等再分配）→ 累積分布 LUT。
タイル間に依存がないため、スレッドプールでタイルごとに並列構築する。
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import numpy.typing as npt

from tile_clahe.domain.errors import ChannelCountError
from tile_clahe.domain.grid import TileCoordinate, TileGrid, TileRect
from tile_clahe.domain.histogram import N_BINS
from tile_clahe.domain.lut_grid import LutGrid


def tile_histogram(tile: npt.NDArray[np.uint8]) -> npt.NDArray[np.int64]:
    """タイルのチャンネル別ヒストグラム。

    Args:
        tile: (h, w) または (h, w, C) の uint8 配列

    Returns:
        (C, 256) の int64 配列 (2次元入力は C=1)
    """
    if tile.ndim == 2:
        tile = tile[:, :, np.newaxis]
    return np.stack(
        [
            np.bincount(tile[:, :, c].ravel(), minlength=N_BINS).astype(np.int64)
            for c in range(tile.shape[2])
        ]
    )


def clip_histogram_array(
    histogram: npt.NDArray[np.int64],
    limit: int,
) -> npt.NDArray[np.int64]:
    """ヒストグラムを limit でクリップし、超過分 // 256 を全ビンに加算。

    Args:
        histogram: (1, 256) の int64 配列
        limit: ビンあたりの上限

    Returns:
        (256,) のクリップ済み int64 配列

    Raises:
        ChannelCountError: チャンネル数が 1 でない場合
    """
    if histogram.shape[0] != 1:
        raise ChannelCountError(histogram.shape[0])
    counts = histogram[0]
    excess = int(np.maximum(counts - limit, 0).sum())
    return np.minimum(counts, limit) + excess // N_BINS


def mapping_table_array(histogram: npt.NDArray[np.int64]) -> npt.NDArray[np.uint8]:
    """クリップ済みヒストグラム (256,) から LUT (256,) uint8 を生成。"""
    n_pixels = int(histogram.sum())
    if n_pixels == 0:
        return np.zeros(N_BINS, dtype=np.uint8)
    cumulative = np.cumsum(histogram)
    # float64 で計算し astype で切り捨て
    return (cumulative / n_pixels * 255.0).astype(np.uint8)


def build_tile_lut(tile: npt.NDArray[np.uint8], clip_limit: int) -> npt.NDArray[np.uint8]:
    """1タイル分の LUT を構築。"""
    return mapping_table_array(clip_histogram_array(tile_histogram(tile), clip_limit))


def _tile_view(image: npt.NDArray[np.uint8], rect: TileRect) -> npt.NDArray[np.uint8]:
    return image[rect.y : rect.y + rect.height, rect.x : rect.x + rect.width]


def build_lut_array(
    image: npt.NDArray[np.uint8],
    grid: TileGrid,
    clip_limit: int,
    max_workers: int | None = None,
) -> npt.NDArray[np.uint8]:
    """全タイルの LUT を構築。

    Args:
        image: (H, W) uint8 配列（(H, W, C) はヒストグラム段階で ChannelCountError）
        grid: タイルグリッド
        clip_limit: クリップ上限
        max_workers: スレッド数 (None=自動, 1=逐次)

    Returns:
        (tiles_vt, tiles_hz, 256) の読み取り専用 uint8 配列
    """
    rects = [
        grid.tile_rect(TileCoordinate(col, row))
        for row in range(grid.tiles_vt)
        for col in range(grid.tiles_hz)
    ]

    def build(rect: TileRect) -> npt.NDArray[np.uint8]:
        return build_tile_lut(_tile_view(image, rect), clip_limit)

    if max_workers == 1:
        tables = [build(rect) for rect in rects]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            tables = list(pool.map(build, rects))

    luts = np.stack(tables).reshape(grid.tiles_vt, grid.tiles_hz, N_BINS)
    luts.flags.writeable = False
    return luts


def lut_array_to_grid(luts: npt.NDArray[np.uint8]) -> LutGrid:
    """(tiles_vt, tiles_hz, 256) 配列を LutGrid に変換。"""
    tiles_vt, tiles_hz = luts.shape[:2]
    return LutGrid.from_tables(tiles_hz, tiles_vt, luts.reshape(-1, N_BINS).tolist())


def lut_grid_to_array(grid: LutGrid) -> npt.NDArray[np.uint8]:
    """LutGrid を (tiles_vt, tiles_hz, 256) の読み取り専用配列に変換。"""
    luts = np.array(grid.tables, dtype=np.uint8).reshape(grid.tiles_vt, grid.tiles_hz, N_BINS)
    luts.flags.writeable = False
    return luts
