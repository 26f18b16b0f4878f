"""CLAHE 実行ユースケース。

フェーズ1: 全タイルの LUT を構築（タイル間独立）
フェーズ2: LUT グリッドを読み取り専用で参照し、全画素を変換（画素間独立）

equalize は NumPy 版、equalize_reference は domain 層の Pure Python 版。
両者の出力はビット一致する。
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

import numpy as np
import numpy.typing as npt

from tile_clahe.domain.errors import ChannelCountError
from tile_clahe.domain.grid import (
    DEFAULT_CLIP_LIMIT,
    DEFAULT_TILES,
    ClaheConfig,
    TileCoordinate,
    TileGrid,
)
from tile_clahe.domain.histogram import build_histogram, build_mapping_table, clip_histogram
from tile_clahe.domain.interpolation import interpolate_pixel
from tile_clahe.domain.lut_grid import LutGrid
from tile_clahe.domain.region import classify_pixel
from tile_clahe.infrastructure.remap import remap_image
from tile_clahe.infrastructure.tile_lut import build_lut_array, lut_array_to_grid, lut_grid_to_array

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]
"""進捗コールバック: (stage_name, progress_0_to_1)"""

PixelRows = Sequence[Sequence[int]]


def _as_gray(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """入力を (H, W) uint8 として扱う。(H, W, 1) は squeeze。

    (H, W, C>1) はそのまま返し、ヒストグラム段階 (remap では直後) で ChannelCountError にする。
    """
    image = np.asarray(image)
    if image.dtype != np.uint8:
        raise ValueError(f"expected a uint8 image, got {image.dtype}")
    if image.ndim == 3 and image.shape[2] == 1:
        return image[:, :, 0]
    if image.ndim not in (2, 3):
        raise ValueError(f"expected a (H, W) image, got shape {image.shape}")
    return image


def _row_lengths(pixels: PixelRows) -> tuple[int, int]:
    height = len(pixels)
    width = len(pixels[0]) if height else 0
    if any(len(row) != width for row in pixels):
        raise ValueError("all pixel rows must have the same length")
    return width, height


class ClaheService:
    """CLAHE サービス。"""

    def __init__(
        self,
        config: ClaheConfig | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._config = config or ClaheConfig()
        self._max_workers = max_workers

    @property
    def config(self) -> ClaheConfig:
        return self._config

    @config.setter
    def config(self, value: ClaheConfig) -> None:
        self._config = value

    @property
    def max_workers(self) -> int | None:
        return self._max_workers

    def grid_for(self, width: int, height: int) -> TileGrid:
        """画像サイズに対するタイルグリッド。不正な設定は ConfigError。"""
        return TileGrid.for_image(width, height, self._config)

    # --- NumPy 版 ---

    def build_lut_grid(self, image: npt.NDArray[np.uint8]) -> LutGrid:
        """画像の全タイル LUT を構築。"""
        image = _as_gray(image)
        grid = self.grid_for(image.shape[1], image.shape[0])
        luts = build_lut_array(image, grid, self._config.clip_limit, self._max_workers)
        return lut_array_to_grid(luts)

    def remap(self, image: npt.NDArray[np.uint8], luts: LutGrid) -> npt.NDArray[np.uint8]:
        """構築済み LUT グリッドで画像を変換。"""
        image = _as_gray(image)
        if image.ndim == 3:
            raise ChannelCountError(image.shape[2])
        grid = TileGrid(image.shape[1], image.shape[0], luts.tiles_hz, luts.tiles_vt)
        return remap_image(image, lut_grid_to_array(luts), grid)

    def equalize(
        self,
        image: npt.NDArray[np.uint8],
        progress: ProgressCallback | None = None,
    ) -> npt.NDArray[np.uint8]:
        """画像に CLAHE を適用。

        Args:
            image: (H, W) または (H, W, 1) の uint8 配列
            progress: 進捗コールバック

        Returns:
            新しい (H, W) uint8 配列

        Raises:
            ConfigError: タイル数が画像寸法を超える場合（処理開始前）
            ChannelCountError: 入力が単一チャンネルでない場合
        """
        image = _as_gray(image)
        height, width = image.shape[:2]
        grid = self.grid_for(width, height)

        if progress:
            progress("LUT構築", 0.0)
        luts = build_lut_array(image, grid, self._config.clip_limit, self._max_workers)
        logger.debug(
            "built %dx%d tile LUTs (tile %dx%d, clip_limit=%d)",
            grid.tiles_hz, grid.tiles_vt, grid.tile_width, grid.tile_height,
            self._config.clip_limit,
        )

        if progress:
            progress("補間", 0.5)
        result = remap_image(image, luts, grid)

        if progress:
            progress("完了", 1.0)
        return result

    # --- Pure Python 版 ---

    def build_lut_grid_reference(self, pixels: PixelRows) -> LutGrid:
        """domain 層のみで全タイル LUT を構築。"""
        width, height = _row_lengths(pixels)
        grid = self.grid_for(width, height)
        tables = []
        for row in range(grid.tiles_vt):
            for col in range(grid.tiles_hz):
                rect = grid.tile_rect(TileCoordinate(col, row))
                tile = (
                    pixels[y][x]
                    for y in range(rect.y, rect.y + rect.height)
                    for x in range(rect.x, rect.x + rect.width)
                )
                histogram = clip_histogram(build_histogram(tile), self._config.clip_limit)
                tables.append(build_mapping_table(histogram))
        return LutGrid(grid.tiles_hz, grid.tiles_vt, tuple(tables))

    def equalize_reference(
        self,
        pixels: PixelRows,
        progress: ProgressCallback | None = None,
    ) -> list[list[int]]:
        """Pure Python の CLAHE。画素ごとに領域分類と補間を行う。

        Args:
            pixels: 画像の画素値 [y][x] (0-255)
            progress: 進捗コールバック

        Returns:
            変換後の画素値 [y][x]
        """
        width, height = _row_lengths(pixels)
        grid = self.grid_for(width, height)

        if progress:
            progress("LUT構築", 0.0)
        luts = self.build_lut_grid_reference(pixels)

        if progress:
            progress("補間", 0.5)
        result = [
            [interpolate_pixel(classify_pixel(x, y, grid), luts, value) for x, value in enumerate(row)]
            for y, row in enumerate(pixels)
        ]

        if progress:
            progress("完了", 1.0)
        return result


def equalize(
    image: npt.NDArray[np.uint8],
    tiles_hz: int = DEFAULT_TILES,
    tiles_vt: int = DEFAULT_TILES,
    clip_limit: int = DEFAULT_CLIP_LIMIT,
) -> npt.NDArray[np.uint8]:
    """ClaheService のショートカット。"""
    config = ClaheConfig(tiles_hz=tiles_hz, tiles_vt=tiles_vt, clip_limit=clip_limit)
    return ClaheService(config).equalize(image)
