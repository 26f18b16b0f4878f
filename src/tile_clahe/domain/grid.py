"""タイル分割の定義。

画像を tiles_hz × tiles_vt のタイルに分割する。
右端列・下端行のタイルは整数除算の余りを吸収し、画像全体を隙間なく覆う。
Pure Python（標準ライブラリのみ）。
"""

from __future__ import annotations

from dataclasses import dataclass

from tile_clahe.domain.errors import ConfigError

DEFAULT_TILES = 8
DEFAULT_CLIP_LIMIT = 40


@dataclass(frozen=True)
class ClaheConfig:
    """CLAHE のパラメータ。

    Attributes:
        tiles_hz: 横方向のタイル数 (>= 1)
        tiles_vt: 縦方向のタイル数 (>= 1)
        clip_limit: ヒストグラム1ビンあたりの上限カウント (>= 0)
    """

    tiles_hz: int = DEFAULT_TILES
    tiles_vt: int = DEFAULT_TILES
    clip_limit: int = DEFAULT_CLIP_LIMIT

    def __post_init__(self) -> None:
        if self.tiles_hz < 1 or self.tiles_vt < 1:
            raise ConfigError(
                f"tile counts must be positive, got {self.tiles_hz}x{self.tiles_vt}"
            )
        if self.clip_limit < 0:
            raise ConfigError(f"clip_limit must be non-negative, got {self.clip_limit}")


@dataclass(frozen=True)
class TileCoordinate:
    """タイルグリッド上の位置 (col, row)。0 始まり。"""

    col: int
    row: int


@dataclass(frozen=True)
class TileRect:
    """1タイルの矩形範囲（ピクセル単位）。"""

    coord: TileCoordinate
    x: int
    y: int
    width: int
    height: int

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class TileGrid:
    """画像サイズとタイル数から決まるグリッド形状。"""

    width: int
    height: int
    tiles_hz: int
    tiles_vt: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ConfigError(f"image must not be empty, got {self.width}x{self.height}")
        if self.tiles_hz < 1 or self.tiles_vt < 1:
            raise ConfigError(
                f"tile counts must be positive, got {self.tiles_hz}x{self.tiles_vt}"
            )
        if self.tiles_hz > self.width or self.tiles_vt > self.height:
            raise ConfigError(
                f"{self.tiles_hz}x{self.tiles_vt} tiles do not fit a "
                f"{self.width}x{self.height} image (tile extent would be 0)"
            )

    @classmethod
    def for_image(cls, width: int, height: int, config: ClaheConfig) -> TileGrid:
        return cls(width, height, config.tiles_hz, config.tiles_vt)

    @property
    def tile_width(self) -> int:
        return self.width // self.tiles_hz

    @property
    def tile_height(self) -> int:
        return self.height // self.tiles_vt

    @property
    def tile_count(self) -> int:
        return self.tiles_hz * self.tiles_vt

    def index(self, coord: TileCoordinate) -> int:
        """フラットなタイル番号 (row * tiles_hz + col)。"""
        return coord.row * self.tiles_hz + coord.col

    def tile_rect(self, coord: TileCoordinate) -> TileRect:
        """タイルの矩形。最終列・最終行は余りピクセルを含む。"""
        width = self.tile_width
        if coord.col == self.tiles_hz - 1:
            width += self.width % self.tiles_hz
        height = self.tile_height
        if coord.row == self.tiles_vt - 1:
            height += self.height % self.tiles_vt
        return TileRect(
            coord=coord,
            x=self.tile_width * coord.col,
            y=self.tile_height * coord.row,
            width=width,
            height=height,
        )


def partition_tiles(
    width: int,
    height: int,
    tiles_hz: int = DEFAULT_TILES,
    tiles_vt: int = DEFAULT_TILES,
) -> list[TileRect]:
    """画像をタイルに分割する。

    Args:
        width: 画像の幅
        height: 画像の高さ
        tiles_hz: 横方向のタイル数
        tiles_vt: 縦方向のタイル数

    Returns:
        行優先 (row-major) 順の TileRect リスト

    Raises:
        ConfigError: タイル数が画像寸法を超える（タイル寸法が 0 になる）場合
    """
    grid = TileGrid(width, height, tiles_hz, tiles_vt)
    return [
        grid.tile_rect(TileCoordinate(col, row))
        for row in range(tiles_vt)
        for col in range(tiles_hz)
    ]
