"""タイルごとの LUT を保持する読み取り専用グリッド。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from tile_clahe.domain.grid import TileCoordinate
from tile_clahe.domain.histogram import N_BINS


@dataclass(frozen=True)
class LutGrid:
    """tiles_vt × tiles_hz 個の 256 エントリ LUT。

    tables は row * tiles_hz + col でアドレスするフラットなタプル。
    構築後は変更不可。
    """

    tiles_hz: int
    tiles_vt: int
    tables: tuple[tuple[int, ...], ...]

    def __post_init__(self) -> None:
        if len(self.tables) != self.tiles_hz * self.tiles_vt:
            raise ValueError(
                f"expected {self.tiles_hz * self.tiles_vt} tables, got {len(self.tables)}"
            )
        for table in self.tables:
            if len(table) != N_BINS:
                raise ValueError(f"each table needs {N_BINS} entries, got {len(table)}")
            if any(not 0 <= v < N_BINS for v in table):
                raise ValueError("table entries must be in 0..255")

    @classmethod
    def from_tables(
        cls,
        tiles_hz: int,
        tiles_vt: int,
        tables: Sequence[Sequence[int]],
    ) -> LutGrid:
        """行優先順のテーブル列から LutGrid を生成（各テーブルはタプルへコピー）。"""
        return cls(tiles_hz, tiles_vt, tuple(tuple(int(v) for v in t) for t in tables))

    def table(self, coord: TileCoordinate) -> tuple[int, ...]:
        return self.tables[coord.row * self.tiles_hz + coord.col]

    def lookup(self, coord: TileCoordinate, value: int) -> int:
        """タイル coord の LUT で画素値 value を変換。"""
        return self.tables[coord.row * self.tiles_hz + coord.col][value]
