"""lut_grid.py のテスト。"""

from dataclasses import FrozenInstanceError

import pytest

from tile_clahe.domain.grid import TileCoordinate
from tile_clahe.domain.lut_grid import LutGrid


class TestLutGrid:
    def test_row_major_addressing(self) -> None:
        grid = LutGrid.from_tables(3, 2, [[i] * 256 for i in range(6)])
        assert grid.lookup(TileCoordinate(0, 0), 10) == 0
        assert grid.lookup(TileCoordinate(2, 0), 10) == 2
        assert grid.lookup(TileCoordinate(0, 1), 10) == 3
        assert grid.lookup(TileCoordinate(2, 1), 10) == 5

    def test_table_count_checked(self) -> None:
        with pytest.raises(ValueError):
            LutGrid.from_tables(2, 2, [[0] * 256] * 3)

    def test_table_length_checked(self) -> None:
        with pytest.raises(ValueError):
            LutGrid.from_tables(1, 1, [[0] * 255])

    def test_entry_range_checked(self) -> None:
        with pytest.raises(ValueError):
            LutGrid.from_tables(1, 1, [[300] * 256])
        with pytest.raises(ValueError):
            LutGrid.from_tables(1, 1, [[-1] * 256])

    def test_immutable(self) -> None:
        source = [list(range(256))]
        grid = LutGrid.from_tables(1, 1, source)
        source[0][0] = 99
        assert grid.table(TileCoordinate(0, 0))[0] == 0
        assert isinstance(grid.tables[0], tuple)
        with pytest.raises(FrozenInstanceError):
            grid.tables = ()  # type: ignore[misc]
