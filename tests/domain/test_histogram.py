"""histogram.py のテスト。"""

import random

import numpy as np
import pytest

from tile_clahe.domain.errors import ChannelCountError
from tile_clahe.domain.histogram import (
    N_BINS,
    ChannelHistogram,
    build_histogram,
    build_mapping_table,
    clip_histogram,
)


def _single_bin(value: int, count: int) -> ChannelHistogram:
    counts = [0] * N_BINS
    counts[value] = count
    return ChannelHistogram([counts])


class TestBuildHistogram:
    def test_counts_sum_to_pixel_count(self) -> None:
        pixels = [0, 0, 5, 255, 5, 5]
        hist = build_histogram(pixels)
        assert len(hist.channels) == 1
        assert hist.total == len(pixels)
        assert hist.channels[0][5] == 3
        assert hist.channels[0][0] == 2
        assert hist.channels[0][255] == 1

    def test_tuple_pixels_make_channels(self) -> None:
        hist = build_histogram([(1, 2, 3), (1, 2, 4)])
        assert len(hist.channels) == 3
        assert hist.channels[2][4] == 1

    def test_numpy_scalars_are_single_channel(self) -> None:
        pixels = np.array([3, 3, 250], dtype=np.uint8)
        hist = build_histogram(pixels)
        assert len(hist.channels) == 1
        assert hist.channels[0][3] == 2
        assert hist.channels[0][250] == 1

    def test_empty_input(self) -> None:
        hist = build_histogram([])
        assert hist.channels == [[0] * N_BINS]


class TestClipHistogram:
    def test_excess_redistributed_with_remainder_dropped(self) -> None:
        """超過 960 → 各ビン +3、余り 192 は破棄。"""
        clipped = clip_histogram(_single_bin(0, 1000), 40)
        counts = clipped.channels[0]
        assert counts[0] == 43
        assert all(c == 3 for c in counts[1:])
        assert sum(counts) == 808
        assert 1000 - sum(counts) == 960 % 256

    def test_no_excess_unchanged(self) -> None:
        hist = _single_bin(7, 40)
        assert clip_histogram(hist, 40).channels == hist.channels

    def test_input_not_modified(self) -> None:
        hist = _single_bin(3, 500)
        clip_histogram(hist, 10)
        assert hist.channels[0][3] == 500

    def test_multi_channel_rejected(self) -> None:
        hist = build_histogram([(10, 20, 30)] * 4)
        with pytest.raises(ChannelCountError) as exc_info:
            clip_histogram(hist, 40)
        assert exc_info.value.channels == 3

    def test_mass_and_clip_bounds_random(self) -> None:
        """総数の減少は excess % 256、各ビンは limit + excess // 256 以下。"""
        rng = random.Random(42)
        for _ in range(50):
            counts = [rng.randint(0, 120) for _ in range(N_BINS)]
            limit = rng.randint(0, 80)
            excess = sum(c - limit for c in counts if c > limit)
            clipped = clip_histogram(ChannelHistogram([counts]), limit).channels[0]
            assert sum(clipped) <= sum(counts)
            assert sum(counts) - sum(clipped) == excess % 256
            assert max(clipped) <= limit + excess // 256

    def test_clip_bound_when_excess_below_bins(self) -> None:
        """超過が 256 未満なら再分配は 0 で、全ビンが limit 以下。"""
        counts = [0] * N_BINS
        counts[10] = 100
        counts[20] = 60
        clipped = clip_histogram(ChannelHistogram([counts]), 40).channels[0]
        assert max(clipped) <= 40


class TestBuildMappingTable:
    def test_single_value_tile(self) -> None:
        """単一値 v のタイル: v 未満は 0、v 以上は 255。"""
        lut = build_mapping_table(_single_bin(77, 4))
        assert len(lut) == N_BINS
        assert all(v == 0 for v in lut[:77])
        assert all(v == 255 for v in lut[77:])

    def test_clipped_worked_example(self) -> None:
        """32x32 タイル全画素 100、clip 40: N=808, cumulative(100)=343。"""
        clipped = clip_histogram(_single_bin(100, 1024), 40)
        lut = build_mapping_table(clipped)
        assert lut[0] == 0  # 3 / 808 * 255 = 0.95
        assert lut[99] == 94  # 300 / 808 * 255 = 94.68
        assert lut[100] == 108  # 343 / 808 * 255 = 108.25
        assert lut[255] == 255

    def test_monotonic_random(self) -> None:
        rng = random.Random(7)
        for _ in range(30):
            counts = [rng.randint(0, 50) for _ in range(N_BINS)]
            lut = build_mapping_table(clip_histogram(ChannelHistogram([counts]), 20))
            assert all(a <= b for a, b in zip(lut, lut[1:]))
            assert all(0 <= v <= 255 for v in lut)

    def test_empty_histogram_maps_to_zero(self) -> None:
        """clip_limit=0 かつ 256 画素未満のタイルは N=0 → 全て 0。"""
        clipped = clip_histogram(_single_bin(5, 10), 0)
        assert sum(clipped.channels[0]) == 0
        assert build_mapping_table(clipped) == (0,) * N_BINS

    def test_truncates_not_rounds(self) -> None:
        counts = [0] * N_BINS
        counts[0] = 1
        counts[1] = 1
        lut = build_mapping_table(ChannelHistogram([counts]))
        assert lut[0] == 127  # 0.5 * 255 = 127.5
