"""タイル単位のヒストグラム処理。

ヒストグラム構築 → クリッピング → 累積分布による階調マッピングテーブル (LUT) 生成。
Pure Python 実装。NumPy 版は infrastructure/tile_lut.py。
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from tile_clahe.domain.errors import ChannelCountError

N_BINS = 256

Pixel = Union[int, Sequence[int]]


@dataclass
class ChannelHistogram:
    """チャンネルごとの 256 ビンヒストグラム。"""

    channels: list[list[int]]

    @property
    def total(self) -> int:
        """先頭チャンネルの総カウント。"""
        return sum(self.channels[0]) if self.channels else 0


def build_histogram(pixels: Iterable[Pixel]) -> ChannelHistogram:
    """画素値列からヒストグラムを構築。

    整数 (numpy の整数スカラー含む) の画素は単一チャンネル、
    タプルの画素は成分ごとのチャンネルとして集計する。

    Args:
        pixels: タイル内の画素値 (0-255)

    Returns:
        ChannelHistogram
    """
    channels: list[list[int]] = []
    for pixel in pixels:
        values = (int(pixel),) if isinstance(pixel, numbers.Integral) else tuple(pixel)
        if not channels:
            channels = [[0] * N_BINS for _ in values]
        for channel, value in zip(channels, values):
            channel[value] += 1
    if not channels:
        channels = [[0] * N_BINS]
    return ChannelHistogram(channels)


def clip_histogram(histogram: ChannelHistogram, limit: int) -> ChannelHistogram:
    """ヒストグラムを limit でクリップし、超過分を全ビンに均等再分配。

    超過総数を 256 で整数除算した商を各ビンに加算する。
    余り (最大 255 カウント) は破棄されるため、クリップ後の総数は
    excess % 256 だけ減少しうる。

    Args:
        histogram: 単一チャンネルのヒストグラム
        limit: ビンあたりの上限 (>= 0)

    Returns:
        クリップ済みの新しい ChannelHistogram

    Raises:
        ChannelCountError: チャンネル数が 1 でない場合
    """
    if len(histogram.channels) != 1:
        raise ChannelCountError(len(histogram.channels))

    excess = 0
    clipped = []
    for count in histogram.channels[0]:
        if count > limit:
            excess += count - limit
            count = limit
        clipped.append(count)

    per_bin = excess // N_BINS
    return ChannelHistogram([[count + per_bin for count in clipped]])


def build_mapping_table(histogram: ChannelHistogram) -> tuple[int, ...]:
    """クリップ済みヒストグラムから 256 エントリの LUT を生成。

    lut[i] = floor(cumulative(0..i) / N * 255)。倍精度で計算して切り捨てる。
    累積和が単調非減少なので LUT も単調非減少になる。
    N == 0 の場合は全て 0。

    Args:
        histogram: 単一チャンネルのヒストグラム

    Returns:
        256 要素のタプル (各要素 0-255)
    """
    if len(histogram.channels) != 1:
        raise ChannelCountError(len(histogram.channels))

    counts = histogram.channels[0]
    n_pixels = sum(counts)
    if n_pixels == 0:
        return (0,) * N_BINS

    lut = []
    seen = 0
    for count in counts:
        seen += count
        lut.append(int(seen / n_pixels * 255.0))
    return tuple(lut)
