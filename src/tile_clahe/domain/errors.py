"""CLAHE 処理の例外定義。"""

from __future__ import annotations


class ClaheError(Exception):
    """CLAHE 処理で発生するエラーの基底クラス。"""


class ConfigError(ClaheError, ValueError):
    """タイル分割設定が不正（タイル寸法が 0 になる等）。"""


class ChannelCountError(ClaheError, ValueError):
    """ヒストグラム入力が単一チャンネルでない。"""

    def __init__(self, channels: int) -> None:
        super().__init__(f"expected a single-channel histogram, got {channels} channels")
        self.channels = channels


class ImageReadError(ClaheError):
    """画像ファイルの読み込み・デコードに失敗。"""
