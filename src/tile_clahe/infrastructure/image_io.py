"""画像I/O（Pillow ベース）。

グレースケール画像の読み込みと保存を担当。
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image, UnidentifiedImageError

from tile_clahe.domain.errors import ImageReadError

logger = logging.getLogger(__name__)


def load_grayscale(path: str | Path) -> npt.NDArray[np.uint8]:
    """画像ファイルを読み込み、8bit グレースケール配列として返す。

    カラー画像は Pillow の "L" 変換で輝度に落とす。

    Args:
        path: 画像ファイルパス (PNG, JPEG等)

    Returns:
        (H, W) の uint8 配列

    Raises:
        ImageReadError: ファイルが開けない・デコードできない場合
    """
    try:
        with Image.open(path) as img:
            logger.debug("loaded %s: mode=%s size=%s", path, img.mode, img.size)
            gray = img.convert("L")
            return np.array(gray, dtype=np.uint8)
    except (OSError, UnidentifiedImageError) as e:
        raise ImageReadError(f"cannot read image {path}: {e}") from e


def save_grayscale(
    array: npt.NDArray[np.uint8],
    path: str | Path,
    format: str | None = None,
) -> None:
    """グレースケール配列を画像ファイルとして保存。

    Args:
        array: (H, W) の uint8 配列
        path: 保存先パス
        format: 画像形式 ("PNG" 等)。None なら拡張子から判定
    """
    if array.ndim != 2:
        raise ValueError(f"expected a (H, W) array, got shape {array.shape}")
    img = Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8))
    img.save(path, format=format)
    logger.debug("saved %s: size=%s", path, img.size)
