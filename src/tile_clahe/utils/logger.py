"""CLI 用のロギング設定。"""

import logging
import sys


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """ルートロガーにコンソールハンドラを設定。

    既存のハンドラ (自分で追加したもの以外) のレベルは変更しない。

    Args:
        level: ログレベル (default: INFO)

    Returns:
        ルートロガー
    """
    logger = logging.getLogger()

    if not logger.handlers:
        # Console handler
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%H:%M:%S'
            )
        )
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger
