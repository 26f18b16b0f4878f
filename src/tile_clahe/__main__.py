"""エントリーポイント: uv run python -m tile_clahe INPUT [-o OUTPUT]"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import numpy as np

from tile_clahe.application.clahe_service import ClaheService
from tile_clahe.domain.errors import ClaheError
from tile_clahe.domain.grid import DEFAULT_CLIP_LIMIT, DEFAULT_TILES, ClaheConfig
from tile_clahe.infrastructure.image_io import load_grayscale, save_grayscale
from tile_clahe.utils.logger import setup_logger

logger = logging.getLogger("tile_clahe")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tile-clahe",
        description="Contrast-limited adaptive histogram equalization for grayscale images.",
    )
    parser.add_argument("input", help="input image file")
    parser.add_argument(
        "-o", "--output", default="output.png",
        help="output PNG path (default: output.png)",
    )
    parser.add_argument("--tiles-hz", type=int, default=DEFAULT_TILES, help="horizontal tile count")
    parser.add_argument("--tiles-vt", type=int, default=DEFAULT_TILES, help="vertical tile count")
    parser.add_argument(
        "--clip-limit", type=int, default=DEFAULT_CLIP_LIMIT,
        help="per-bin histogram count limit",
    )
    parser.add_argument(
        "--reference", action="store_true",
        help="use the pure-Python per-pixel implementation",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = ClaheConfig(args.tiles_hz, args.tiles_vt, args.clip_limit)
        service = ClaheService(config)
        image = load_grayscale(args.input)
        logger.info("equalizing %s (%dx%d)", args.input, image.shape[1], image.shape[0])
        if args.reference:
            result = np.array(service.equalize_reference(image.tolist()), dtype=np.uint8)
        else:
            result = service.equalize(image)
        save_grayscale(result, args.output, format="PNG")
    except (ClaheError, OSError) as e:
        logger.error("%s", e)
        return 1

    logger.info("wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
