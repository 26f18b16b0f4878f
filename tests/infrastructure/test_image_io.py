"""image_io.py のテスト。"""

import tempfile
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from tile_clahe.domain.errors import ImageReadError
from tile_clahe.infrastructure.image_io import load_grayscale, save_grayscale


class TestLoadAndSave:
    def test_save_and_load_png(self) -> None:
        array = np.random.default_rng(42).integers(0, 256, (10, 20), dtype=np.uint8)
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            path = Path(f.name)
        save_grayscale(array, path)
        loaded = load_grayscale(path)
        np.testing.assert_array_equal(array, loaded)
        path.unlink()

    def test_explicit_format(self) -> None:
        array = np.full((5, 5), 128, dtype=np.uint8)
        with tempfile.NamedTemporaryFile(suffix=".out", delete=False) as f:
            path = Path(f.name)
        save_grayscale(array, path, format="PNG")
        with Image.open(path) as img:
            assert img.format == "PNG"
            assert img.mode == "L"
        path.unlink()

    def test_color_image_converted_to_gray(self) -> None:
        rgb = np.zeros((6, 9, 3), dtype=np.uint8)
        rgb[:, :, 1] = 255
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            path = Path(f.name)
        Image.fromarray(rgb).save(path)
        loaded = load_grayscale(path)
        assert loaded.shape == (6, 9)
        assert loaded.dtype == np.uint8
        # ITU-R 601-2 luma: 255 * 587/1000
        assert loaded[0, 0] == 150
        path.unlink()

    def test_save_rejects_multi_channel(self) -> None:
        with pytest.raises(ValueError):
            save_grayscale(np.zeros((4, 4, 3), dtype=np.uint8), "unused.png")


class TestLoadErrors:
    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with pytest.raises(ImageReadError):
                load_grayscale(Path(d) / "missing.png")

    def test_not_an_image(self) -> None:
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            f.write(b"not an image")
            path = Path(f.name)
        with pytest.raises(ImageReadError):
            load_grayscale(path)
        path.unlink()
