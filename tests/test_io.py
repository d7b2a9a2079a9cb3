import numpy as np
import pytest
from PIL import Image

from growcut import GrowCutConfig, ImageFormatError, PixelGrid, load_rgba, process_image_file, save_rgba


def _write(path, arr, mode=None):
    img = Image.fromarray(arr)
    if mode:
        img = img.convert(mode)
    img.save(path)
    return path


def _pair(tmp_path, H=24, W=20):
    img = np.full((H, W, 4), 255, dtype=np.uint8)
    img[6:18, 5:15, :3] = 0
    overlay = np.zeros((H, W, 4), dtype=np.uint8)
    overlay[11:13, 9:11] = (0, 255, 0, 255)
    overlay[0:2, :] = (255, 0, 0, 255)
    return (_write(tmp_path / "image.png", img), _write(tmp_path / "overlay.png", overlay), img)


def test_load_save_roundtrip(tmp_path):
    rng = np.random.default_rng(0)
    grid = PixelGrid(rng.integers(0, 256, size=(5, 6, 4), dtype=np.uint8))
    path = tmp_path / "nested" / "grid.png"
    save_rgba(grid, path)
    loaded = load_rgba(path)
    assert loaded.width == 6 and loaded.height == 5
    assert np.array_equal(loaded.pixels, grid.pixels)


def test_rgb_input_rejected(tmp_path):
    path = _write(tmp_path / "rgb.png", np.zeros((4, 4, 3), dtype=np.uint8))
    with pytest.raises(ImageFormatError, match="missing alpha"):
        load_rgba(path)


def test_rgb_input_converted_on_request(tmp_path):
    path = _write(tmp_path / "rgb.png", np.full((4, 4, 3), 9, dtype=np.uint8))
    grid = load_rgba(path, convert=True)
    assert grid.get(0, 0) == (9, 9, 9, 255)


def test_missing_file_propagates(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rgba(tmp_path / "nope.png")


def test_process_image_file(tmp_path):
    image_path, overlay_path, img = _pair(tmp_path)
    result = process_image_file(image_path, overlay_path, GrowCutConfig(workers=2))
    assert result.converged
    assert result.rgba[12, 10, 3] == 255
    assert result.rgba[0, 0, 3] == 0
    assert np.array_equal(result.rgba[..., :3], img[..., :3])


def test_process_image_file_show_effects(tmp_path):
    image_path, overlay_path, _ = _pair(tmp_path)
    result = process_image_file(image_path, overlay_path, show_effects=True)
    # blurred edge pixel is grey rather than black or white
    assert 0 < result.rgba[6, 10, 0] < 255


def test_process_image_file_size_mismatch(tmp_path):
    image_path, _, _ = _pair(tmp_path)
    other = _write(tmp_path / "small.png", np.zeros((3, 3, 4), dtype=np.uint8))
    with pytest.raises(ValueError, match="Shape mismatch"):
        process_image_file(image_path, other)
