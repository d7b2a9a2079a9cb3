import numpy as np
import pytest

from growcut.grid import PixelGrid
from growcut.mask import alpha_from_strength, apply_mask, render_effects


def test_alpha_from_strength_sign():
    strength = np.array([[0.7, 0.0, -0.2, 1e-30]], dtype=np.float32)
    assert alpha_from_strength(strength).tolist() == [[255, 0, 0, 255]]


def test_apply_mask_keeps_rgb():
    rng = np.random.default_rng(2)
    grid = PixelGrid(rng.integers(0, 256, size=(3, 4, 4), dtype=np.uint8))
    rgb = grid.pixels[..., :3].copy()
    strength = np.zeros((3, 4), dtype=np.float32)
    strength[1, 2] = 0.5
    out = apply_mask(grid, strength)
    assert out is grid
    assert np.array_equal(grid.pixels[..., :3], rgb)
    expected = np.zeros((3, 4), dtype=np.uint8)
    expected[1, 2] = 255
    assert np.array_equal(grid.pixels[..., 3], expected)


def test_apply_mask_shape_mismatch():
    with pytest.raises(ValueError):
        apply_mask(PixelGrid.blank(3, 3), np.zeros((3, 4), dtype=np.float32))


def test_render_effects_writes_rgb_only():
    grid = PixelGrid.blank(2, 1, fill=(0, 0, 0, 77))
    colors = np.array([[[1.0, 0.5, 0.0], [0.2, 0.2, 0.2]]], dtype=np.float32)
    render_effects(grid, colors)
    assert grid.get(0, 0) == (255, 127, 0, 77)
    assert grid.get(1, 0)[3] == 77
