"""
Mask extraction: strength sign to hard alpha.
"""

import numpy as np

from .grid import PixelGrid

OPAQUE = 0xff
TRANSPARENT = 0x00


def alpha_from_strength(strength: np.ndarray) -> np.ndarray:
    """uint8 alpha, opaque where strength > 0. Zero (never reached) is background."""
    return np.where(np.asarray(strength) > 0.0, OPAQUE, TRANSPARENT).astype(np.uint8)


def apply_mask(grid: PixelGrid, strength: np.ndarray) -> PixelGrid:
    """Replace the alpha channel of `grid` in place, RGB untouched. Returns `grid`."""
    strength = np.asarray(strength)
    if strength.shape != grid.lattice.shape:
        raise ValueError(f"Strength field {strength.shape} does not match grid {grid.lattice.shape}")
    grid.pixels[..., 3] = alpha_from_strength(strength)
    return grid


def render_effects(grid: PixelGrid, colors: np.ndarray) -> PixelGrid:
    """Write the preprocessed colour field into the RGB channels, for inspection."""
    colors = np.asarray(colors, dtype=np.float32)
    if colors.shape != grid.lattice.shape + (3,):
        raise ValueError(f"Colour field {colors.shape} does not match grid {grid.lattice.shape}")
    grid.pixels[..., :3] = np.clip(colors * 255.0, 0, 255).astype(np.uint8)
    return grid
