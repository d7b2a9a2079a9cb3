"""
Colour preprocessing: normalisation, smoothing and edge weights.
"""

import numpy as np

from .grid import NEIGHBOR_OFFSETS, PixelGrid

# Largest possible distance between two points of the unit RGB cube.
MAX_COLOR_DISTANCE = np.float32(np.sqrt(3.0))

# 3x3 window, centre first, then the 8 neighbours in direction order.
_WINDOW_OFFSETS = ((0, 0),) + NEIGHBOR_OFFSETS


def _shift(field: np.ndarray, dx: int, dy: int, fill=0.0) -> np.ndarray:
    """Return field sampled at (x + dx, y + dy); positions off the grid get `fill`."""
    H, W = field.shape[:2]
    out = np.full_like(field, fill)
    ys_dst = slice(max(0, -dy), min(H, H - dy))
    xs_dst = slice(max(0, -dx), min(W, W - dx))
    ys_src = slice(max(0, dy), min(H, H + dy))
    xs_src = slice(max(0, dx), min(W, W + dx))
    out[ys_dst, xs_dst] = field[ys_src, xs_src]
    return out


def normalize_colors(grid: PixelGrid) -> np.ndarray:
    """H x W x 3 float32 RGB in [0, 1]. Alpha is ignored."""
    return grid.pixels[..., :3].astype(np.float32) / np.float32(255.0)


def box_blur(colors: np.ndarray) -> np.ndarray:
    """
    Unweighted 3x3 mean filter.

    Each pixel is averaged over the window samples that are in bounds, so
    edges and corners average over 6 and 4 samples rather than being
    zero-padded.
    """
    colors = np.asarray(colors, dtype=np.float32)
    H, W = colors.shape[:2]
    total = np.zeros_like(colors)
    count = np.zeros((H, W, 1), dtype=np.float32)
    ones = np.ones((H, W, 1), dtype=np.float32)
    for dx, dy in _WINDOW_OFFSETS:
        total += _shift(colors, dx, dy)
        count += _shift(ones, dx, dy)
    return total / count


def edge_weights(colors: np.ndarray) -> np.ndarray:
    """
    H x W x 8 float32 affinities, one per neighbour direction.

    weight = 1 - |c(p) - c(n)| / sqrt(3): 1.0 for identical colours, 0.0 for
    opposite corners of the RGB cube. Directions that leave the grid are 0.0
    and are never read by the relaxation.
    """
    colors = np.asarray(colors, dtype=np.float32)
    H, W = colors.shape[:2]
    g = np.zeros((H, W, len(NEIGHBOR_OFFSETS)), dtype=np.float32)
    valid = np.ones((H, W), dtype=bool)
    for i, (dx, dy) in enumerate(NEIGHBOR_OFFSETS):
        diff = colors - _shift(colors, dx, dy)
        dist = np.sqrt(np.sum(diff * diff, axis=2))
        w = np.clip(np.float32(1.0) - dist / MAX_COLOR_DISTANCE, 0.0, 1.0)
        inside = _shift(valid, dx, dy, fill=False)
        g[..., i] = np.where(inside, w, np.float32(0.0))
    return g


def preprocess(grid: PixelGrid, blur: bool = True):
    """Return (colors, weights) for a pixel grid."""
    colors = normalize_colors(grid)
    if blur:
        colors = box_blur(colors)
    return colors, edge_weights(colors)
