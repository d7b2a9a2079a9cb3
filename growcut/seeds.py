"""
Seed extraction from a user-drawn overlay.

Opaque green-ish strokes are foreground (+1), opaque strokes where red
dominates green are background (-1), everything else is unlabeled (0).
"""

import logging
from typing import Dict

import numpy as np

from .config import BACKGROUND_RED_MARGIN, SEED_ALPHA_THRESHOLD
from .grid import PixelGrid

FOREGROUND = np.float32(1.0)
BACKGROUND = np.float32(-1.0)


def seed_mask(overlay: PixelGrid, alpha_threshold: int = SEED_ALPHA_THRESHOLD) -> np.ndarray:
    """Boolean H x W, True where the overlay is opaque enough to count as a stroke."""
    return overlay.pixels[..., 3] > alpha_threshold


def seed_strengths(overlay: PixelGrid,
                   alpha_threshold: int = SEED_ALPHA_THRESHOLD,
                   background_margin: int = BACKGROUND_RED_MARGIN) -> np.ndarray:
    """Initial signed strength field, float32 H x W."""
    px = overlay.pixels.astype(np.int32)
    active = seed_mask(overlay, alpha_threshold)
    background = px[..., 0] > px[..., 1] + background_margin

    strength = np.zeros(px.shape[:2], dtype=np.float32)
    strength[active & background] = BACKGROUND
    strength[active & ~background] = FOREGROUND

    logging.debug(f"seeds: {int(np.count_nonzero(strength > 0))} foreground, "
                  f"{int(np.count_nonzero(strength < 0))} background")
    return strength


def seed_counts(strength: np.ndarray) -> Dict[str, int]:
    s = np.asarray(strength)
    return {
        "foreground": int(np.count_nonzero(s > 0)),
        "background": int(np.count_nonzero(s < 0)),
        "unlabeled": int(np.count_nonzero(s == 0)),
    }


def paint_seeds(image: PixelGrid, overlay: PixelGrid,
                alpha_threshold: int = SEED_ALPHA_THRESHOLD) -> PixelGrid:
    """Copy of `image` with the overlay's stroke colours painted over it."""
    if image.lattice != overlay.lattice:
        raise ValueError(f"Image and overlay must have same size, got {image.lattice} vs {overlay.lattice}")
    preview = image.copy()
    active = seed_mask(overlay, alpha_threshold)
    preview.pixels[active, :3] = overlay.pixels[active, :3]
    return preview
