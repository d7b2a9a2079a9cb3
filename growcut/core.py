"""
Core functionality for GrowCut foreground extraction.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .config import GrowCutConfig
from .executor import SweepExecutor
from .grid import PixelGrid
from .io import load_rgba
from .mask import apply_mask, render_effects
from .preprocess import preprocess
from .relax import Sweeper, relax
from .seeds import seed_strengths


@dataclass
class GrowCutResult:
    """Output of one segmentation run."""
    rgba: np.ndarray        # H x W x 4 uint8, original RGB with computed alpha
    strength: np.ndarray    # H x W float32, final signed strength field
    iterations: int
    converged: bool
    elapsed_ms: float = 0.0

    @property
    def mask(self) -> np.ndarray:
        return self.strength > 0.0

    @property
    def foreground_fraction(self) -> float:
        return float(np.count_nonzero(self.mask)) / float(self.mask.size)


def _as_grid(arr: Union[np.ndarray, PixelGrid], name: str) -> PixelGrid:
    if isinstance(arr, PixelGrid):
        return arr
    arr = np.asarray(arr)
    if arr.ndim != 3 or arr.shape[2] != 4 or arr.dtype != np.uint8:
        raise ValueError(f"{name} must be an H x W x 4 uint8 array, got {arr.shape} {arr.dtype}")
    return PixelGrid(arr)


def segment_grid(image: PixelGrid, overlay: PixelGrid,
                 config: Optional[GrowCutConfig] = None,
                 show_effects: bool = False) -> GrowCutResult:
    """
    Run GrowCut on pixel grids. `image` is not modified.
    """
    config = config or GrowCutConfig()
    if image.lattice != overlay.lattice:
        raise ValueError(f"Image and overlay must have same size, got {image.lattice} vs {overlay.lattice}")

    t0 = time.time()
    colors, weights = preprocess(image, blur=config.blur)
    strength = seed_strengths(overlay, config.seed_alpha_threshold, config.background_margin)

    sweeper = Sweeper(weights)
    with SweepExecutor(sweeper, workers=config.workers) as ex:
        strength, iterations, converged = relax(strength, ex.run_sweep,
                                                max_iter=config.max_iter,
                                                progress=config.progress)

    out = apply_mask(image.copy(), strength)
    if show_effects:
        render_effects(out, colors)
    ms = (time.time() - t0) * 1000.0

    logging.info(f"{image.width}x{image.height}, iterations {iterations}, converged {converged}, "
                 f"runtime_ms {ms:.2f}, workers {config.workers}")
    return GrowCutResult(rgba=out.pixels, strength=strength, iterations=iterations,
                         converged=converged, elapsed_ms=ms)


def segment_image(image: np.ndarray, overlay: np.ndarray,
                  config: Optional[GrowCutConfig] = None) -> GrowCutResult:
    """
    Perform foreground extraction using GrowCut.

    Parameters:
    ----------
    image : np.ndarray
        Source image, uint8 array of shape [height, width, 4] (RGBA).

    overlay : np.ndarray
        Seed overlay, uint8 array with the same shape as image. Opaque pixels
        (alpha > 0x80) are seeds:
        - red dominant (red > green + 128): background
        - anything else: foreground

    config : GrowCutConfig, optional
        Worker count, iteration cap and seed thresholds.
        Default: GrowCutConfig()

    Returns:
    -------
    GrowCutResult
        rgba holds the source RGB with alpha 255 on foreground and 0 elsewhere.
    """
    image_grid = _as_grid(image, "image")
    overlay_grid = _as_grid(overlay, "overlay")
    if image_grid.pixels.shape != overlay_grid.pixels.shape:
        raise ValueError(f"Image and overlay must have same shape, "
                         f"got {image_grid.pixels.shape} vs {overlay_grid.pixels.shape}")
    return segment_grid(image_grid, overlay_grid, config)


def process_image_file(image_path: Union[str, Path], overlay_path: Union[str, Path],
                       config: Optional[GrowCutConfig] = None,
                       convert: bool = False,
                       show_effects: bool = False) -> GrowCutResult:
    """
    Load an image and its overlay from disk and run GrowCut.

    Parameters:
    ----------
    image_path, overlay_path : str or Path
        RGBA image files of identical size.
    config : GrowCutConfig, optional
    convert : bool
        Accept non-RGBA inputs by converting them, instead of raising
        ImageFormatError.
    show_effects : bool
        Put the smoothed colours into the output RGB.

    Returns:
    -------
    GrowCutResult
    """
    image = load_rgba(image_path, convert=convert)
    overlay = load_rgba(overlay_path, convert=convert)
    if image.lattice != overlay.lattice:
        raise ValueError(f"Shape mismatch for {image_path} and {overlay_path}, "
                         f"got {image.lattice} vs {overlay.lattice}")
    return segment_grid(image, overlay, config, show_effects=show_effects)
