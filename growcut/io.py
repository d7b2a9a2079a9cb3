"""
Image file boundary. Pillow decodes and encodes; the engine only sees
PixelGrid objects holding 4-channel 8-bit samples.
"""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from .grid import PixelGrid

PathLike = Union[str, Path]
RGBA_MODE = "RGBA"


class ImageFormatError(ValueError):
    """Input image is not 4-channel, 8 bits per channel."""


def load_rgba(path: PathLike, convert: bool = False) -> PixelGrid:
    """
    Load an image file as a PixelGrid.

    Parameters:
    ----------
    path : str or Path
        Image file to read. Missing or undecodable files raise the usual
        FileNotFoundError / PIL.UnidentifiedImageError.
    convert : bool
        Convert other modes (RGB, P, L, ...) to RGBA instead of rejecting them.

    Returns:
    -------
    PixelGrid
    """
    with Image.open(path) as img:
        if img.mode != RGBA_MODE:
            if not convert:
                hint = " (missing alpha channel)" if img.mode == "RGB" else ""
                raise ImageFormatError(f"{path} has mode {img.mode}{hint}, must be {RGBA_MODE} 8-bit")
            img = img.convert(RGBA_MODE)
        arr = np.array(img, dtype=np.uint8)
    return PixelGrid(arr)


def save_rgba(grid: PixelGrid, path: PathLike) -> None:
    """Save a PixelGrid as an RGBA image, format from the file suffix (PNG if none)."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    im = Image.fromarray(np.ascontiguousarray(grid.pixels, dtype=np.uint8))
    im.save(out_path, format=None if out_path.suffix else "PNG")
