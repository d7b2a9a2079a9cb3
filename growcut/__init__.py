"""
GrowCut Foreground Extraction
-----------------------------
Seeded binary matting with the GrowCut cellular automaton. Green strokes on
an overlay mark the foreground, red strokes the background; the labels grow
across the image, slowed down by colour edges, until nothing changes.

Example:
    >>> import numpy as np
    >>> from growcut import segment_image, GrowCutConfig
    >>>
    >>> # RGBA uint8 image, shape [height, width, 4]
    >>> image = ...  # Your image loading code here
    >>>
    >>> # Overlay of the same shape: opaque green = foreground, opaque red = background
    >>> overlay = np.zeros_like(image)
    >>> overlay[30:40, 30:40] = (0, 255, 0, 255)
    >>> overlay[:5, :] = (255, 0, 0, 255)
    >>>
    >>> result = segment_image(image, overlay, GrowCutConfig(workers=4))
    >>> result.rgba[..., 3]  # 255 on foreground, 0 elsewhere
"""

from .config import GrowCutConfig
from .core import GrowCutResult, process_image_file, segment_grid, segment_image
from .grid import BorderPolicy, Lattice, PixelGrid
from .io import ImageFormatError, load_rgba, save_rgba

__version__ = "0.1.0"
__all__ = [
    "segment_image", "segment_grid", "process_image_file",
    "GrowCutConfig", "GrowCutResult",
    "PixelGrid", "Lattice", "BorderPolicy",
    "load_rgba", "save_rgba", "ImageFormatError",
]
