"""
Pixel grid and lattice geometry.

All bounds logic lives here: the relaxation code asks the lattice which rows
are interior, which pixels are border, and where a neighbour lands, instead
of doing its own index arithmetic.
"""

from enum import Enum
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

Coord = Tuple[int, int]
Sample = Tuple[int, int, int, int]

# 8-connected neighbour directions, fixed order. Direction i of the edge
# weight field always refers to NEIGHBOR_OFFSETS[i].
NEIGHBOR_OFFSETS: Tuple[Coord, ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)

# Returned for reads outside the grid: white, fully transparent.
SENTINEL: Sample = (0xff, 0xff, 0xff, 0x00)


class BorderPolicy(Enum):
    """What a neighbour lookup does when the neighbour falls off the grid."""
    SENTINEL = "sentinel"  # hand back the outside coordinate, reads yield SENTINEL
    SKIP = "skip"          # no neighbour at all


class Lattice:
    """Width x height pixel lattice with row-major (x, y) -> index mapping."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Lattice needs positive dimensions, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def size(self) -> int:
        return self.width * self.height

    def __eq__(self, other):
        return isinstance(other, Lattice) and self.shape == other.shape

    def __repr__(self):
        return f"Lattice({self.width}x{self.height})"

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def contains(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Vectorised in_bounds over coordinate arrays."""
        return (xs >= 0) & (xs < self.width) & (ys >= 0) & (ys < self.height)

    def index(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) outside {self!r}")
        return y * self.width + x

    def coords(self, index: int) -> Coord:
        if not 0 <= index < self.size:
            raise IndexError(f"index {index} outside {self!r}")
        y, x = divmod(index, self.width)
        return x, y

    def neighbor(self, x: int, y: int, direction: int,
                 policy: BorderPolicy = BorderPolicy.SKIP) -> Optional[Coord]:
        """Coordinate of neighbour `direction` of (x, y) under `policy`."""
        dx, dy = NEIGHBOR_OFFSETS[direction]
        nx, ny = x + dx, y + dy
        if policy is BorderPolicy.SKIP and not self.in_bounds(nx, ny):
            return None
        return nx, ny

    def neighbors(self, x: int, y: int,
                  policy: BorderPolicy = BorderPolicy.SKIP) -> Iterator[Tuple[int, Coord]]:
        """Yield (direction, coord) pairs in the fixed direction order."""
        for i in range(len(NEIGHBOR_OFFSETS)):
            n = self.neighbor(x, y, i, policy)
            if n is not None:
                yield i, n

    # ---- interior / border split ----

    def interior_rows(self) -> range:
        """Rows whose inner pixels have all 8 neighbours in bounds."""
        if self.width < 3 or self.height < 3:
            return range(0)
        return range(1, self.height - 1)

    def row_stripe(self, k: int, n: int) -> np.ndarray:
        """Interior rows handled by stripe k of n: 1+k, 1+k+n, 1+k+2n, ..."""
        if n <= 0 or not 0 <= k < n:
            raise ValueError(f"stripe {k} of {n} is not a valid partition slot")
        return np.asarray(self.interior_rows()[k::n], dtype=np.intp)

    def interior_mask(self) -> np.ndarray:
        mask = np.zeros(self.shape, dtype=bool)
        if self.interior_rows():
            mask[1:-1, 1:-1] = True
        return mask

    def border_coords(self) -> Tuple[np.ndarray, np.ndarray]:
        """(ys, xs) of every pixel outside the interior band, row-major."""
        return np.nonzero(~self.interior_mask())


class PixelGrid:
    """
    Row-major store of RGBA samples, 8 bits per channel.

    Reads outside the grid return SENTINEL, writes outside the grid are
    dropped.
    """

    def __init__(self, pixels: np.ndarray):
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"PixelGrid needs an H x W x 4 array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"PixelGrid needs uint8 samples, got {pixels.dtype}")
        self.pixels = np.ascontiguousarray(pixels)
        self.lattice = Lattice(pixels.shape[1], pixels.shape[0])

    @classmethod
    def blank(cls, width: int, height: int, fill: Sequence[int] = (0, 0, 0, 0)) -> "PixelGrid":
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = np.asarray(fill, dtype=np.uint8)
        return cls(pixels)

    @property
    def width(self) -> int:
        return self.lattice.width

    @property
    def height(self) -> int:
        return self.lattice.height

    def copy(self) -> "PixelGrid":
        return PixelGrid(self.pixels.copy())

    def get(self, x: int, y: int) -> Sample:
        if not self.lattice.in_bounds(x, y):
            return SENTINEL
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set(self, x: int, y: int, sample: Sequence[int]) -> None:
        if not self.lattice.in_bounds(x, y):
            return
        self.pixels[y, x] = sample

    def neighbors(self, x: int, y: int,
                  policy: BorderPolicy = BorderPolicy.SENTINEL) -> Iterator[Tuple[int, Sample]]:
        """Yield (direction, sample) for the 8 neighbours of (x, y)."""
        for i, (nx, ny) in self.lattice.neighbors(x, y, policy):
            yield i, self.get(nx, ny)
