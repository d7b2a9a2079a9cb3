"""
GrowCut relaxation.

One sweep builds a new strength buffer from the current one. Every pixel
starts from its own value and each of its 8 neighbours, in the fixed
NEIGHBOR_OFFSETS order, may overwrite it with weight * neighbour strength if
that is strictly stronger in magnitude. A sweep that overwrites nothing has
converged.

The kernels below are vectorised per direction. Processing the directions in
order over a whole block of pixels gives the same result as the per-pixel
loop, since each pixel only ever reads the input buffer.
"""

import logging
import time
from typing import Callable, Tuple

import numpy as np
from tqdm import tqdm

from .config import DEFAULT_MAX_ITER
from .grid import NEIGHBOR_OFFSETS, Lattice

SweepFn = Callable[[np.ndarray, np.ndarray], bool]


def _invade(out: np.ndarray, best: np.ndarray, cand: np.ndarray) -> bool:
    """Overwrite out where |cand| > best, in place. True if anything changed."""
    mag = np.abs(cand)
    take = mag > best
    if not take.any():
        return False
    np.copyto(out, cand, where=take)
    np.copyto(best, mag, where=take)
    return True


class Sweeper:
    """
    Sweep kernels bound to one edge weight field.

    Parameters:
    ----------
    weights : np.ndarray
        H x W x 8 float32 edge weights, read only.
    """

    def __init__(self, weights: np.ndarray):
        weights = np.asarray(weights, dtype=np.float32)
        if weights.ndim != 3 or weights.shape[2] != len(NEIGHBOR_OFFSETS):
            raise ValueError(f"weights must be H x W x {len(NEIGHBOR_OFFSETS)}, got {weights.shape}")
        self.weights = weights
        self.lattice = Lattice(weights.shape[1], weights.shape[0])

        # Border geometry never changes between sweeps, resolve it once.
        ys, xs = self.lattice.border_coords()
        self._border = (ys, xs)
        self._border_links = []
        for i, (dx, dy) in enumerate(NEIGHBOR_OFFSETS):
            inside = self.lattice.contains(xs + dx, ys + dy)
            self._border_links.append((i, inside, ys[inside] + dy, xs[inside] + dx))

    def check_buffers(self, strength_in: np.ndarray, strength_out: np.ndarray):
        if strength_in.shape != self.lattice.shape or strength_out.shape != self.lattice.shape:
            raise ValueError(f"strength buffers must be {self.lattice.shape}, "
                             f"got {strength_in.shape} and {strength_out.shape}")

    def sweep_rows(self, strength_in: np.ndarray, strength_out: np.ndarray, rows: np.ndarray) -> bool:
        """Interior fast path: every pixel of `rows` between the first and last column."""
        rows = np.asarray(rows, dtype=np.intp)
        if rows.size == 0:
            return True
        W = self.lattice.width
        inner = slice(1, W - 1)

        out = strength_in[rows, inner]  # fancy row index, this is a copy
        best = np.abs(out)
        g = self.weights[rows, inner]
        converged = True
        for i, (dx, dy) in enumerate(NEIGHBOR_OFFSETS):
            cand = g[..., i] * strength_in[rows + dy, 1 + dx:W - 1 + dx]
            if _invade(out, best, cand):
                converged = False
        strength_out[rows, inner] = out
        return converged

    def sweep_border(self, strength_in: np.ndarray, strength_out: np.ndarray) -> bool:
        """Border path: pixels outside the interior band, off-grid neighbours skipped."""
        ys, xs = self._border
        if ys.size == 0:
            return True

        out = strength_in[ys, xs]
        best = np.abs(out)
        converged = True
        for i, inside, ny, nx in self._border_links:
            if not inside.any():
                continue
            cand = np.zeros_like(out)
            cand[inside] = self.weights[ys[inside], xs[inside], i] * strength_in[ny, nx]
            if _invade(out, best, cand):
                converged = False
        strength_out[ys, xs] = out
        return converged

    def sweep(self, strength_in: np.ndarray, strength_out: np.ndarray) -> bool:
        """Whole grid on the calling thread: all interior rows, then the border."""
        self.check_buffers(strength_in, strength_out)
        rows = np.asarray(self.lattice.interior_rows(), dtype=np.intp)
        interior = self.sweep_rows(strength_in, strength_out, rows)
        border = self.sweep_border(strength_in, strength_out)
        return interior and border


def relax(strength: np.ndarray,
          run_sweep: SweepFn,
          max_iter: int = DEFAULT_MAX_ITER,
          progress: bool = False) -> Tuple[np.ndarray, int, bool]:
    """
    Sweep until a sweep converges or `max_iter` sweeps have run.

    Parameters:
    ----------
    strength : np.ndarray
        Initial H x W float32 strength field. Copied, the caller's array is
        left alone.
    run_sweep : callable
        run_sweep(strength_in, strength_out) -> converged. Either
        Sweeper.sweep or SweepExecutor.run_sweep.
    max_iter : int
        Iteration cap.
    progress : bool
        Show a tqdm bar.

    Returns:
    -------
    (strength, iterations, converged)
        Output buffer of the last sweep, number of sweeps run, and whether the
        last sweep converged.
    """
    if max_iter < 1:
        raise ValueError(f"max_iter must be at least 1, got {max_iter}")
    src = np.array(strength, dtype=np.float32, order="C")
    dst = np.zeros_like(src)

    iterations = 0
    converged = False
    t0 = time.time()
    with tqdm(total=max_iter, desc="GrowCut", disable=not progress) as pbar:
        while True:
            converged = run_sweep(src, dst)
            iterations += 1
            pbar.update(1)
            if converged or iterations >= max_iter:
                break
            src, dst = dst, src

    ms = (time.time() - t0) * 1000.0
    if converged:
        logging.debug(f"relaxation converged after {iterations} sweeps, {ms:.2f} ms")
    else:
        logging.warning(f"relaxation stopped at iteration cap {max_iter} without converging")
    return dst, iterations, converged
