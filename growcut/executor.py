"""
Parallel sweep executor.

Interior rows are striped over N tasks (task k owns rows 1+k, 1+k+N, ...)
and one more task owns every border pixel. The write sets are disjoint, so
the output buffer needs no locking; all tasks only read the input buffer and
the weights. A sweep returns once every task has finished.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List

import numpy as np

from .config import DEFAULT_WORKERS
from .relax import Sweeper


class SweepExecutor:
    """
    Persistent thread pool running one sweep at a time.

    Use as a context manager, or call close() when done:

    >>> with SweepExecutor(Sweeper(weights), workers=4) as ex:
    ...     converged = ex.run_sweep(strength_in, strength_out)
    """

    def __init__(self, sweeper: Sweeper, workers: int = DEFAULT_WORKERS):
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.sweeper = sweeper
        self.workers = int(workers)
        self.stripes: List[np.ndarray] = [sweeper.lattice.row_stripe(k, self.workers)
                                          for k in range(self.workers)]
        self._pool = ThreadPoolExecutor(max_workers=self.workers + 1, thread_name_prefix="growcut")
        logging.debug(f"sweep executor: {self.workers} interior stripes + 1 border task "
                      f"on {sweeper.lattice!r}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self) -> None:
        self._pool.shutdown(wait=True)

    def run_sweep(self, strength_in: np.ndarray, strength_out: np.ndarray) -> bool:
        """One sweep over the whole grid. True if no pixel was invaded."""
        self.sweeper.check_buffers(strength_in, strength_out)
        futures = [self._pool.submit(self.sweeper.sweep_rows, strength_in, strength_out, rows)
                   for rows in self.stripes]
        futures.append(self._pool.submit(self.sweeper.sweep_border, strength_in, strength_out))

        # Barrier: nothing reads strength_out until every task is done.
        wait(futures)
        converged = True
        for f in futures:
            converged = f.result() and converged
        return converged
