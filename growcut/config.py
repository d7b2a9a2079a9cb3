"""
Run configuration for the GrowCut engine.
"""

from dataclasses import dataclass

DEFAULT_WORKERS = 4
DEFAULT_MAX_ITER = 2000
SEED_ALPHA_THRESHOLD = 0x80
BACKGROUND_RED_MARGIN = 128


@dataclass(frozen=True)
class GrowCutConfig:
    """
    Engine settings, passed in at construction.

    Parameters:
    ----------
    workers : int
        Interior row-stripe tasks per sweep. One extra task always handles
        the border pixels.
    max_iter : int
        Maximum number of sweeps before giving up on convergence.
    seed_alpha_threshold : int
        Overlay pixels with alpha strictly above this are seeds.
    background_margin : int
        A seed is background when red exceeds green by more than this.
    blur : bool
        Smooth the colour field with a 3x3 mean filter before computing weights.
    progress : bool
        Show a tqdm bar over sweeps.
    """
    workers: int = DEFAULT_WORKERS
    max_iter: int = DEFAULT_MAX_ITER
    seed_alpha_threshold: int = SEED_ALPHA_THRESHOLD
    background_margin: int = BACKGROUND_RED_MARGIN
    blur: bool = True
    progress: bool = False

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be at least 1, got {self.max_iter}")
        if not 0 <= self.seed_alpha_threshold <= 255:
            raise ValueError(f"seed_alpha_threshold must be in [0, 255], got {self.seed_alpha_threshold}")
        if not 0 <= self.background_margin <= 255:
            raise ValueError(f"background_margin must be in [0, 255], got {self.background_margin}")
