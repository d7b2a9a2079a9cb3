#!/usr/bin/env python3
"""
growcut_segment.py

Seeded foreground extraction with GrowCut, RGBA in, RGBA out.

Inputs, both RGBA with 8 bits per channel and the same size:
  image    the picture to cut out
  overlay  mostly transparent, with a few opaque strokes:
             green (or anything not red dominant) over the foreground to keep
             red (red > green + 128) over the background to drop

Output: the image with its alpha channel replaced by the computed mask,
255 on foreground and 0 on background.

Convert other formats first, or pass --convert, e.g.
  convert image.jpg -channel rgba png32:image.png

Core algorithmic notes:
  Every pixel holds a signed strength, +1 foreground seed, -1 background seed,
  0 unlabeled. Each sweep, neighbour n may take over pixel p when
  |g(p, n) * s(n)| > |s(p)|, with g = 1 - |c(p) - c(n)| / sqrt(3) computed from
  blurred RGB. Sweeps repeat until nothing changes or --max-iter is hit.
"""

import argparse, json, logging, sys
from pathlib import Path

import numpy as np

from growcut import GrowCutConfig, ImageFormatError, PixelGrid, load_rgba, save_rgba
from growcut.config import DEFAULT_MAX_ITER, DEFAULT_WORKERS
from growcut.core import process_image_file, segment_image
from growcut.seeds import paint_seeds

METHOD_NAME = "growcut"


# --------------------------- Runner ---------------------------

def run_single_image(image_path: str, overlay_path: str, output_path: str, args) -> dict:
    config = GrowCutConfig(workers=args.workers, max_iter=args.max_iter,
                           blur=not args.no_blur, progress=args.progress)

    if args.preview_seeds:
        preview = paint_seeds(load_rgba(image_path, convert=args.convert),
                              load_rgba(overlay_path, convert=args.convert))
        save_rgba(preview, args.preview_seeds)
        logging.info(f"seed preview written to {args.preview_seeds}")

    result = process_image_file(image_path, overlay_path, config,
                                convert=args.convert, show_effects=args.show_effects)
    save_rgba(PixelGrid(result.rgba), output_path)

    H, W = result.strength.shape
    return {
        "width": W,
        "height": H,
        "iterations": int(result.iterations),
        "converged": bool(result.converged),
        "foreground_fraction": round(result.foreground_fraction, 6),
        "runtime_ms": round(result.elapsed_ms, 2),
        "workers": int(args.workers),
        "method": METHOD_NAME,
    }


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="GrowCut seeded foreground extraction, RGBA PNG in and out")
    ap.add_argument("image", nargs="?", help="source RGBA image")
    ap.add_argument("overlay", nargs="?", help="RGBA seed overlay, same size as image")
    ap.add_argument("output", nargs="?", help="output image path")
    ap.add_argument("--workers", type=int, default=DEFAULT_WORKERS,
                    help="interior worker threads per sweep, one border thread is added")
    ap.add_argument("--max-iter", type=int, default=DEFAULT_MAX_ITER, help="iteration cap")
    ap.add_argument("--no-blur", action="store_true", help="skip the 3x3 smoothing before weights")
    ap.add_argument("--convert", action="store_true", help="convert non RGBA inputs instead of failing")
    ap.add_argument("--preview-seeds", type=str, default=None,
                    help="also write the image with the overlay strokes painted on it")
    ap.add_argument("--show-effects", action="store_true",
                    help="write the smoothed colours into the output RGB")
    ap.add_argument("--progress", action="store_true", help="show a progress bar over sweeps")
    ap.add_argument("--log-level", type=str, default="INFO",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    ap.add_argument("--run-tests", action="store_true")
    return ap


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(message)s")

    if args.run_tests:
        _run_tests()
        return 0

    if not (args.image and args.overlay and args.output):
        ap.error("image, overlay and output paths are required")
    if args.workers < 1:
        ap.error("--workers must be at least 1")
    if args.max_iter < 1:
        ap.error("--max-iter must be at least 1")

    try:
        summary = run_single_image(args.image, args.overlay, args.output, args)
    except (ImageFormatError, FileNotFoundError, ValueError, OSError) as e:
        logging.error(f"Error on {Path(args.image).stem}: {e}")
        return 1

    print(json.dumps(summary))
    return 0


# --------------------------- Minimal tests ---------------------------

def _synthetic_case(H: int = 48, W: int = 48):
    """Dark square on a light background, one stroke inside, one outside."""
    img = np.full((H, W, 4), 220, dtype=np.uint8)
    img[..., 3] = 255
    img[H // 4: 3 * H // 4, W // 4: 3 * W // 4, :3] = 30
    overlay = np.zeros((H, W, 4), dtype=np.uint8)
    overlay[H // 2 - 2: H // 2 + 2, W // 2 - 2: W // 2 + 2] = (0, 255, 0, 255)  # foreground
    overlay[2:4, 2:W - 2] = (255, 0, 0, 255)  # background
    return img, overlay


def _run_tests():
    logging.info("Running synthetic test")
    img, overlay = _synthetic_case()
    result = segment_image(img, overlay, GrowCutConfig(workers=2))
    alpha = result.rgba[..., 3]
    H, W = alpha.shape
    assert result.converged, "synthetic case must converge"
    assert alpha[H // 2, W // 2] == 255, "foreground seed must stay opaque"
    assert alpha[3, 3] == 0, "background seed must stay transparent"
    assert np.array_equal(result.rgba[..., :3], img[..., :3]), "RGB must be untouched"
    logging.info(f"OK, iterations {result.iterations}")
    print(json.dumps({"test": "ok", "iterations": int(result.iterations)}))


if __name__ == "__main__":
    sys.exit(main())
