#!/usr/bin/env python3
"""
Example script demonstrating the usage of GrowCut foreground extraction.
"""

import argparse
import numpy as np
import matplotlib.pyplot as plt
from PIL import Image
from growcut import GrowCutConfig, segment_image

def create_overlay(image_shape, margin=6, stroke=4):
    """Red frame near the border for background, green blob in the centre for foreground."""
    height, width = image_shape[:2]
    overlay = np.zeros((height, width, 4), dtype=np.uint8)

    red = (255, 0, 0, 255)
    overlay[margin:margin + stroke, margin:-margin] = red  # Top
    overlay[-margin - stroke:-margin, margin:-margin] = red  # Bottom
    overlay[margin:-margin, margin:margin + stroke] = red  # Left
    overlay[margin:-margin, -margin - stroke:-margin] = red  # Right

    center_y, center_x = height // 2, width // 2
    overlay[center_y - stroke:center_y + stroke,
            center_x - stroke:center_x + stroke] = (0, 255, 0, 255)
    return overlay

def load_image(image_path):
    """Load an image as RGBA uint8."""
    img = Image.open(image_path).convert("RGBA")
    return np.array(img, dtype=np.uint8)

def visualize_results(image, overlay, result):
    """Visualize the input image, seeds, and extracted foreground."""
    fig, axes = plt.subplots(1, 3, figsize=(15, 5))

    axes[0].imshow(image)
    axes[0].set_title('Original Image')
    axes[0].axis('off')

    axes[1].imshow(image)
    axes[1].imshow(overlay)
    axes[1].set_title('Seeds\n(Red=Background, Green=Foreground)')
    axes[1].axis('off')

    checker = (np.indices(image.shape[:2]).sum(axis=0) // 8) % 2
    axes[2].imshow(checker, cmap='gray', vmin=-1, vmax=2)
    axes[2].imshow(result.rgba)
    axes[2].set_title(f'Foreground ({result.iterations} sweeps)')
    axes[2].axis('off')

    plt.tight_layout()
    plt.show()

def main():
    parser = argparse.ArgumentParser(description='Test GrowCut extraction on an image')
    parser.add_argument('image_path', help='Path to the input image')
    parser.add_argument('--margin', type=int, default=6,
                       help='Distance of the background frame from the border (default: 6)')
    parser.add_argument('--stroke', type=int, default=4,
                       help='Stroke width of the seeds (default: 4)')
    parser.add_argument('--workers', type=int, default=4)
    args = parser.parse_args()

    print("Loading image...")
    image = load_image(args.image_path)

    print("Creating overlay...")
    overlay = create_overlay(image.shape, margin=args.margin, stroke=args.stroke)

    print("Running GrowCut...")
    result = segment_image(image, overlay, GrowCutConfig(workers=args.workers, progress=True))

    # Seeds nobody outbid keep their label
    fg_seeds = overlay[..., 1] == 255
    print(f"Foreground seeds kept: {np.mean(result.rgba[fg_seeds, 3] == 255) * 100:.1f}%")

    print("\nSegmentation Statistics:")
    print(f"Image shape: {image.shape}")
    print(f"Sweeps: {result.iterations} (converged: {result.converged})")
    print(f"Foreground: {result.foreground_fraction * 100:.1f}% of pixels")

    print("\nDisplaying visualization...")
    visualize_results(image, overlay, result)

if __name__ == "__main__":
    main()
