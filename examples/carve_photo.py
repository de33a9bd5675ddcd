#!/usr/bin/env python3
"""Example: narrow a synthetic landscape while keeping its objects intact."""

import sys
from pathlib import Path

import numpy as np
from PIL import Image

# Add library to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from width_carve import Raster, SeamCarver, WidthResizer


def create_sample_image(path: str = "sample.png") -> str:
    """Create a sample image with distinct regions for testing."""
    print("Creating sample image...")

    img = np.zeros((240, 400, 3), dtype=np.uint8)

    # Sky and grass
    img[:120, :] = [135, 206, 235]
    img[120:, :] = [34, 139, 34]

    # Sun
    y, x = np.ogrid[:240, :400]
    img[(x - 320) ** 2 + (y - 60) ** 2 <= 30**2] = [255, 215, 0]

    # Tree trunk and leaves
    img[150:220, 90:105] = [101, 67, 33]
    img[90:160, 60:135] = [0, 128, 0]

    # House
    img[140:210, 210:290] = [255, 255, 255]

    Image.fromarray(img).save(path)
    print(f"Sample image saved to: {path}")
    return path


def main():
    path = create_sample_image()

    print("\nCarving 400px -> 300px")
    print("=" * 50)
    result = WidthResizer().run(path, 300, output_path="sample_carved.png")
    print(f"  Original: {result.original_size}")
    print(f"  Final:    {result.final_size}")
    print(f"  Saved:    {result.output_path}")

    print("\nSeams that would be removed first")
    print("=" * 50)
    raster = Raster.from_image(Image.open(path))
    vis = SeamCarver().visualize_seams(raster, n_seams=20)
    Image.fromarray(vis).save("sample_seams.png")
    print("  Saved:    sample_seams.png")


if __name__ == "__main__":
    main()
