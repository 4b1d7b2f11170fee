#!/usr/bin/env python3
"""Generate sample face images.

Creates sample PNG files in images/ for trying out the prediction script.
The default input of predict_file.py is images/avatar64.png.

Usage:
    python scripts/generate_fixtures.py
    python scripts/generate_fixtures.py --output-dir /tmp/faces
"""

import argparse
import sys
from pathlib import Path

import numpy as np
from PIL import Image

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from faceio import DEFAULT_HEIGHT, DEFAULT_WIDTH


def generate_avatar(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> np.ndarray:
    """Generate a face-like grayscale avatar: oval head, eyes and a smile."""
    rows, cols = np.mgrid[0:height, 0:width]
    cy, cx = (height - 1) / 2, (width - 1) / 2

    pixels = np.full((height, width), 30, dtype=np.uint8)

    head = ((rows - cy) / (height * 0.45)) ** 2 + ((cols - cx) / (width * 0.38)) ** 2 <= 1
    pixels[head] = 180

    for eye_x in (cx - width * 0.15, cx + width * 0.15):
        eye = (rows - height * 0.38) ** 2 + (cols - eye_x) ** 2 <= (width * 0.05) ** 2
        pixels[eye] = 20

    mouth_radius = width * 0.2
    ring = np.abs(np.hypot(rows - height * 0.5, cols - cx) - mouth_radius) <= 1.2
    pixels[ring & (rows > height * 0.6)] = 60

    return pixels


def generate_gradient(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> np.ndarray:
    """Generate a left-to-right intensity ramp from 0 to 255."""
    ramp = np.linspace(0, 255, width).round().astype(np.uint8)
    return np.tile(ramp, (height, 1))


def generate_black(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> np.ndarray:
    """Generate an all-black image."""
    return np.zeros((height, width), dtype=np.uint8)


def main(argv: list[str] | None = None) -> list[Path]:
    """Generate sample images.

    Returns:
        Paths of the written files.
    """
    parser = argparse.ArgumentParser(description="Generate sample face images")
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=project_root / "images",
        help="Directory to write the images to (default: images/)",
    )
    args = parser.parse_args(argv)

    output_dir: Path = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"Generating sample images in {output_dir}")

    samples = {
        "avatar64.png": generate_avatar(),
        "gradient64.png": generate_gradient(),
        "black64.png": generate_black(),
    }

    written = []
    for filename, pixels in samples.items():
        path = output_dir / filename
        Image.fromarray(pixels).save(path, format="PNG")
        written.append(path)
        print(f"  Created: {path}")

    # Color image for checking that non-gray input is refused
    color_path = output_dir / "color64.png"
    Image.new("RGB", (DEFAULT_WIDTH, DEFAULT_HEIGHT), (200, 120, 40)).save(color_path, format="PNG")
    written.append(color_path)
    print(f"  Created: {color_path}")

    print("Done!")
    return written


if __name__ == "__main__":
    main()
