"""
Image writers for rendered pixels.

Pixels are 8-bit RGB arrays of shape (height, width, 3) with row 0 at the
top of the image. PPM is written directly; other formats go through Pillow.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import TextIO, Union

import numpy as np
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


class ImageWriteError(Exception):
    """Error while writing an image."""
    pass


def _check_pixels(pixels: np.ndarray) -> np.ndarray:
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ImageWriteError(f"Expected an (H, W, 3) pixel array, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ImageWriteError(f"Expected uint8 pixels, got {pixels.dtype}")
    return pixels


def write_ppm(pixels: np.ndarray, target: Union[str, Path, TextIO]) -> None:
    """Write pixels as a plain-text (P3) PPM image.

    Args:
        pixels: 8-bit RGB array (H, W, 3), top row first
        target: Output path or an open text stream
    """
    pixels = _check_pixels(pixels)
    height, width = pixels.shape[:2]

    if isinstance(target, (str, Path)):
        with open(target, 'w') as f:
            write_ppm(pixels, f)
        return

    target.write(f"P3\n{width} {height}\n255\n")
    for r, g, b in pixels.reshape(-1, 3):
        target.write(f"{r} {g} {b}\n")


def save_image(pixels: np.ndarray, filename: Union[str, Path]) -> Path:
    """Save pixels to a file, picking the format from the extension.

    Args:
        pixels: 8-bit RGB array (H, W, 3)
        filename: Output filename; parent directories are created

    Returns:
        The path written
    """
    pixels = _check_pixels(pixels)
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == '.ppm':
        write_ppm(pixels, path)
    else:
        try:
            PILImage.fromarray(pixels).save(path)
        except (KeyError, ValueError) as e:
            raise ImageWriteError(f"Unsupported image format: {path.suffix or path.name}") from e

    logger.info("Saved %dx%d image to %s", pixels.shape[1], pixels.shape[0], path)
    return path
