"""
Tone mapping for converting accumulated radiance to displayable pixels.

The pipeline is: average the summed samples, gamma correct, clamp to
[0, 0.999], then quantize to 8 bits by multiplying by 256 and truncating.
"""

from __future__ import annotations

import numpy as np

# Quantization scale; with the 0.999 clamp this maps [0, 1) onto 0..255
QUANTIZE_SCALE = 256.0
CLAMP_MAX = 0.999


def apply_gamma(image: np.ndarray, gamma: float = 2.0) -> np.ndarray:
    """Apply gamma correction to a linear image.

    Negative values are treated as black. A gamma of 2 is a square root.

    Args:
        image: Linear image (H, W, 3)
        gamma: Gamma value

    Returns:
        Gamma-corrected image
    """
    return np.power(np.clip(image, 0.0, None), 1.0 / gamma)


def tone_map(accumulated: np.ndarray, samples_per_pixel: int, gamma: float = 2.0) -> np.ndarray:
    """Average, gamma correct and clamp summed sample colours.

    Args:
        accumulated: Sum of all sample passes (H, W, 3)
        samples_per_pixel: Number of passes that went into the sum
        gamma: Gamma value

    Returns:
        Float image with every channel in [0, 0.999]
    """
    if samples_per_pixel < 1:
        raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
    scaled = accumulated * (1.0 / samples_per_pixel)
    return np.clip(apply_gamma(scaled, gamma), 0.0, CLAMP_MAX)


def quantize(tone_mapped: np.ndarray) -> np.ndarray:
    """Convert a tone-mapped image in [0, 0.999] to 8-bit integers."""
    return np.floor(tone_mapped * QUANTIZE_SCALE).astype(np.uint8)


def to_ldr(accumulated: np.ndarray, samples_per_pixel: int, gamma: float = 2.0) -> np.ndarray:
    """Convert summed samples to an 8-bit RGB image (H, W, 3)."""
    return quantize(tone_map(accumulated, samples_per_pixel, gamma))
