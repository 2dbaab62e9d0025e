"""
Renderer module - the sampling driver.

Implements:
- Multi-sampled antialiasing by summing independent jittered sample passes
- Multi-threaded rendering with one task per sample pass
- Reproducible output from a single seed
"""

from __future__ import annotations
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .scene import Scene
from .tonemapping import tone_map, to_ldr

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_threads: int = 0  # 0 = auto-detect
    seed: Optional[int] = None
    gamma: float = 2.0

    def __post_init__(self):
        if self.width < 2 or self.height < 2:
            raise ValueError(f"image must be at least 2x2 pixels, got {self.width}x{self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if not self.gamma > 0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class Renderer:
    """Path tracing renderer with multi-threading support.

    Every sample pass gets its own random generator spawned from the
    settings seed, and passes are summed in pass order. The result for a
    given seed is therefore the same for any number of threads.
    """

    def __init__(self, settings: Optional[RenderSettings] = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def _spawn_generators(self) -> list[np.random.Generator]:
        seed_sequence = np.random.SeedSequence(self.settings.seed)
        return [np.random.default_rng(child) for child in seed_sequence.spawn(self.settings.samples_per_pixel)]

    def render(self, scene: Scene) -> np.ndarray:
        """Render the scene and return the sum of all sample passes.

        Args:
            scene: The scene to render

        Returns:
            Summed linear colours as a (height, width, 3) float64 array
        """
        settings = self.settings
        samples = settings.samples_per_pixel
        generators = self._spawn_generators()

        logger.info(
            "Rendering %dx%d, %d samples, depth %d, %d threads",
            settings.width, settings.height, samples, settings.max_depth, settings.num_threads
        )
        start_time = time.perf_counter()

        def render_pass(rng: np.random.Generator) -> np.ndarray:
            return scene.render(settings.max_depth, settings.width, settings.height, rng)

        accumulated = np.zeros((settings.height, settings.width, 3), dtype=np.float64)

        if settings.num_threads > 1 and samples > 1:
            with ThreadPoolExecutor(max_workers=settings.num_threads) as executor:
                # map yields in submission order, which fixes the summation order
                for completed, sample_image in enumerate(executor.map(render_pass, generators), 1):
                    accumulated += sample_image
                    self._report_progress(completed, samples)
        else:
            for completed, rng in enumerate(generators, 1):
                accumulated += render_pass(rng)
                self._report_progress(completed, samples)

        logger.info("Render finished in %.2f seconds", time.perf_counter() - start_time)
        return accumulated

    def _report_progress(self, completed: int, total: int) -> None:
        logger.debug("Sample pass %d/%d done", completed, total)
        if self._progress_callback:
            self._progress_callback(completed / total)

    def render_average(self, scene: Scene) -> np.ndarray:
        """Render the scene and return the mean linear colour per pixel."""
        return self.render(scene) / self.settings.samples_per_pixel

    def render_image(self, scene: Scene) -> np.ndarray:
        """Render the scene to an 8-bit RGB array (H, W, 3), top row first."""
        return to_ldr(self.render(scene), self.settings.samples_per_pixel, self.settings.gamma)

    def tone_map(self, accumulated: np.ndarray) -> np.ndarray:
        """Tone map a summed render from this renderer to floats in [0, 0.999]."""
        return tone_map(accumulated, self.settings.samples_per_pixel, self.settings.gamma)
