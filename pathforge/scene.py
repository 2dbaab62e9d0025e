"""
Scene module - the recursive radiance estimator.

A Scene pairs the world (any Hittable, usually a HittableList) with a
Camera, and renders one jittered sample per pixel. Averaging several
sample passes is the job of the Renderer.
"""

from __future__ import annotations
import logging
from typing import Iterator, Tuple

import numpy as np

from .vec3 import Colour
from .ray import Ray
from .camera import Camera
from .shapes import Hittable

logger = logging.getLogger(__name__)

# Lower bound on hit distance; keeps scattered rays from re-hitting their origin
T_MIN = 0.001

BLACK = Colour(0.0, 0.0, 0.0)
WHITE = Colour(1.0, 1.0, 1.0)
SKY_BLUE = Colour(0.5, 0.7, 1.0)


def background(ray: Ray) -> Colour:
    """Sky gradient: white at the bottom blending to blue at the top."""
    unit_direction = ray.direction.unit()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_BLUE * t


def ray_colour(ray: Ray, world: Hittable, depth: int, rng: np.random.Generator) -> Colour:
    """Compute the colour carried back along a ray.

    Args:
        ray: The ray to trace
        world: The objects to trace against
        depth: Remaining bounce budget
        rng: Random source for this path

    Returns:
        Black once the budget is spent or the ray is absorbed, the
        background gradient on a miss, otherwise the attenuated colour of
        the scattered ray.
    """
    if depth <= 0:
        return BLACK

    hit_record = world.hit(ray, T_MIN, float('inf'))

    if hit_record is None:
        return background(ray)

    if hit_record.material is None:
        return BLACK

    scatter_result = hit_record.material.scatter(hit_record, ray, rng)
    if scatter_result is None:
        return BLACK

    return scatter_result.attenuation * ray_colour(
        scatter_result.scattered_ray, world, depth - 1, rng
    )


class Scene:
    """The world and the camera looking at it.

    The world must not be modified while a render is in progress.
    """

    def __init__(self, world: Hittable, camera: Camera):
        self.world = world
        self.camera = camera

    @staticmethod
    def pixels(image_width: int, image_height: int) -> Iterator[Tuple[int, int]]:
        """Yield (row, col) pairs in scan order: top row first, left to right."""
        for row in range(image_height):
            for col in range(image_width):
                yield row, col

    def render(
        self,
        max_depth: int,
        image_width: int,
        image_height: int,
        rng: np.random.Generator
    ) -> np.ndarray:
        """Render a single jittered sample for every pixel.

        Args:
            max_depth: Bounce budget per path
            image_width: Image width in pixels (at least 2)
            image_height: Image height in pixels (at least 2)
            rng: Random source for jitter, lens and scattering

        Returns:
            Linear colours as a (height, width, 3) float64 array, row 0 at
            the top of the image
        """
        if image_width < 2 or image_height < 2:
            raise ValueError(
                f"image must be at least 2x2 pixels, got {image_width}x{image_height}"
            )

        image = np.zeros((image_height, image_width, 3), dtype=np.float64)

        for row, col in self.pixels(image_width, image_height):
            j = image_height - 1 - row
            u = (col + rng.random()) / (image_width - 1)
            v = (j + rng.random()) / (image_height - 1)

            ray = self.camera.get_ray(u, v, rng)
            image[row, col] = ray_colour(ray, self.world, max_depth, rng).to_array()

        logger.debug("Rendered %dx%d sample pass", image_width, image_height)
        return image
