"""
Built-in demo scenes.

Every builder takes the image aspect ratio and a random generator (only
the random scene uses it) and returns a ready-to-render Scene.
"""

from __future__ import annotations
import logging
from typing import Callable, Dict

import numpy as np

from .vec3 import Vec3, Point3, Colour
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .scene import Scene

logger = logging.getLogger(__name__)

SceneBuilder = Callable[[float, np.random.Generator], Scene]


def create_spheres_scene(aspect_ratio: float, rng: np.random.Generator) -> Scene:
    """A diffuse sphere resting on a large ground sphere, seen head on."""
    world = HittableList()
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Colour(0.8, 0.8, 0.0))))
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Colour(0.1, 0.2, 0.5))))

    camera = Camera(
        look_from=Point3(0, 0, 0),
        look_at=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=90,
        aspect_ratio=aspect_ratio
    )
    return Scene(world, camera)


def create_materials_scene(aspect_ratio: float, rng: np.random.Generator) -> Scene:
    """One sphere of each material, including a hollow glass bubble."""
    world = HittableList()

    ground = Lambertian(Colour(0.8, 0.8, 0.0))
    center = Lambertian(Colour(0.1, 0.2, 0.5))
    glass = Dielectric(1.5)
    gold = Metal(Colour(0.8, 0.6, 0.2), 0.1)

    world.add(Sphere(Point3(0, -100.5, -1), 100, ground))
    world.add(Sphere(Point3(0, 0, -1), 0.5, center))
    # Negative inner radius flips the normals and hollows out the glass
    world.add(Sphere(Point3(-1, 0, -1), 0.5, glass))
    world.add(Sphere(Point3(-1, 0, -1), -0.45, glass))
    world.add(Sphere(Point3(1, 0, -1), 0.5, gold))

    look_from = Point3(-2, 2, 1)
    look_at = Point3(0, 0, -1)
    camera = Camera(
        look_from=look_from,
        look_at=look_at,
        vup=Vec3(0, 1, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        aperture=0.0,
        focus_dist=(look_from - look_at).length()
    )
    return Scene(world, camera)


def create_random_scene(aspect_ratio: float, rng: np.random.Generator) -> Scene:
    """Three large spheres surrounded by a grid of small random ones."""
    world = HittableList()
    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Colour(0.5, 0.5, 0.5))))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            # Keep clear of the large metal sphere
            if (center - Point3(4, 0.2, 0)).length() <= 0.9:
                continue

            material: Material
            if choose_mat < 0.8:
                material = Lambertian(Colour.random(rng) * Colour.random(rng))
            elif choose_mat < 0.95:
                material = Metal(Colour.random_from_range(rng, 0.5, 1), rng.uniform(0, 0.5))
            else:
                material = Dielectric(1.5)
            world.add(Sphere(center, 0.2, material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Colour(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Colour(0.7, 0.6, 0.5), 0.0)))

    logger.debug("Random scene has %d spheres", len(world))

    camera = Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0
    )
    return Scene(world, camera)


SCENES: Dict[str, SceneBuilder] = {
    'spheres': create_spheres_scene,
    'materials': create_materials_scene,
    'random': create_random_scene,
}


def build_scene(name: str, aspect_ratio: float, rng: np.random.Generator) -> Scene:
    """Build a built-in scene by name."""
    try:
        builder = SCENES[name]
    except KeyError:
        raise ValueError(f"Unknown scene: {name} (choose from {', '.join(SCENES)})") from None
    return builder(aspect_ratio, rng)
