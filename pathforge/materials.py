"""
Materials system.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)

A material either scatters an incoming ray, producing an outgoing ray and
an attenuation colour, or absorbs it.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Colour
from .ray import Ray

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Colour


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, hit_record: HitRecord, ray_in: Ray, rng: np.random.Generator) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            hit_record: The intersection being shaded
            ray_in: The incoming ray
            rng: Random source for this path

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Colour):
        """Create a Lambertian material.

        Args:
            albedo: The base colour (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, hit_record: HitRecord, ray_in: Ray, rng: np.random.Generator) -> Optional[ScatterResult]:
        scatter_direction = hit_record.normal + Vec3.random_unit_vector(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit_record.normal

        return ScatterResult(
            scattered_ray=Ray(hit_record.point, scatter_direction),
            attenuation=self.albedo
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Colour, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection colour
            fuzz: Radius of the reflection perturbation, clamped to [0, 1]
                (0 = mirror, 1 = very rough)
        """
        self.albedo = albedo
        self.fuzz = max(0.0, min(fuzz, 1.0))

    def scatter(self, hit_record: HitRecord, ray_in: Ray, rng: np.random.Generator) -> Optional[ScatterResult]:
        reflected = ray_in.direction.unit().reflect(hit_record.normal)
        if self.fuzz > 0:
            reflected = reflected + Vec3.random_in_unit_sphere(rng) * self.fuzz

        # Only scatter if reflection leaves the surface
        if reflected.dot(hit_record.normal) > 0:
            return ScatterResult(
                scattered_ray=Ray(hit_record.point, reflected),
                attenuation=self.albedo
            )
        return None

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, refraction_index: float = 1.5):
        """Create a dielectric material.

        Args:
            refraction_index: Index of refraction relative to air
                (1.0 = air, 1.5 = glass, 2.4 = diamond)

        Raises:
            ValueError: If the index is not positive
        """
        if not refraction_index > 0:
            raise ValueError(f"refraction_index must be positive, got {refraction_index}")
        self.refraction_index = refraction_index

    def scatter(self, hit_record: HitRecord, ray_in: Ray, rng: np.random.Generator) -> Optional[ScatterResult]:
        # Entering the material goes from air to material, exiting the reverse
        refraction_ratio = 1.0 / self.refraction_index if hit_record.front_face else self.refraction_index

        unit_direction = ray_in.direction.unit()
        cos_theta = min(-unit_direction.dot(hit_record.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = refraction_ratio * sin_theta > 1.0

        if cannot_refract or self.reflectance(cos_theta, refraction_ratio) > rng.random():
            direction = unit_direction.reflect(hit_record.normal)
        else:
            direction = unit_direction.refract(hit_record.normal, refraction_ratio)

        return ScatterResult(
            scattered_ray=Ray(hit_record.point, direction),
            attenuation=Colour(1.0, 1.0, 1.0)
        )

    @staticmethod
    def reflectance(cosine: float, ref_idx: float) -> float:
        """Schlick's approximation for reflectance."""
        r0 = (1 - ref_idx) / (1 + ref_idx)
        r0 = r0 * r0
        return r0 + (1 - r0) * pow(1 - cosine, 5)

    def __repr__(self) -> str:
        return f"Dielectric(refraction_index={self.refraction_index})"
