"""
PathForge - A Python Path Tracer

An offline Monte-Carlo path tracer with:
- Spheres and nested object lists (exhaustive linear intersection)
- Lambertian, metal and dielectric materials
- Thin-lens camera with depth of field
- Multi-sampled antialiasing with gamma-2 tone mapping
- Multi-threaded, seed-reproducible rendering
- PPM/PNG output and YAML/JSON scene files
"""

__version__ = "0.1.0"
__author__ = "PathForge Team"

from .vec3 import Vec3, Point3, Colour, sum_vectors
from .ray import Ray
from .shapes import HitRecord, Hittable, Sphere, HittableList
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric
from .camera import Camera
from .scene import Scene, ray_colour, background, T_MIN
from .renderer import Renderer, RenderSettings
from .tonemapping import apply_gamma, tone_map, quantize, to_ldr
from .image_io import ImageWriteError, write_ppm, save_image
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
from .scenes import SCENES, build_scene
