"""
Scene description parser.

Supports a YAML (or JSON) scene description format with:
- Camera configuration
- Render settings
- Materials library
- Objects (spheres with materials)

Example scene file:
```yaml
camera:
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vfov: 20
  aperture: 0.1
  focus_dist: 10

render:
  width: 400
  height: 225
  samples: 100
  max_depth: 50
  seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]

  glass:
    type: dielectric
    refraction_index: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground

  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material: glass

  - type: sphere
    center: [4, 1, 0]
    radius: 1
    material: {type: metal, albedo: "#b39980", fuzz: 0.0}
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Tuple, Union

import yaml

from .vec3 import Vec3, Colour
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .renderer import RenderSettings
from .scene import Scene

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: Union[str, Path]) -> Tuple[Scene, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        logger.debug("Loaded scene description from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, settings)
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene description must be a mapping, got {type(data).__name__}")

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        # Settings come before the camera, which takes its aspect ratio from them
        self._parse_settings(self._section(data, 'render'))
        self._parse_camera(self._section(data, 'camera'))

        logger.info(
            "Parsed scene: %d objects, %d named materials",
            len(self.objects), len(self.materials)
        )
        return Scene(self.objects, self.camera), self.settings

    def _section(self, data: Dict[str, Any], key: str) -> Dict[str, Any]:
        """Get an optional mapping section; an empty (null) section counts as absent."""
        section = data.get(key)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise SceneParseError(f"'{key}' must be a mapping, got {type(section).__name__}")
        return section

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        try:
            if isinstance(data, (list, tuple)):
                if len(data) != 3:
                    raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
                return Vec3(float(data[0]), float(data[1]), float(data[2]))
            elif isinstance(data, dict):
                return Vec3(
                    float(data.get('x', 0)),
                    float(data.get('y', 0)),
                    float(data.get('z', 0))
                )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}") from e
        raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_colour(self, data: Any) -> Colour:
        """Parse a Colour from various formats."""
        try:
            if isinstance(data, (list, tuple)):
                if len(data) != 3:
                    raise SceneParseError(f"Colour must have 3 components, got {len(data)}")
                return Colour(float(data[0]), float(data[1]), float(data[2]))
            elif isinstance(data, dict):
                return Colour(
                    float(data.get('r', 0)),
                    float(data.get('g', 0)),
                    float(data.get('b', 0))
                )
            elif isinstance(data, str):
                # Handle hex colours
                if data.startswith('#') and len(data) == 7:
                    hex_colour = data[1:]
                    r = int(hex_colour[0:2], 16) / 255.0
                    g = int(hex_colour[2:4], 16) / 255.0
                    b = int(hex_colour[4:6], 16) / 255.0
                    return Colour(r, g, b)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Colour from: {data}") from e
        raise SceneParseError(f"Cannot parse Colour from: {data}")

    def _parse_float(self, data: Dict[str, Any], key: str, default: float) -> float:
        value = data.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"'{key}' must be a number, got {value!r}") from e

    def _parse_int(self, data: Dict[str, Any], key: str, default: Optional[int]) -> Optional[int]:
        value = data.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"'{key}' must be an integer, got {value!r}") from e

    def _build_material(self, mat_data: Dict[str, Any]) -> Material:
        """Build a single material from its description."""
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material must be a mapping, got: {mat_data}")

        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            albedo = self._parse_colour(mat_data.get('albedo', [0.5, 0.5, 0.5]))
            return Lambertian(albedo)

        elif mat_type == 'metal':
            albedo = self._parse_colour(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            fuzz = self._parse_float(mat_data, 'fuzz', 0.0)
            return Metal(albedo, fuzz)

        elif mat_type == 'dielectric':
            # 'ior' is accepted as a shorter alias
            default = mat_data.get('ior', 1.5)
            try:
                return Dielectric(self._parse_float(mat_data, 'refraction_index', default))
            except ValueError as e:
                raise SceneParseError(f"Invalid dielectric: {e}") from e

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        if not isinstance(materials_data, dict):
            raise SceneParseError("'materials' must be a mapping of names to materials")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._build_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._build_material(mat_ref)
        raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError("'objects' must be a list")
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object must be a mapping, got: {obj_data}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            material = self._get_material(obj_data.get('material'))

            if obj_type == 'sphere':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = self._parse_float(obj_data, 'radius', 1.0)
                try:
                    self.objects.add(Sphere(center, radius, material))
                except ValueError as e:
                    raise SceneParseError(f"Invalid sphere: {e}") from e
            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        look_from = self._parse_vec3(camera_data.get('look_from', [0, 0, 0]))
        look_at = self._parse_vec3(camera_data.get('look_at', [0, 0, -1]))
        vup = self._parse_vec3(camera_data.get('vup', [0, 1, 0]))

        try:
            self.camera = Camera(
                look_from=look_from,
                look_at=look_at,
                vup=vup,
                vfov=self._parse_float(camera_data, 'vfov', 90.0),
                aspect_ratio=self.settings.aspect_ratio,
                aperture=self._parse_float(camera_data, 'aperture', 0.0),
                focus_dist=self._parse_float(camera_data, 'focus_dist', 1.0)
            )
        except ValueError as e:
            raise SceneParseError(f"Invalid camera: {e}") from e

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        try:
            self.settings = RenderSettings(
                width=self._parse_int(settings_data, 'width', 400),
                height=self._parse_int(settings_data, 'height', 225),
                samples_per_pixel=self._parse_int(settings_data, 'samples', 100),
                max_depth=self._parse_int(settings_data, 'max_depth', 50),
                num_threads=self._parse_int(settings_data, 'threads', 0),
                seed=self._parse_int(settings_data, 'seed', None),
                gamma=self._parse_float(settings_data, 'gamma', 2.0)
            )
        except ValueError as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: Union[str, Path]) -> Tuple[Scene, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, RenderSettings]:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (scene, settings)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
