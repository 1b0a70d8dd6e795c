"""
Scene description parser.

Supports a YAML or JSON scene description with:
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
  width: 300
  height: 200
  samples: 10
  max_depth: 50
  seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]

  glass:
    type: dielectric
    ir: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground

  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material: glass
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

import yaml

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .renderer import RenderSettings

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

    def parse_file(self, filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so it covers unknown suffixes too
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        logger.debug("Loaded scene description from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        # Settings come before the camera, which may borrow their aspect ratio
        if 'render' in data:
            self._parse_settings(data['render'])
        else:
            self.settings = RenderSettings()

        self._parse_camera(data.get('camera', {}))

        logger.debug(
            "Parsed %d materials and %d objects",
            len(self.materials), len(self.objects)
        )
        return self.objects, self.camera, self.settings

    def _parse_float(self, value: Any, field: str) -> float:
        """Convert a scene value to float, reporting the field on failure."""
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid number for {field}: {value!r}") from e

    def _parse_int(self, value: Any, field: str) -> int:
        """Convert a scene value to int, reporting the field on failure."""
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid integer for {field}: {value!r}") from e

    def _require_mapping(self, data: Any, section: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise SceneParseError(f"{section} must be a mapping, got: {data!r}")
        return data

    def _parse_vec3(self, data: Any, field: str = 'vector') -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(*(self._parse_float(v, field) for v in data))
        elif isinstance(data, dict):
            return Vec3(
                self._parse_float(data.get('x', 0), field),
                self._parse_float(data.get('y', 0), field),
                self._parse_float(data.get('z', 0), field)
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any, field: str = 'color') -> Color:
        """Parse a Color from a list, an r/g/b mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(*(self._parse_float(v, field) for v in data))
        elif isinstance(data, dict):
            return Color(
                self._parse_float(data.get('r', 0), field),
                self._parse_float(data.get('g', 0), field),
                self._parse_float(data.get('b', 0), field)
            )
        elif isinstance(data, str):
            if data.startswith('#') and len(data) == 7:
                try:
                    r = int(data[1:3], 16) / 255.0
                    g = int(data[3:5], 16) / 255.0
                    b = int(data[5:7], 16) / 255.0
                except ValueError as e:
                    raise SceneParseError(f"Cannot parse color from string: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        """Build one material from its description."""
        mat_data = self._require_mapping(mat_data, "Material")
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            albedo = self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5]), 'albedo')
            return Lambertian(albedo)

        elif mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]), 'albedo')
            fuzz = self._parse_float(mat_data.get('fuzz', 0.0), 'fuzz')
            return Metal(albedo, fuzz)

        elif mat_type == 'dielectric':
            ir = self._parse_float(mat_data.get('ir', mat_data.get('ior', 1.5)), 'ir')
            return Dielectric(ir)

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        materials_data = self._require_mapping(materials_data, "materials section")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError(f"objects section must be a list, got: {objects_data!r}")

        for obj_data in objects_data:
            obj_data = self._require_mapping(obj_data, "Object")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            material = self._get_material(obj_data.get('material'))

            if obj_type == 'sphere':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]), 'center')
                radius = self._parse_float(obj_data.get('radius', 1.0), 'radius')
                self.objects.add(Sphere(center, radius, material))
            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        camera_data = self._require_mapping(camera_data, "camera section")
        look_from = self._parse_vec3(camera_data.get('look_from', [0, 0, 5]), 'look_from')
        look_at = self._parse_vec3(camera_data.get('look_at', [0, 0, 0]), 'look_at')
        vup = self._parse_vec3(camera_data.get('vup', [0, 1, 0]), 'vup')
        vfov = self._parse_float(camera_data.get('vfov', 60), 'vfov')
        aspect_ratio = self._parse_float(
            camera_data.get('aspect_ratio', self.settings.aspect_ratio), 'aspect_ratio'
        )
        aperture = self._parse_float(camera_data.get('aperture', 0.0), 'aperture')
        focus_dist = self._parse_float(camera_data.get('focus_dist', 1.0), 'focus_dist')

        self.camera = Camera(
            look_from=look_from,
            look_at=look_at,
            vup=vup,
            vfov=vfov,
            aspect_ratio=aspect_ratio,
            aperture=aperture,
            focus_dist=focus_dist
        )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        settings_data = self._require_mapping(settings_data, "render section")
        background = None
        if 'background' in settings_data:
            background = self._parse_color(settings_data['background'], 'background')

        seed = settings_data.get('seed')
        self.settings = RenderSettings(
            width=self._parse_int(settings_data.get('width', 400), 'width'),
            height=self._parse_int(settings_data.get('height', 225), 'height'),
            samples_per_pixel=self._parse_int(settings_data.get('samples', 100), 'samples'),
            max_depth=self._parse_int(settings_data.get('max_depth', 50), 'max_depth'),
            background_color=background,
            use_sky_gradient=bool(settings_data.get('sky_gradient', True)),
            gamma=self._parse_float(settings_data.get('gamma', 2.0), 'gamma'),
            seed=self._parse_int(seed, 'seed') if seed is not None else None
        )


def load_scene(filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary."""
    parser = SceneParser()
    return parser.parse_dict(data)
