"""
Scene description language parser.

Supports a YAML (or JSON) scene description format with:
- Camera configuration
- Render settings
- Materials library
- Sphere objects

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
  threads: 8
  seed: 283

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]

  glass:
    type: dielectric
    ior: 1.5

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
from pathlib import Path
from typing import Dict, Any, Tuple
import json

import yaml

from .vec3 import Vec3
from .color import Color
from .camera import Camera
from .shapes import Sphere
from .materials import Material, Lambertian, Metal, Dielectric, Emissive
from .renderer import RenderSettings
from .scenes import Scene


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.settings: RenderSettings = RenderSettings()

    def parse_file(self, filepath: str) -> Tuple[Scene, RenderSettings]:
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
                # YAML is a superset of JSON
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot parse {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, settings)
        """
        # Settings first: the camera's default aspect ratio comes from them
        if 'render' in data:
            self._parse_settings(self._mapping(data['render'], 'render'))

        camera = self._parse_camera(self._mapping(data.get('camera', {}), 'camera'))
        scene = Scene(camera)

        # Materials before objects (objects reference them)
        if 'materials' in data:
            self._parse_materials(self._mapping(data['materials'], 'materials'))

        if 'objects' in data:
            self._parse_objects(data['objects'], scene)

        return scene, self.settings

    @staticmethod
    def _mapping(data: Any, what: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise SceneParseError(f"{what} must be a mapping, got: {data!r}")
        return data

    @staticmethod
    def _parse_number(data: Dict[str, Any], key: str, default: Any, kind=float):
        """Read one numeric field, converting with kind (float or int)."""
        value = data.get(key, default)
        try:
            return kind(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid value for '{key}': {value!r}") from e

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

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from various formats."""
        try:
            if isinstance(data, (list, tuple)):
                if len(data) != 3:
                    raise SceneParseError(f"Color must have 3 components, got {len(data)}")
                return Color(float(data[0]), float(data[1]), float(data[2]))
            elif isinstance(data, dict):
                return Color(
                    float(data.get('r', 0)),
                    float(data.get('g', 0)),
                    float(data.get('b', 0))
                )
            elif isinstance(data, str):
                # Handle hex colors
                if data.startswith('#'):
                    hex_color = data[1:]
                    if len(hex_color) == 6:
                        r = int(hex_color[0:2], 16) / 255.0
                        g = int(hex_color[2:4], 16) / 255.0
                        b = int(hex_color[4:6], 16) / 255.0
                        return Color(r, g, b)
                raise SceneParseError(f"Cannot parse color from string: {data}")
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Color from: {data}") from e
        raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_material(self, mat_data: Any) -> Material:
        """Build one material from its description."""
        mat_data = self._mapping(mat_data, 'material')
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            return Lambertian(self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5])))
        elif mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            return Metal(albedo, self._parse_number(mat_data, 'fuzz', 0.0))
        elif mat_type == 'dielectric':
            return Dielectric(self._parse_number(mat_data, 'ior', 1.5))
        elif mat_type == 'emissive':
            color = self._parse_color(mat_data.get('color', [1, 1, 1]))
            return Emissive(color, self._parse_number(mat_data, 'intensity', 1.0))

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            raise SceneParseError("Object has no material")
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: Any, scene: Scene) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError(f"objects must be a list, got: {objects_data!r}")

        for obj_data in objects_data:
            obj_data = self._mapping(obj_data, 'object')
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            if obj_type != 'sphere':
                raise SceneParseError(f"Unknown object type: {obj_type}")

            material = self._get_material(obj_data.get('material'))
            center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
            radius = self._parse_number(obj_data, 'radius', 1.0)
            scene.add(Sphere(center, radius), material)

    def _parse_camera(self, camera_data: Dict[str, Any]) -> Camera:
        """Parse camera section."""
        look_from = self._parse_vec3(camera_data.get('look_from', [0, 0, 0]))
        look_at = self._parse_vec3(camera_data.get('look_at', [0, 0, -1]))
        vup = self._parse_vec3(camera_data.get('vup', [0, 1, 0]))
        vfov = self._parse_number(camera_data, 'vfov', 90)
        default_aspect = self.settings.width / self.settings.height
        aspect_ratio = self._parse_number(camera_data, 'aspect_ratio', default_aspect)
        aperture = self._parse_number(camera_data, 'aperture', 0.0)
        focus_dist = self._parse_number(camera_data, 'focus_dist', 1.0)

        try:
            return Camera(
                look_from=look_from,
                look_at=look_at,
                vup=vup,
                vfov=vfov,
                aspect_ratio=aspect_ratio,
                aperture=aperture,
                focus_dist=focus_dist
            )
        except ZeroDivisionError as e:
            # look_at equal to look_from, or vup parallel to the view direction
            raise SceneParseError(f"Degenerate camera: {e}") from e

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        self.settings = RenderSettings(
            width=self._parse_number(settings_data, 'width', 400, int),
            height=self._parse_number(settings_data, 'height', 225, int),
            samples_per_pixel=self._parse_number(settings_data, 'samples', 100, int),
            num_threads=self._parse_number(settings_data, 'threads', 0, int),
            seed=self._parse_number(settings_data, 'seed', 283, int)
        )
        try:
            self.settings.validate()
        except ValueError as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: str) -> Tuple[Scene, RenderSettings]:
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
