"""
RayForge - A Python Path Tracing Renderer

Renders spheres of diffuse, metal and glass materials with:
- Recursive Monte Carlo path tracing
- Thin-lens depth of field
- Multi-threaded, reproducible row-based rendering
- YAML/JSON scene descriptions
"""

__version__ = "0.1.0"
__author__ = "RayForge Team"

from .vec3 import Vec3, Point3
from .color import Color, gamma_encode, gamma_decode
from .ray import Ray
from .shapes import Shape, Sphere, HitRecord
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, Emissive
from .objects import SceneObject, hit_objects
from .camera import Camera
from .renderer import (
    Renderer, RenderSettings, render, trace_ray, sky_color,
    REFLECTION_LIMIT
)
from .scenes import Scene, scene_by_name, SCENES
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
