"""
Built-in scenes, looked up by name.

- sample:  three spheres on a ground sphere (diffuse, hollow glass, gold)
- spheres: the classic random field of small spheres around three big ones
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import numpy as np

from .vec3 import Vec3, Point3
from .color import Color
from .camera import Camera
from .shapes import Sphere
from .materials import Material, Lambertian, Metal, Dielectric
from .objects import SceneObject


@dataclass
class Scene:
    """A camera plus the objects it looks at."""
    camera: Camera
    objects: List[SceneObject] = field(default_factory=list)

    def add(self, shape, material: Material) -> None:
        """Add a shape with its material."""
        self.objects.append(SceneObject(shape, material))

    def __len__(self) -> int:
        return len(self.objects)


def sample_scene(aspect_ratio: float, rng: np.random.Generator) -> Scene:
    """Small test scene. Does not draw from rng."""
    camera = Camera(
        look_from=Point3(0, 0, 0),
        look_at=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=90,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=1.0
    )
    scene = Scene(camera)
    scene.add(Sphere(Point3(0, -100.5, -1), 100), Lambertian(Color(0.8, 0.8, 0.0)))
    scene.add(Sphere(Point3(0, 0, -1), 0.5), Lambertian(Color(0.1, 0.2, 0.5)))
    # Hollow glass bubble: the inner sphere has a negative radius
    scene.add(Sphere(Point3(-1, 0, -1), 0.5), Dielectric(1.5))
    scene.add(Sphere(Point3(-1, 0, -1), -0.45), Dielectric(1.5))
    scene.add(Sphere(Point3(1, 0, -1), 0.5), Metal(Color(0.8, 0.6, 0.2), 0.0))
    return scene


def spheres_scene(aspect_ratio: float, rng: np.random.Generator) -> Scene:
    """Random spheres scene. The layout is a pure function of rng."""
    camera = Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0
    )
    scene = Scene(camera)

    # Ground
    scene.add(Sphere(Point3(0, -1000, 0), 1000), Lambertian(Color(0.5, 0.5, 0.5)))

    # Three large spheres
    scene.add(Sphere(Point3(0, 1, 0), 1.0), Dielectric(1.5))
    scene.add(Sphere(Point3(-4, 1, 0), 1.0), Lambertian(Color(0.4, 0.2, 0.1)))
    scene.add(Sphere(Point3(4, 1, 0), 1.0), Metal(Color(0.7, 0.6, 0.5), 0.0))

    clearance = Point3(4, 0.2, 0)
    for a in range(-11, 11):
        for b in range(-11, 11):
            x = a + 0.9 * rng.random()
            z = b + 0.9 * rng.random()
            center = Point3(x, 0.2, z)
            if (center - clearance).length() < 0.9:
                continue

            choose_mat = rng.random()
            if choose_mat < 0.8:
                material = Lambertian(Color.random(rng) * Color.random(rng))
            elif choose_mat < 0.95:
                albedo = Color.random_range(rng, 0.5, 1.0)
                material = Metal(albedo, rng.random() * 0.5)
            else:
                material = Dielectric(1.5)
            scene.add(Sphere(center, 0.2), material)

    return scene


SCENES: Dict[str, Callable[[float, np.random.Generator], Scene]] = {
    'sample': sample_scene,
    'spheres': spheres_scene,
}


def scene_by_name(name: str, aspect_ratio: float, rng: np.random.Generator) -> Optional[Scene]:
    """Build a registered scene.

    Returns:
        The scene, or None if no scene has that name
    """
    builder = SCENES.get(name)
    if builder is None:
        return None
    return builder(aspect_ratio, rng)
