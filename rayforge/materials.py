"""
Materials system.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)
- Emissive (light source, terminates paths)

Materials hold only their own parameters and are shared read-only between
render threads; all randomness comes from the generator passed to `scatter`.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import numpy as np

from .vec3 import Vec3
from .color import Color, WHITE
from .ray import Ray
from .shapes import HitRecord


@dataclass(frozen=True)
class ScatterResult:
    """Result of a material scatter operation.

    When `reflected` is False the path ends here and `attenuation` is the
    color returned for it; `scattered_ray` is then None.
    """
    attenuation: Color
    scattered_ray: Optional[Ray]
    reflected: bool = True


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> ScatterResult:
        """Decide how light arriving along ray_in continues from the hit.

        Args:
            ray_in: The incoming ray
            hit: Intersection with the shape carrying this material
            rng: Random generator owned by the calling render thread

        Returns:
            ScatterResult with the attenuation and the next ray, or an
            absorbed result (reflected=False)
        """


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> ScatterResult:
        scatter_direction = hit.normal + Vec3.random_unit_vector(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            attenuation=self.albedo,
            scattered_ray=Ray(hit.point, scatter_direction),
        )

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Radius of the random perturbation (0 = mirror)
        """
        self.albedo = albedo
        self.fuzz = fuzz

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> ScatterResult:
        reflected = ray_in.direction.reflect(hit.normal)

        if self.fuzz > 0:
            reflected = reflected + Vec3.random_in_unit_sphere(rng) * self.fuzz

        # Fuzz may push the ray below the surface; it is traced regardless.
        return ScatterResult(
            attenuation=self.albedo,
            scattered_ray=Ray(hit.point, reflected),
        )

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction.

    The choice between refraction and reflection is deterministic: rays
    refract whenever Snell's law allows it and mirror-reflect on total
    internal reflection. There is no Fresnel-weighted mix.
    """

    def __init__(self, ior: float = 1.5):
        """Create a dielectric material.

        Args:
            ior: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        self.ior = ior

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> ScatterResult:
        # Entering when the ray opposes the normal, exiting otherwise
        if ray_in.direction.dot(hit.normal) < 0:
            refraction_ratio = 1.0 / self.ior
        else:
            refraction_ratio = self.ior

        unit_direction = ray_in.direction.normalize()
        direction = unit_direction.refract(hit.normal, refraction_ratio)
        if direction is None:
            direction = unit_direction.reflect(hit.normal)

        return ScatterResult(
            attenuation=WHITE,
            scattered_ray=Ray(hit.point, direction),
        )

    def __repr__(self) -> str:
        return f"Dielectric(ior={self.ior})"


class Emissive(Material):
    """Light-emitting material. Absorbs every ray and returns its emission."""

    def __init__(self, color: Color, intensity: float = 1.0):
        """Create an emissive material.

        Args:
            color: The emission color
            intensity: Emission intensity multiplier
        """
        self.color = color
        self.intensity = intensity

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> ScatterResult:
        return ScatterResult(
            attenuation=self.color * self.intensity,
            scattered_ray=None,
            reflected=False,
        )

    def __repr__(self) -> str:
        return f"Emissive(color={self.color}, intensity={self.intensity})"
