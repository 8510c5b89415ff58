"""
Geometric shapes for the ray tracer.

Each shape implements the Shape interface with a `hit` method that returns
the nearest intersection inside a parametric range.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import math

from .vec3 import Vec3, Point3
from .ray import Ray


@dataclass(frozen=True)
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The unit surface normal as produced by the shape. It is NOT
            flipped to face the incoming ray.
        t: The ray parameter at intersection
    """
    point: Point3
    normal: Vec3
    t: float


class Shape(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this shape.

        Args:
            ray: The ray to test
            t_min: Minimum t value to consider (avoid self-intersection)
            t_max: Maximum t value to consider

        Returns:
            HitRecord for the closest intersection in [t_min, t_max],
            None otherwise
        """


class Sphere(Shape):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere. A negative radius flips the normal
                inward, which is how hollow shells (glass bubbles) are built.
        """
        self.center = center
        self.radius = radius

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
        which is the quadratic at² + bt + c = 0.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Find the nearest root in the acceptable range
        root = (-half_b - sqrtd) / a
        if root < t_min or root > t_max:
            root = (-half_b + sqrtd) / a
            if root < t_min or root > t_max:
                return None

        point = ray.at(root)
        return HitRecord(
            point=point,
            normal=(point - self.center) / self.radius,
            t=root,
        )

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"
