"""
Camera module for generating primary rays.

Supports:
- Perspective projection
- Depth of field (thin lens defocus blur)
- Configurable field of view
- Arbitrary positioning via look-at
"""

from __future__ import annotations
import math
import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A thin-lens perspective camera.

    The basis is computed once at construction; afterwards the camera is
    read-only and safe to share between render threads.
    """

    def __init__(
        self,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
        aperture: float = 0.0,
        focus_dist: float = 1.0
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
            aperture: Lens diameter for depth of field (0 = pinhole)
            focus_dist: Distance to the plane in perfect focus
        """
        theta = math.radians(vfov)
        viewport_height = 2.0 * math.tan(theta / 2)
        viewport_width = viewport_height * aspect_ratio

        # Camera basis: w forward, u right, v true up
        self.w = (look_at - look_from).normalize()
        self.u = self.w.cross(vup).normalize()
        self.v = self.u.cross(self.w)

        self.origin = look_from
        self.horizontal = self.u * (focus_dist * viewport_width)
        self.vertical = self.v * (focus_dist * viewport_height)
        self.lower_left_corner = (
            self.origin
            + self.w * focus_dist
            - self.horizontal / 2
            - self.vertical / 2
        )

        self.lens_radius = aperture / 2

    def get_ray(self, s: float, t: float, rng: np.random.Generator) -> Ray:
        """Generate a primary ray through the given image-plane coordinates.

        Args:
            s: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            t: Vertical coordinate [0, 1] (0 = bottom, 1 = top)
            rng: Random generator used for lens sampling

        Returns:
            A ray leaving a random lens point towards the focus plane
        """
        if self.lens_radius > 0:
            rd = Vec3.random_in_unit_disk(rng) * self.lens_radius
            origin = self.origin + self.u * rd.x + self.v * rd.y
        else:
            origin = self.origin

        direction = (
            self.lower_left_corner
            + self.horizontal * s
            + self.vertical * t
            - origin
        )
        return Ray(origin, direction)

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin}, looking_at={self.lower_left_corner + self.horizontal/2 + self.vertical/2})"
