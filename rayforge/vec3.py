"""
Vector3 class for 3D math operations.

This is the geometry kernel of the ray tracer, used for:
- Points in 3D space
- Direction vectors
- Surface normals

Vectors are immutable: every operation returns a new value, so they can be
shared freely between render threads.
"""

from __future__ import annotations
import math
from typing import Optional
import numpy as np


class Vec3:
    """An immutable 3D vector.

    Uses numpy internally for efficient computation while providing
    a clean, Pythonic API.
    """

    __slots__ = ('_data',)

    # Let numpy scalars on the left defer to __rmul__
    __array_ufunc__ = None

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)
        self._data.flags.writeable = False

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create Vec3 from numpy array (copied)."""
        v = cls.__new__(cls)
        v._data = np.array(arr, dtype=np.float64)
        v._data.flags.writeable = False
        return v

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> Vec3:
        # arr must be a fresh float64 array nobody else holds
        v = cls.__new__(cls)
        arr.flags.writeable = False
        v._data = arr
        return v

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return np.allclose(self._data, other._data)

    def __hash__(self) -> int:
        return hash(tuple(round(float(c), 6) for c in self._data))

    def __neg__(self) -> Vec3:
        return Vec3._wrap(-self._data)

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3._wrap(self._data + other._data)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3._wrap(self._data - other._data)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3._wrap(self._data * scalar)

    def __rmul__(self, scalar: float) -> Vec3:
        return Vec3._wrap(scalar * self._data)

    def __truediv__(self, scalar: float) -> Vec3:
        return Vec3._wrap(self._data / scalar)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        Raises:
            ZeroDivisionError: If the vector has zero length
        """
        length = self.length()
        if length == 0:
            raise ZeroDivisionError("cannot normalize a zero-length vector")
        return Vec3._wrap(self._data / length)

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return Vec3._wrap(np.cross(self._data, other._data))

    def reflect(self, normal: Vec3) -> Vec3:
        """Mirror this vector about the given normal.

        The normal must be unit length; its orientation does not matter.
        """
        return self - normal * (2 * self.dot(normal))

    def refract(self, normal: Vec3, eta_ratio: float) -> Optional[Vec3]:
        """Refract this unit vector through a surface using Snell's law.

        The normal is flipped to face against this vector if needed, so
        either orientation may be passed in.

        Args:
            normal: Unit surface normal
            eta_ratio: Ratio of refractive indices (n1/n2)

        Returns:
            Refracted direction, or None on total internal reflection
        """
        if self.dot(normal) > 0:
            normal = -normal
        cos_theta = min(-self.dot(normal), 1.0)
        sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)
        if eta_ratio * sin_theta > 1.0:
            return None

        r_out_perp = (self + normal * cos_theta) * eta_ratio
        r_out_parallel = normal * (-math.sqrt(abs(1.0 - r_out_perp.length_squared())))
        return r_out_perp + r_out_parallel

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    @staticmethod
    def random_in_unit_sphere(rng: np.random.Generator) -> Vec3:
        """Generate a random point inside the unit sphere (rejection sampling)."""
        while True:
            p = rng.uniform(-1.0, 1.0, 3)
            if 0.0 < np.dot(p, p) <= 1.0:
                return Vec3._wrap(p)

    @staticmethod
    def random_unit_vector(rng: np.random.Generator) -> Vec3:
        """Generate a random unit vector (uniform on sphere surface)."""
        return Vec3.random_in_unit_sphere(rng).normalize()

    @staticmethod
    def random_in_unit_disk(rng: np.random.Generator) -> Vec3:
        """Generate a random point inside the unit disk (z=0)."""
        while True:
            x, y = rng.uniform(-1.0, 1.0, 2)
            if x * x + y * y <= 1.0:
                return Vec3(x, y, 0.0)


# Convenience type alias
Point3 = Vec3
