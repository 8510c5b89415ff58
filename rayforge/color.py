"""
Linear RGB color model.

Colors are kept in linear light space for the whole of a render. Values are
nominally in [0, 1] but are never clamped while light is being transported;
conversion to display values happens once, when a pixel is written.
"""

from __future__ import annotations
import math
from typing import Tuple
import numpy as np

# Maps 1.0 to 255 without overflowing to 256
ENCODE_SCALE = 255.999


def gamma_encode(value: float) -> float:
    """Apply gamma-2 encoding to a single linear channel."""
    return math.sqrt(max(value, 0.0))


def gamma_decode(value: float) -> float:
    """Inverse of gamma_encode."""
    return value * value


class Color:
    """An immutable linear RGB color."""

    __slots__ = ('r', 'g', 'b')

    __array_ufunc__ = None

    def __init__(self, r: float = 0.0, g: float = 0.0, b: float = 0.0):
        object.__setattr__(self, 'r', float(r))
        object.__setattr__(self, 'g', float(g))
        object.__setattr__(self, 'b', float(b))

    def __setattr__(self, name, value):
        raise AttributeError("Color is immutable")

    def __repr__(self) -> str:
        return f"Color({self.r:.4f}, {self.g:.4f}, {self.b:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return (
            math.isclose(self.r, other.r, abs_tol=1e-9)
            and math.isclose(self.g, other.g, abs_tol=1e-9)
            and math.isclose(self.b, other.b, abs_tol=1e-9)
        )

    def __hash__(self) -> int:
        # Rounded so colors equal within the tolerance hash alike
        return hash((round(self.r, 6), round(self.g, 6), round(self.b, 6)))

    def __iter__(self):
        return iter((self.r, self.g, self.b))

    def __add__(self, other: Color) -> Color:
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __sub__(self, other: Color) -> Color:
        return Color(self.r - other.r, self.g - other.g, self.b - other.b)

    def __mul__(self, other) -> Color:
        if isinstance(other, Color):
            return self.attenuate(other)
        return Color(self.r * other, self.g * other, self.b * other)

    def __rmul__(self, scalar: float) -> Color:
        return self * scalar

    def __truediv__(self, scalar: float) -> Color:
        return self * (1.0 / scalar)

    def attenuate(self, other: Color) -> Color:
        """Element-wise (Hadamard) product."""
        return Color(self.r * other.r, self.g * other.g, self.b * other.b)

    def gamma_encode(self) -> Color:
        return Color(gamma_encode(self.r), gamma_encode(self.g), gamma_encode(self.b))

    def gamma_decode(self) -> Color:
        return Color(gamma_decode(self.r), gamma_decode(self.g), gamma_decode(self.b))

    def encode(self) -> Tuple[int, int, int, int]:
        """Convert an already gamma-encoded color to opaque 8-bit RGBA.

        Channels are clamped to [0, 1] so out-of-range light saturates
        instead of wrapping.
        """
        return (
            _to_byte(self.r),
            _to_byte(self.g),
            _to_byte(self.b),
            255,
        )

    def to_array(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b], dtype=np.float64)

    @staticmethod
    def random(rng: np.random.Generator) -> Color:
        """Random color with each channel uniform in [0, 1)."""
        return Color(rng.random(), rng.random(), rng.random())

    @staticmethod
    def random_range(rng: np.random.Generator, min_val: float, max_val: float) -> Color:
        """Random color with each channel uniform in [min_val, max_val)."""
        base = Color(min_val, min_val, min_val)
        return base + Color.random(rng) * (max_val - min_val)


def _to_byte(value: float) -> int:
    return int(min(max(value, 0.0), 1.0) * ENCODE_SCALE)


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
