"""Tests for material system."""

import pytest
import math
import numpy as np

from rayforge.vec3 import Vec3, Point3
from rayforge.color import Color, WHITE
from rayforge.ray import Ray
from rayforge.shapes import HitRecord
from rayforge.materials import Lambertian, Metal, Dielectric, Emissive


@pytest.fixture
def rng():
    return np.random.default_rng(283)


def floor_hit(point=Point3(0, 0, 0)):
    return HitRecord(point=point, normal=Vec3(0, 1, 0), t=1.0)


class TestLambertian:
    """Test Lambertian diffuse material."""

    def test_always_reflects(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        for _ in range(100):
            result = mat.scatter(ray_in, floor_hit(), rng)
            assert result.reflected is True
            assert result.scattered_ray is not None

    def test_attenuation_matches_albedo(self, rng):
        albedo = Color(0.8, 0.2, 0.3)
        mat = Lambertian(albedo)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), floor_hit(), rng)
        assert result.attenuation == albedo

    def test_direction_is_normal_plus_unit_vector(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        normal = Vec3(0, 1, 0)
        for _ in range(100):
            result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), floor_hit(), rng)
            offset = result.scattered_ray.direction - normal
            assert offset.length() == pytest.approx(1.0)
            assert result.scattered_ray.direction.dot(normal) >= 0

    def test_starts_at_hit_point(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        hit = floor_hit(Point3(1, 2, 3))
        result = mat.scatter(Ray(Point3(1, 5, 3), Vec3(0, -1, 0)), hit, rng)
        assert result.scattered_ray.origin == Point3(1, 2, 3)


class TestMetal:
    """Test Metal material."""

    def test_perfect_reflection(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=0.0)
        ray_in = Ray(Point3(-1, 1, 0), Vec3(1, -1, 0))
        result = mat.scatter(ray_in, floor_hit(), rng)

        assert result.reflected is True
        assert result.scattered_ray.direction == Vec3(1, 1, 0)

    def test_attenuation_matches_albedo(self, rng):
        albedo = Color(0.7, 0.6, 0.5)
        mat = Metal(albedo, fuzz=0.3)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), floor_hit(), rng)
        assert result.attenuation == albedo

    def test_fuzz_bounds_perturbation(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=0.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        mirror = Vec3(0, 1, 0)

        directions = []
        for _ in range(100):
            result = mat.scatter(ray_in, floor_hit(), rng)
            offset = result.scattered_ray.direction - mirror
            assert offset.length() <= 0.5 + 1e-12
            directions.append(result.scattered_ray.direction)

        assert any(d != directions[0] for d in directions[1:])

    def test_below_surface_still_reflected(self, rng):
        """Grazing rays with heavy fuzz may point into the surface; they are kept."""
        mat = Metal(Color(1, 1, 1), fuzz=1.0)
        ray_in = Ray(Point3(-1, 0.1, 0), Vec3(1, -0.1, 0))

        below = 0
        for _ in range(200):
            result = mat.scatter(ray_in, floor_hit(), rng)
            assert result.reflected is True
            if result.scattered_ray.direction.dot(Vec3(0, 1, 0)) < 0:
                below += 1
        assert below > 0

    def test_fuzz_above_one_is_kept(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=2.0)
        assert mat.fuzz == 2.0

        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        mirror = Vec3(0, 1, 0)
        offsets = []
        for _ in range(200):
            result = mat.scatter(ray_in, floor_hit(), rng)
            offsets.append((result.scattered_ray.direction - mirror).length())

        assert max(offsets) <= 2.0 + 1e-12
        # Some perturbations reach past the unit radius
        assert max(offsets) > 1.0


class TestDielectric:
    """Test Dielectric (glass) material."""

    def test_always_reflects_with_white_attenuation(self, rng):
        mat = Dielectric(1.5)
        for direction in (Vec3(0, -1, 0), Vec3(1, -1, 0), Vec3(1, 0.2, 0), Vec3(0, 1, 0)):
            result = mat.scatter(Ray(Point3(0, 0, 0), direction), floor_hit(), rng)
            assert result.reflected is True
            assert tuple(result.attenuation) == (1.0, 1.0, 1.0)
            assert result.attenuation == WHITE

    def test_normal_incidence_passes_straight(self, rng):
        mat = Dielectric(1.5)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), floor_hit(), rng)
        assert result.scattered_ray.direction == Vec3(0, -1, 0)

    def test_entering_bends_towards_normal(self, rng):
        mat = Dielectric(1.5)
        result = mat.scatter(Ray(Point3(-1, 1, 0), Vec3(1, -1, 0)), floor_hit(), rng)
        out = result.scattered_ray.direction
        assert out.x == pytest.approx(math.sqrt(0.5) / 1.5)
        assert out.y < 0

    def test_exiting_uses_index_ratio(self, rng):
        # Leaving the medium at a shallow angle bends away from the normal
        mat = Dielectric(1.5)
        d = Vec3(0.3, 1, 0).normalize()
        result = mat.scatter(Ray(Point3(0, -1, 0), Vec3(0.3, 1, 0)), floor_hit(), rng)
        out = result.scattered_ray.direction
        assert out.y > 0
        assert out.x == pytest.approx(d.x * 1.5)

    def test_total_internal_reflection(self, rng):
        mat = Dielectric(1.5)
        d = Vec3(1, 0.2, 0).normalize()
        result = mat.scatter(Ray(Point3(0, -1, 0), Vec3(1, 0.2, 0)), floor_hit(), rng)
        out = result.scattered_ray.direction
        assert out == Vec3(d.x, -d.y, 0)

    def test_deterministic_choice(self):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(-1, 1, 0), Vec3(1, -1, 0))
        a = mat.scatter(ray_in, floor_hit(), np.random.default_rng(1))
        b = mat.scatter(ray_in, floor_hit(), np.random.default_rng(2))
        assert a.scattered_ray.direction == b.scattered_ray.direction


class TestEmissive:
    """Test Emissive material."""

    def test_absorbs(self, rng):
        mat = Emissive(Color(1, 0.5, 0.25), intensity=2.0)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), floor_hit(), rng)
        assert result.reflected is False
        assert result.scattered_ray is None
        assert result.attenuation == Color(2, 1, 0.5)
