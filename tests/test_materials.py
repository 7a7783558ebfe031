"""Unit tests for the material scattering rules.

Tests cover:
- Lambertian and hemispherical scattering stay in the outward hemisphere
- Perfect and fuzzy metal reflection, absorption below the surface
- Dielectric refraction (Snell's law), Fresnel reflection and total
  internal reflection
- Parameter validation and packing for the parallel backend
"""

import math

import pytest


def _hit(point=(0.0, 0.0, 0.0), normal=(0.0, 1.0, 0.0)):
    from pathtracer.core.vector import Point3, Vector3
    from pathtracer.geometry.sphere import Intersection

    return Intersection(Point3(*point), Vector3(*normal))


def _ray(direction, origin=(0.0, 1.0, 0.0)):
    from pathtracer.core.ray import Ray
    from pathtracer.core.vector import Point3, Vector3

    return Ray(Point3(*origin), Vector3(*direction))


class TestDiffuse:
    """Tests for the Lambertian and Hemispherical materials."""

    def test_lambertian_scatters_once_into_upper_hemisphere(self, rng):
        """Test that Lambertian rays leave on the normal's side."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Lambertian

        material = Lambertian(Color(0.5, 0.6, 0.7))
        hit = _hit()
        for _ in range(200):
            scattered = material.scatter(_ray((0.3, -1.0, 0.0)), hit, rng)
            assert len(scattered) == 1
            ray, attenuation = scattered[0]
            assert attenuation == Color(0.5, 0.6, 0.7)
            assert ray.origin == hit.point
            assert ray.direction.dot(hit.normal) > 0.0

    def test_lambertian_is_cosine_weighted(self, rng):
        """Test that the mean cosine matches a cosine distribution (2/3)."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Lambertian

        material = Lambertian(Color(1.0, 1.0, 1.0))
        hit = _hit()
        cosines = [
            material.scatter(_ray((0.0, -1.0, 0.0)), hit, rng)[0][0].direction.y
            for _ in range(4000)
        ]
        assert sum(cosines) / len(cosines) == pytest.approx(2.0 / 3.0, abs=0.03)

    def test_lambertian_degenerate_direction_falls_back_to_normal(self, monkeypatch, rng):
        """Test the fallback when the random vector cancels the normal."""
        from pathtracer.core.image import Color
        from pathtracer.core.vector import Vector3
        from pathtracer.materials import diffuse

        monkeypatch.setattr(diffuse, "random_on_unit_sphere", lambda _: Vector3(0.0, -1.0, 0.0))
        material = diffuse.Lambertian(Color(1.0, 1.0, 1.0))
        [(ray, _)] = material.scatter(_ray((0.0, -1.0, 0.0)), _hit(), rng)
        assert ray.direction == Vector3(0.0, 1.0, 0.0)

    def test_hemispherical_folds_into_outward_hemisphere(self, rng):
        """Test that hemispherical rays never point into the surface."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Hemispherical

        material = Hemispherical(Color(0.8, 0.8, 0.0))
        hit = _hit(normal=(1.0, 1.0, 0.0))
        for _ in range(200):
            [(ray, _)] = material.scatter(_ray((0.0, -1.0, 0.0)), hit, rng)
            assert ray.direction.dot(hit.normal) > 0.0

    def test_hemispherical_is_uniform(self, rng):
        """Test that the mean cosine matches a uniform hemisphere (1/2)."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Hemispherical

        material = Hemispherical(Color(1.0, 1.0, 1.0))
        hit = _hit()
        cosines = [
            material.scatter(_ray((0.0, -1.0, 0.0)), hit, rng)[0][0].direction.y
            for _ in range(4000)
        ]
        assert sum(cosines) / len(cosines) == pytest.approx(0.5, abs=0.03)

    def test_negative_attenuation_rejected(self):
        """Test that negative color channels raise ValueError."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Hemispherical, Lambertian

        with pytest.raises(ValueError):
            Lambertian(Color(0.5, -0.1, 0.5))
        with pytest.raises(ValueError):
            Hemispherical(Color(-1.0, 0.0, 0.0))


class TestMetal:
    """Tests for the Metal material."""

    def test_perfect_reflection_45_degrees(self, rng):
        """Test mirror reflection with zero fuzziness."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Metal

        inv_sqrt2 = 1.0 / math.sqrt(2.0)
        material = Metal(Color(0.8, 0.6, 0.2), fuzziness=0.0)
        [(ray, attenuation)] = material.scatter(_ray((1.0, -1.0, 0.0)), _hit(), rng)
        assert ray.direction.x == pytest.approx(inv_sqrt2)
        assert ray.direction.y == pytest.approx(inv_sqrt2)
        assert ray.direction.z == pytest.approx(0.0)
        assert attenuation == Color(0.8, 0.6, 0.2)

    def test_fuzzy_reflection_stays_in_cone(self, rng):
        """Test that fuzzy rays stay within atan(fuzziness) of the mirror."""
        from pathtracer.core.image import Color
        from pathtracer.core.vector import Vector3
        from pathtracer.materials import Metal

        fuzz = 0.3
        material = Metal(Color(1.0, 1.0, 1.0), fuzziness=fuzz)
        mirror = Vector3(0.0, 1.0, 0.0)
        min_cos = math.cos(math.atan(fuzz))
        directions = []
        for _ in range(200):
            [(ray, _)] = material.scatter(_ray((0.0, -1.0, 0.0)), _hit(), rng)
            assert ray.direction.dot(mirror) >= min_cos - 1e-9
            directions.append(ray.direction)
        assert any(d.dot(mirror) < 0.999 for d in directions)

    def test_grazing_fuzzy_rays_can_be_absorbed(self, rng):
        """Test that perturbed rays pointing into the surface are absorbed."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Metal

        material = Metal(Color(1.0, 1.0, 1.0), fuzziness=1.0)
        hit = _hit()
        results = [material.scatter(_ray((1.0, -0.01, 0.0)), hit, rng) for _ in range(300)]
        assert any(result == [] for result in results)
        for result in results:
            for ray, _ in result:
                assert ray.direction.dot(hit.normal) > 0.0

    def test_negative_fuzziness_rejected(self):
        """Test that negative fuzziness raises ValueError."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Metal

        with pytest.raises(ValueError):
            Metal(Color(1.0, 1.0, 1.0), fuzziness=-0.1)

    @pytest.mark.parametrize(
        "direction",
        [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0), (0.95, 0.3, 0.1), (-1.0, 2.0, 3.0)],
    )
    def test_orthogonal_basis_is_orthonormal(self, direction):
        """Test that the disk basis is orthonormal to the direction."""
        from pathtracer.core.vector import Vector3
        from pathtracer.materials import orthogonal_basis

        d = Vector3(*direction).normalize()
        e1, e2 = orthogonal_basis(d)
        assert e1.norm() == pytest.approx(1.0)
        assert e2.norm() == pytest.approx(1.0)
        assert e1.dot(d) == pytest.approx(0.0, abs=1e-12)
        assert e2.dot(d) == pytest.approx(0.0, abs=1e-12)
        assert e1.dot(e2) == pytest.approx(0.0, abs=1e-12)


class TestDielectric:
    """Tests for refraction and the Dielectric material."""

    def test_normal_incidence_passes_straight_through(self):
        """Test that a head-on ray refracts without bending."""
        from pathtracer.core.vector import Vector3
        from pathtracer.materials import refract

        direction = refract(Vector3(0.0, -1.0, 0.0), Vector3(0.0, 1.0, 0.0), 1.0 / 1.5, 0.99)
        assert direction.x == pytest.approx(0.0)
        assert direction.y == pytest.approx(-1.0)

    def test_snell_law_entering(self):
        """Test that refraction obeys sin(t) = ratio * sin(i)."""
        from pathtracer.core.vector import Vector3
        from pathtracer.materials import refract

        inv_sqrt2 = 1.0 / math.sqrt(2.0)
        ratio = 1.0 / 1.5
        direction = refract(
            Vector3(inv_sqrt2, -inv_sqrt2, 0.0), Vector3(0.0, 1.0, 0.0), ratio, 0.99
        )
        assert direction.norm() == pytest.approx(1.0)
        assert direction.x == pytest.approx(ratio * inv_sqrt2)
        assert direction.y < 0.0

    def test_exiting_ray_flips_normal_and_ratio(self):
        """Test refraction from inside the medium bends away from the normal."""
        from pathtracer.core.vector import Vector3
        from pathtracer.materials import refract

        sin_i = 0.5
        incident = Vector3(sin_i, math.sqrt(1.0 - sin_i * sin_i), 0.0)
        direction = refract(incident, Vector3(0.0, 1.0, 0.0), 1.0 / 1.5, 0.99)
        assert direction.x == pytest.approx(1.5 * sin_i)
        assert direction.y > 0.0

    def test_total_internal_reflection(self):
        """Test that steep exits from the dense medium reflect."""
        from pathtracer.core.vector import Vector3
        from pathtracer.materials import refract

        sin_i = 0.9
        incident = Vector3(sin_i, math.sqrt(1.0 - sin_i * sin_i), 0.0)
        direction = refract(incident, Vector3(0.0, 1.0, 0.0), 1.0 / 1.5, 0.99)
        assert direction.x == pytest.approx(sin_i)
        assert direction.y == pytest.approx(-math.sqrt(1.0 - sin_i * sin_i))

    def test_low_sample_reflects(self):
        """Test that a draw under the Fresnel reflectance reflects."""
        from pathtracer.core.vector import Vector3
        from pathtracer.materials import refract

        direction = refract(Vector3(0.0, -1.0, 0.0), Vector3(0.0, 1.0, 0.0), 1.0 / 1.5, 0.0)
        assert direction.y == pytest.approx(1.0)

    def test_schlick_reflectance(self):
        """Test Schlick's approximation at normal and grazing incidence."""
        from pathtracer.materials import schlick_reflectance

        assert schlick_reflectance(1.0, 1.0 / 1.5) == pytest.approx(0.04)
        assert schlick_reflectance(0.0, 1.0 / 1.5) == pytest.approx(1.0)

    def test_scatter_returns_exactly_one_pair(self, fixed_random):
        """Test that a dielectric always scatters exactly one ray."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Dielectric

        material = Dielectric(Color(0.9, 1.0, 0.9), 1.5)
        hit = _hit()
        [(ray, attenuation)] = material.scatter(_ray((0.0, -1.0, 0.0)), hit, fixed_random(0.99))
        assert attenuation == Color(0.9, 1.0, 0.9)
        assert ray.direction.y == pytest.approx(-1.0)
        assert ray.origin == hit.point

    @pytest.mark.parametrize("index", [0.0, -1.5])
    def test_non_positive_index_rejected(self, index):
        """Test that a non-positive refractive index raises ValueError."""
        from pathtracer.core.image import Color
        from pathtracer.materials import Dielectric

        with pytest.raises(ValueError):
            Dielectric(Color(1.0, 1.0, 1.0), index)


class TestPacked:
    """Tests for flattening materials for the parallel backend."""

    def test_packed_parameters(self):
        """Test the (type, attenuation, scalar) layout of every material."""
        from pathtracer.core.image import Color
        from pathtracer.materials import (
            Dielectric,
            Hemispherical,
            Lambertian,
            MaterialType,
            Metal,
        )

        white = Color(1.0, 1.0, 1.0)
        assert Lambertian(white).packed() == (MaterialType.LAMBERTIAN, white, 0.0)
        assert Hemispherical(white).packed() == (MaterialType.HEMISPHERICAL, white, 0.0)
        assert Metal(white, 0.25).packed() == (MaterialType.METAL, white, 0.25)
        assert Dielectric(white, 1.33).packed() == (MaterialType.DIELECTRIC, white, 1.33)
