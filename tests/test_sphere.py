"""Unit tests for ray-sphere intersection.

Tests cover:
- Two roots for a crossing ray, ordered by distance
- Tangent rays yielding a single intersection
- Misses
- The half-open distance filter
- Outward and inverted (negative radius) normals
"""

import pytest


def _ray_along_z(origin_z=0.0, y=0.0):
    from pathtracer.core.ray import Ray
    from pathtracer.core.vector import Point3, Vector3

    return Ray(Point3(0.0, y, origin_z), Vector3(0.0, 0.0, 1.0))


class TestIntersection:
    """Tests for the Intersection record."""

    def test_normal_is_normalized(self):
        """Test that the normal is normalized on construction."""
        from pathtracer.core.vector import Point3, Vector3
        from pathtracer.geometry.sphere import Intersection

        hit = Intersection(Point3.zero(), Vector3(0.0, 3.0, 4.0))
        assert hit.normal.norm() == pytest.approx(1.0)
        assert hit.normal.z == pytest.approx(0.8)


class TestSphereHit:
    """Tests for Sphere.intersected_by."""

    def test_crossing_ray_hits_twice(self):
        """Test that a ray through the center yields entry and exit."""
        from pathtracer.core.vector import Point3, Vector3
        from pathtracer.geometry.sphere import Sphere

        sphere = Sphere(Point3(0.0, 0.0, 5.0), 1.0)
        hits = sphere.intersected_by(_ray_along_z())
        assert len(hits) == 2
        assert hits[0].point.z == pytest.approx(4.0)
        assert hits[1].point.z == pytest.approx(6.0)
        assert hits[0].normal == Vector3(0.0, 0.0, -1.0)
        assert hits[1].normal == Vector3(0.0, 0.0, 1.0)

    def test_miss_returns_empty(self):
        """Test that a ray passing beside the sphere misses."""
        from pathtracer.core.vector import Point3
        from pathtracer.geometry.sphere import Sphere

        sphere = Sphere(Point3(0.0, 0.0, 5.0), 1.0)
        assert sphere.intersected_by(_ray_along_z(y=1.5)) == []

    def test_tangent_ray_hits_once(self):
        """Test that a grazing ray yields exactly one intersection."""
        from pathtracer.core.vector import Point3
        from pathtracer.geometry.sphere import Sphere

        sphere = Sphere(Point3(0.0, 0.0, 5.0), 1.0)
        hits = sphere.intersected_by(_ray_along_z(y=1.0))
        assert len(hits) == 1
        assert hits[0].point.z == pytest.approx(5.0)
        assert hits[0].point.y == pytest.approx(1.0)

    def test_sphere_behind_ray_is_filtered(self):
        """Test that roots behind the origin are dropped by t_min."""
        from pathtracer.core.vector import Point3
        from pathtracer.geometry.sphere import Sphere

        sphere = Sphere(Point3(0.0, 0.0, -5.0), 1.0)
        assert sphere.intersected_by(_ray_along_z(), t_min=0.001) == []

    def test_origin_inside_sphere_hits_exit_only(self):
        """Test that a ray starting inside only reports the exit point."""
        from pathtracer.core.vector import Point3
        from pathtracer.geometry.sphere import Sphere

        sphere = Sphere(Point3(0.0, 0.0, 0.0), 2.0)
        hits = sphere.intersected_by(_ray_along_z(), t_min=0.001)
        assert len(hits) == 1
        assert hits[0].point.z == pytest.approx(2.0)

    def test_filter_is_half_open(self):
        """Test that t_min is inclusive and t_max is exclusive."""
        from pathtracer.core.vector import Point3
        from pathtracer.geometry.sphere import Sphere

        sphere = Sphere(Point3(0.0, 0.0, 5.0), 1.0)
        ray = _ray_along_z()
        assert len(sphere.intersected_by(ray, t_min=4.0, t_max=6.0)) == 1
        assert sphere.intersected_by(ray, t_min=4.0, t_max=6.0)[0].point.z == pytest.approx(4.0)
        assert sphere.intersected_by(ray, t_min=4.5, t_max=5.5) == []

    def test_negative_radius_inverts_normal(self):
        """Test that a negative radius flips normals inward."""
        from pathtracer.core.vector import Point3, Vector3
        from pathtracer.geometry.sphere import Sphere

        sphere = Sphere(Point3(0.0, 0.0, 5.0), -1.0)
        hits = sphere.intersected_by(_ray_along_z())
        assert len(hits) == 2
        assert hits[0].point.z == pytest.approx(4.0)
        assert hits[0].normal == Vector3(0.0, 0.0, 1.0)
        assert hits[1].normal == Vector3(0.0, 0.0, -1.0)

    def test_off_axis_hits_lie_on_surface(self, rng):
        """Test that hits from arbitrary rays lie on the sphere with unit normals."""
        from pathtracer.core.ray import Ray
        from pathtracer.core.vector import Point3, Vector3
        from pathtracer.geometry.sphere import Sphere

        center = Point3(0.5, -1.0, 3.0)
        radius = 1.5
        sphere = Sphere(center, radius)
        hit_count = 0
        for _ in range(50):
            origin = Point3(*(float(c) for c in rng.uniform(-2.0, 2.0, 3)))
            aim = center + Vector3(*(float(c) for c in rng.uniform(-1.0, 1.0, 3)))
            ray = Ray(origin, aim - origin)
            for hit in sphere.intersected_by(ray):
                hit_count += 1
                assert (hit.point - center).norm() == pytest.approx(radius, rel=1e-9)
                assert hit.normal.norm() == pytest.approx(1.0)
        assert hit_count > 0
