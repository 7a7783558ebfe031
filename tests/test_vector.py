"""Unit tests for vector and point algebra.

Tests cover:
- Affine rules between points and vectors
- Dot, cross, norm and normalization
- Projection
- Zero-length vectors producing NaN instead of raising
"""

import math

import pytest


class TestVectorArithmetic:
    """Tests for basic vector operations."""

    def test_add_sub_neg(self):
        """Test component-wise addition, subtraction and negation."""
        from pathtracer.core.vector import Vector3

        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(4.0, -5.0, 6.0)
        assert a + b == Vector3(5.0, -3.0, 9.0)
        assert a - b == Vector3(-3.0, 7.0, -3.0)
        assert -a == Vector3(-1.0, -2.0, -3.0)

    def test_scalar_multiplication_both_sides(self):
        """Test that scalars multiply from either side."""
        from pathtracer.core.vector import Vector3

        v = Vector3(1.0, -2.0, 0.5)
        assert v * 2.0 == Vector3(2.0, -4.0, 1.0)
        assert 2.0 * v == v * 2.0
        assert v / 2.0 == Vector3(0.5, -1.0, 0.25)

    def test_dot_and_cross(self):
        """Test the dot product and the right-handed cross product."""
        from pathtracer.core.vector import Vector3

        x = Vector3(1.0, 0.0, 0.0)
        y = Vector3(0.0, 1.0, 0.0)
        assert x.dot(y) == 0.0
        assert x.cross(y) == Vector3(0.0, 0.0, 1.0)
        assert y.cross(x) == Vector3(0.0, 0.0, -1.0)
        assert Vector3(1.0, 2.0, 3.0).dot(Vector3(4.0, 5.0, 6.0)) == 32.0

    def test_norm(self):
        """Test Euclidean length."""
        from pathtracer.core.vector import Vector3

        assert Vector3(3.0, 4.0, 12.0).norm() == pytest.approx(13.0)


class TestNormalize:
    """Tests for normalization."""

    def test_normalize_has_unit_length(self):
        """Test that normalized vectors have length 1."""
        from pathtracer.core.vector import Vector3

        v = Vector3(2.0, -3.0, 6.0).normalize()
        assert v.norm() == pytest.approx(1.0)
        assert v.x == pytest.approx(2.0 / 7.0)

    def test_normalize_zero_vector_is_nan(self):
        """Test that a zero vector normalizes to NaN without raising."""
        from pathtracer.core.vector import Vector3

        v = Vector3.zero().normalize()
        assert all(math.isnan(c) for c in v.as_tuple())

    def test_divide_by_zero_is_ieee(self):
        """Test that division by zero yields inf/NaN instead of raising."""
        from pathtracer.core.vector import Vector3

        v = Vector3(1.0, -1.0, 0.0) / 0.0
        assert v.x == math.inf
        assert v.y == -math.inf
        assert math.isnan(v.z)


class TestProject:
    """Tests for vector projection."""

    def test_project_onto_axis(self):
        """Test projecting onto a coordinate axis keeps that component."""
        from pathtracer.core.vector import Vector3

        axis = Vector3(0.0, 2.0, 0.0)
        projected = axis.project(Vector3(3.0, 5.0, -1.0))
        assert projected.x == pytest.approx(0.0)
        assert projected.y == pytest.approx(5.0)
        assert projected.z == pytest.approx(0.0)

    def test_projection_residual_is_orthogonal(self):
        """Test that other - project(other) is orthogonal to self."""
        from pathtracer.core.vector import Vector3

        direction = Vector3(1.0, 2.0, -2.0)
        other = Vector3(-4.0, 0.5, 3.0)
        residual = other - direction.project(other)
        assert residual.dot(direction) == pytest.approx(0.0, abs=1e-12)


class TestPoint:
    """Tests for the affine rules between points and vectors."""

    def test_point_minus_point_is_vector(self):
        """Test that subtracting points yields a displacement vector."""
        from pathtracer.core.vector import Point3, Vector3

        d = Point3(1.0, 2.0, 3.0) - Point3(0.0, 2.0, 5.0)
        assert isinstance(d, Vector3)
        assert d == Vector3(1.0, 0.0, -2.0)

    def test_point_plus_minus_vector_is_point(self):
        """Test that moving a point by a vector yields a point."""
        from pathtracer.core.vector import Point3, Vector3

        p = Point3(1.0, 1.0, 1.0)
        v = Vector3(0.5, -1.0, 2.0)
        assert isinstance(p + v, Point3)
        assert p + v == Point3(1.5, 0.0, 3.0)
        assert isinstance(p - v, Point3)
        assert p - v == Point3(0.5, 2.0, -1.0)

    def test_values_are_immutable(self):
        """Test that vectors cannot be modified in place."""
        from dataclasses import FrozenInstanceError

        from pathtracer.core.vector import Vector3

        v = Vector3(1.0, 2.0, 3.0)
        with pytest.raises(FrozenInstanceError):
            v.x = 5.0
