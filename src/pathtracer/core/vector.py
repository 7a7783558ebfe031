"""Vector and point algebra in three dimensions.

Directions and displacements are ``Vector3`` values, positions are ``Point3``
values. Keeping the two apart makes the affine rules explicit:

    Point3 - Point3  -> Vector3
    Point3 + Vector3 -> Point3
    Point3 - Vector3 -> Point3

All operations are pure and return new values.

Example:
    >>> from pathtracer.core.vector import Point3, Vector3
    >>> origin = Point3(0.0, 0.0, 0.0)
    >>> target = Point3(0.0, 0.0, -2.0)
    >>> (target - origin).normalize()
    Vector3(x=0.0, y=0.0, z=-1.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

NAN = float("nan")


def _div0(value: float, zero: float) -> float:
    # IEEE 754 division by a signed zero instead of ZeroDivisionError
    if value == 0.0 or math.isnan(value):
        return NAN
    return math.copysign(math.inf, value) * math.copysign(1.0, zero)


@dataclass(frozen=True, slots=True)
class Vector3:
    """A direction or displacement in R^3.

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
    """

    x: float
    y: float
    z: float

    @staticmethod
    def zero() -> Vector3:
        """Return the zero-length vector."""
        return Vector3(0.0, 0.0, 0.0)

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3:
        if scalar == 0.0:
            return Vector3(_div0(self.x, scalar), _div0(self.y, scalar), _div0(self.z, scalar))
        return self * (1.0 / scalar)

    def dot(self, other: Vector3) -> float:
        """Return the dot product of two vectors."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Return the cross product ``self x other``."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def norm(self) -> float:
        """Return the Euclidean length of the vector."""
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vector3:
        """Return a unit-length copy of the vector.

        A zero-length vector has no direction. Rather than raising, the
        result is a vector of NaNs so that degenerate geometry propagates
        through the renderer and is rejected by the nearest-hit selection.

        Returns:
            ``self / self.norm()``, or a NaN vector if the norm is zero.
        """
        norm = self.norm()
        if norm == 0.0:
            return Vector3(NAN, NAN, NAN)
        return Vector3(self.x / norm, self.y / norm, self.z / norm)

    def project(self, other: Vector3) -> Vector3:
        """Return the component of ``other`` along this vector.

        Computes ``(self . other / self . self) * self``.
        """
        length_squared = self.dot(self)
        if length_squared == 0.0:
            return Vector3(NAN, NAN, NAN)
        return self * (self.dot(other) / length_squared)

    def is_near_zero(self, eps: float = 1e-8) -> bool:
        """Check if all components are within ``eps`` of zero."""
        return abs(self.x) < eps and abs(self.y) < eps and abs(self.z) < eps

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True, slots=True)
class Point3:
    """A position in R^3."""

    x: float
    y: float
    z: float

    @staticmethod
    def zero() -> Point3:
        """Return the origin."""
        return Point3(0.0, 0.0, 0.0)

    def __add__(self, other: Vector3) -> Point3:
        return Point3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        if isinstance(other, Point3):
            return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)
