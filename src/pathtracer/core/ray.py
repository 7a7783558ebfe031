"""Ray data structure and random sampling utilities.

This module provides the Ray type used throughout the renderer together with
the reflection formula and the Monte Carlo sampling helpers shared by the
camera and the materials. Sampling functions take an explicit
``numpy.random.Generator`` so that every unit of work can own an independent,
separately seeded random stream.

Example:
    >>> import numpy as np
    >>> from pathtracer.core.ray import Ray, random_on_unit_sphere
    >>> from pathtracer.core.vector import Point3, Vector3
    >>> ray = Ray(Point3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, -2.0))
    >>> ray.at(5.0)
    Point3(x=0.0, y=0.0, z=-5.0)
    >>> rng = np.random.default_rng(7)
    >>> direction = random_on_unit_sphere(rng)
"""

from __future__ import annotations

import math

import numpy as np

from pathtracer.core.vector import Point3, Vector3


class Ray:
    """A half-line with an origin and a unit-length direction.

    The direction is normalized on construction, so ``ray.at(t)`` lies at
    Euclidean distance ``t`` from the origin.

    Attributes:
        origin: The starting point of the ray.
        direction: The normalized direction of the ray.
    """

    __slots__ = ("origin", "direction")

    def __init__(self, origin: Point3, direction: Vector3) -> None:
        self.origin = origin
        self.direction = direction.normalize()

    def at(self, t: float) -> Point3:
        """Compute the point along the ray at distance t."""
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin!r}, direction={self.direction!r})"


def reflect(incident: Vector3, normal: Vector3) -> Vector3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        ``incident - 2 (incident . normal) normal``.
    """
    return incident - normal * (2.0 * incident.dot(normal))


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_on_unit_sphere(rng: np.random.Generator) -> Vector3:
    """Pick a uniformly distributed point on the unit sphere.

    Normalizes a vector of three independent standard normal draws, which is
    isotropic. A zero-length draw is redrawn.

    Args:
        rng: Random source.

    Returns:
        A random unit vector.
    """
    while True:
        x, y, z = (float(value) for value in rng.standard_normal(3))
        norm = math.sqrt(x * x + y * y + z * z)
        if norm > 0.0:
            return Vector3(x / norm, y / norm, z / norm)


def random_in_unit_disk(rng: np.random.Generator) -> tuple[float, float]:
    """Generate a uniform random point inside the unit disk.

    Uses rejection sampling from the enclosing square.

    Returns:
        A point ``(x, y)`` with ``x^2 + y^2 < 1``.
    """
    while True:
        x, y = rng.uniform(-1.0, 1.0, 2)
        if x * x + y * y < 1.0:
            return float(x), float(y)


def polygon_radius_scale(blades: int) -> float:
    """Scale from a circular aperture radius to an equal-area polygon radius.

    A regular N-gon of circumradius r has area ``N/2 r^2 sin(2 pi / N)``;
    matching ``pi r_c^2`` gives ``r = r_c sqrt(angle / sin(angle))`` with
    ``angle = 2 pi / N``.
    """
    angle = 2.0 * math.pi / blades
    return math.sqrt(angle / math.sin(angle))


def random_in_polygon(rng: np.random.Generator, blades: int) -> tuple[float, float]:
    """Generate a uniform random point inside a regular polygon.

    The polygon has unit circumradius and ``blades`` sides. It is split into
    ``blades`` congruent isosceles triangles with apex at the center; a point
    is drawn uniformly in the canonical triangle (two uniform samples, folded
    back across the diagonal when they fall outside) and rotated into a
    uniformly chosen wedge.

    Args:
        rng: Random source.
        blades: Number of polygon sides (at least 3).

    Returns:
        A point ``(x, y)`` inside the polygon.
    """
    angle = 2.0 * math.pi / blades
    s, t = (float(value) for value in rng.random(2))
    if s + t > 1.0:
        s, t = 1.0 - s, 1.0 - t
    # Canonical triangle: apex at the origin, base vertices at angles 0 and `angle`
    x = s + t * math.cos(angle)
    y = t * math.sin(angle)
    rotation = angle * int(rng.integers(blades))
    cos_r = math.cos(rotation)
    sin_r = math.sin(rotation)
    return x * cos_r - y * sin_r, x * sin_r + y * cos_r
