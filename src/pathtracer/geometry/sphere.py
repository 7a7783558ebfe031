"""Sphere primitive and the intersection record it produces.

The ray-sphere intersection is found by solving

    |origin + t * direction - center|^2 = radius^2

which expands to the quadratic

    a*t^2 + 2*b*t + c = 0

with
    a = dot(direction, direction)
    b = dot(offset, direction)
    c = dot(offset, offset) - radius^2
    offset = origin - center

Real roots exist iff ``b^2 - a*c >= 0``. Every root inside the caller's
distance range is reported, so a ray crossing a sphere yields both the
entry and the exit point. Scenes rely on this for hollow shells built from two
concentric spheres, the inner one with a negative radius.

Example:
    >>> from pathtracer.core.ray import Ray
    >>> from pathtracer.core.vector import Point3, Vector3
    >>> from pathtracer.geometry.sphere import Sphere
    >>> sphere = Sphere(center=Point3(0.0, 0.0, 2.0), radius=1.0)
    >>> ray = Ray(Point3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, 1.0))
    >>> [hit.point.z for hit in sphere.intersected_by(ray)]
    [1.0, 3.0]
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Point3, Vector3


class Intersection:
    """Record of a ray-surface intersection.

    Attributes:
        point: The point where the ray met the surface.
        normal: The outward surface normal at ``point``, normalized on
            construction.
    """

    __slots__ = ("point", "normal")

    def __init__(self, point: Point3, normal: Vector3) -> None:
        self.point = point
        self.normal = normal.normalize()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intersection):
            return NotImplemented
        return self.point == other.point and self.normal == other.normal

    def __repr__(self) -> str:
        return f"Intersection(point={self.point!r}, normal={self.normal!r})"


@dataclass(frozen=True, slots=True)
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere. A negative radius keeps the same
            geometry but flips the normal inward, which turns the sphere into
            the inner wall of a hollow shell.
    """

    center: Point3
    radius: float

    def intersected_by(
        self,
        ray: Ray,
        t_min: float = 0.0,
        t_max: float = math.inf,
    ) -> list[Intersection]:
        """Test for ray-sphere intersection.

        Args:
            ray: The ray to trace along.
            t_min: Smallest accepted distance along the ray (inclusive).
            t_max: Largest accepted distance along the ray (exclusive).

        Returns:
            The intersections whose distance falls in ``[t_min, t_max)``, in
            order of increasing distance. Empty when the ray misses, one
            element for a tangent ray or when only one root passes the filter,
            two when the ray crosses the sphere.
        """
        offset = ray.origin - self.center
        a = ray.direction.dot(ray.direction)
        b = offset.dot(ray.direction)
        c = offset.dot(offset) - self.radius * self.radius

        discriminant = b * b - a * c
        if discriminant < 0.0:
            return []

        sqrt_d = math.sqrt(discriminant)
        if sqrt_d == 0.0:
            roots = [-b / a]
        else:
            roots = [(-b - sqrt_d) / a, (-b + sqrt_d) / a]

        intersections = []
        for t in roots:
            if t_min <= t < t_max:
                point = ray.at(t)
                intersections.append(Intersection(point, (point - self.center) / self.radius))
        return intersections
