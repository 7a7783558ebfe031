"""Scene container coordinating surfaces and materials.

A Scene is an ordered list of Objects, each pairing a Sphere with the
Material that shades it. Queries scan every object linearly; there is no
acceleration structure.

Example:
    >>> from pathtracer.core.image import Color
    >>> from pathtracer.core.vector import Point3
    >>> from pathtracer.materials import Lambertian
    >>> from pathtracer.scene.manager import Scene
    >>> scene = Scene()
    >>> scene.add_sphere(Point3(0.0, 0.0, -1.0), 0.5, Lambertian(Color(0.5, 0.5, 0.5)))
    >>> len(scene)
    1
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np

from pathtracer.core import integrator
from pathtracer.core.image import Color
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Point3
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.material import Material
from pathtracer.scene.intersection import SceneHit, closest_hit


@dataclass(frozen=True)
class Object:
    """A renderable object: a surface shaded by a material.

    Attributes:
        surface: The geometric shape.
        material: The scattering rule applied at the surface.
    """

    surface: Sphere
    material: Material


class Scene:
    """An ordered collection of objects. Read-only while rendering."""

    def __init__(self, objects: Iterable[Object] = ()) -> None:
        self._objects: list[Object] = list(objects)

    def add(self, obj: Object) -> None:
        """Append an object to the scene."""
        self._objects.append(obj)

    def add_sphere(self, center: Point3, radius: float, material: Material) -> Object:
        """Add a sphere with a material in one call.

        Returns:
            The Object that was appended.
        """
        obj = Object(Sphere(center, radius), material)
        self._objects.append(obj)
        return obj

    @property
    def objects(self) -> tuple[Object, ...]:
        return tuple(self._objects)

    def __iter__(self) -> Iterator[Object]:
        return iter(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def candidates(self, ray: Ray, t_min: float = 0.0, t_max: float = math.inf) -> Iterator[SceneHit]:
        """Yield every accepted intersection in scene order."""
        for obj in self._objects:
            for intersection in obj.surface.intersected_by(ray, t_min, t_max):
                distance = (intersection.point - ray.origin).norm()
                yield SceneHit(intersection, obj.material, distance)

    def intersect(self, ray: Ray, t_min: float = 0.0, t_max: float = math.inf) -> SceneHit | None:
        """Find the nearest intersection of a ray with the scene.

        Args:
            ray: The ray to trace.
            t_min: Smallest accepted distance along the ray (inclusive).
            t_max: Largest accepted distance along the ray (exclusive).

        Returns:
            The nearest hit, or None if the ray hits nothing in range.
        """
        return closest_hit(self.candidates(ray, t_min, t_max))

    def render_ray(self, ray: Ray, depth: int, rng: np.random.Generator) -> Color:
        """Estimate the radiance carried back along a ray.

        See ``pathtracer.core.integrator.render_ray``.
        """
        return integrator.render_ray(self, ray, depth, rng)

    def __repr__(self) -> str:
        return f"Scene(objects={len(self._objects)})"
