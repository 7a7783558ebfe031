"""Metal (specular reflective) material implementation.

This module implements the metal scattering rule, which models specular
reflection with optional fuzziness. Perfect metals (fuzziness=0) produce
mirror-like reflections, while fuzzier metals scatter reflected rays within a
cone around the mirror direction.

The reflection formula is:
    R = D - 2(D . N)N

where D is the incident direction and N is the surface normal.

For fuzzy metals, R is perturbed by a random point on a disk of radius
``fuzziness`` lying in the plane orthogonal to R. Perturbed rays that end up
pointing into the surface are absorbed.

Example:
    >>> from pathtracer.core.image import Color
    >>> from pathtracer.materials.metal import Metal
    >>> gold = Metal(Color(0.8, 0.6, 0.2), fuzziness=0.1)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pathtracer.core.image import Color
from pathtracer.core.ray import Ray, random_in_unit_disk, reflect
from pathtracer.core.vector import Vector3
from pathtracer.geometry.sphere import Intersection
from pathtracer.materials.material import (
    Material,
    MaterialType,
    Scatter,
    validate_attenuation,
)

_X_AXIS = Vector3(1.0, 0.0, 0.0)
_Y_AXIS = Vector3(0.0, 1.0, 0.0)


def orthogonal_basis(direction: Vector3) -> tuple[Vector3, Vector3]:
    """Build two unit vectors spanning the plane orthogonal to ``direction``.

    The first vector is a coordinate axis with its projection onto
    ``direction`` removed; the axis least aligned with ``direction`` is used
    so the difference never degenerates.

    Args:
        direction: A unit vector.

    Returns:
        A tuple (e1, e2) such that (e1, e2, direction) is orthonormal.
    """
    axis = _X_AXIS if abs(direction.x) < 0.9 else _Y_AXIS
    e1 = (axis - direction.project(axis)).normalize()
    e2 = direction.cross(e1)
    return e1, e2


@dataclass(frozen=True)
class Metal(Material):
    """Metal (specular reflective) material properties.

    Attributes:
        attenuation: The reflective color, tinting reflected light.
        fuzziness: Radius of the perturbation disk. 0 is a perfect mirror.
    """

    attenuation: Color
    fuzziness: float = 0.0
    material_type = MaterialType.METAL

    def __post_init__(self) -> None:
        validate_attenuation(self.attenuation)
        if self.fuzziness < 0.0:
            raise ValueError(f"Fuzziness = {self.fuzziness} must not be negative")

    def scatter(
        self,
        ray: Ray,
        intersection: Intersection,
        rng: np.random.Generator,
    ) -> list[Scatter]:
        """Reflect about the normal, then perturb within the fuzz disk.

        Returns:
            One (ray, attenuation) pair, or an empty list if the perturbed
            direction points back into the surface.
        """
        normal = intersection.normal
        reflected = reflect(ray.direction, normal)

        direction = reflected
        if self.fuzziness > 0.0:
            e1, e2 = orthogonal_basis(reflected)
            x, y = random_in_unit_disk(rng)
            direction = reflected + (e1 * x + e2 * y) * self.fuzziness

        if direction.dot(normal) <= 0.0:
            return []
        return [(Ray(intersection.point, direction), self.attenuation)]

    def packed(self) -> tuple[MaterialType, Color, float]:
        return (self.material_type, self.attenuation, self.fuzziness)
