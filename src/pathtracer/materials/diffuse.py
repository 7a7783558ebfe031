"""Diffuse material implementations.

Two diffuse scattering rules are provided:

    Lambertian: the scattered direction points from the hit point to a
        uniformly random point on the unit sphere tangent to the surface
        (centered at ``point + normal``). The resulting directions follow a
        cosine-weighted distribution around the normal.

    Hemispherical: the scattered direction is uniformly distributed over the
        outward hemisphere (a random unit vector, negated when it points into
        the surface).

Both always return exactly one scattered ray attenuated by a fixed color.

Example:
    >>> import numpy as np
    >>> from pathtracer.core.image import Color
    >>> from pathtracer.materials.diffuse import Lambertian
    >>> material = Lambertian(Color(0.5, 0.5, 0.5))
    >>> # [(scattered, attenuation)] = material.scatter(ray, hit, np.random.default_rng())
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pathtracer.core.image import Color
from pathtracer.core.ray import Ray, random_on_unit_sphere
from pathtracer.geometry.sphere import Intersection
from pathtracer.materials.material import (
    Material,
    MaterialType,
    Scatter,
    validate_attenuation,
)


@dataclass(frozen=True)
class Lambertian(Material):
    """Lambertian (ideal diffuse) material.

    Attributes:
        attenuation: The diffuse reflectance color.
    """

    attenuation: Color
    material_type = MaterialType.LAMBERTIAN

    def __post_init__(self) -> None:
        validate_attenuation(self.attenuation)

    def scatter(
        self,
        ray: Ray,
        intersection: Intersection,
        rng: np.random.Generator,
    ) -> list[Scatter]:
        """Scatter toward a random point on the unit sphere above the hit point.

        The direction is ``normal + s`` for a random unit vector ``s``. When
        ``s`` is (almost) exactly ``-normal`` the direction degenerates to
        zero; the ray then leaves along the normal instead.
        """
        direction = intersection.normal + random_on_unit_sphere(rng)
        if direction.is_near_zero():
            direction = intersection.normal
        return [(Ray(intersection.point, direction), self.attenuation)]

    def packed(self) -> tuple[MaterialType, Color, float]:
        return (self.material_type, self.attenuation, 0.0)


@dataclass(frozen=True)
class Hemispherical(Material):
    """Uniform hemispherical diffuse material.

    Attributes:
        attenuation: The diffuse reflectance color.
    """

    attenuation: Color
    material_type = MaterialType.HEMISPHERICAL

    def __post_init__(self) -> None:
        validate_attenuation(self.attenuation)

    def scatter(
        self,
        ray: Ray,
        intersection: Intersection,
        rng: np.random.Generator,
    ) -> list[Scatter]:
        direction = random_on_unit_sphere(rng)
        if direction.dot(intersection.normal) <= 0.0:
            direction = -direction
        return [(Ray(intersection.point, direction), self.attenuation)]

    def packed(self) -> tuple[MaterialType, Color, float]:
        return (self.material_type, self.attenuation, 0.0)
