"""Dielectric (glass/water) material implementation.

This module implements the dielectric scattering rule, which models
transparent materials like glass and water with refraction and Fresnel
reflectance.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when ratio * sin(theta) > 1

The material randomly chooses between reflection and refraction based on
the Fresnel reflectance probability, which increases at grazing angles.

Example:
    >>> from pathtracer.core.image import Color
    >>> from pathtracer.materials.dielectric import Dielectric
    >>> glass = Dielectric(Color(1.0, 1.0, 1.0), refractive_index=1.5)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from pathtracer.core.image import Color
from pathtracer.core.ray import Ray, reflect
from pathtracer.core.vector import Vector3
from pathtracer.geometry.sphere import Intersection
from pathtracer.materials.material import (
    Material,
    MaterialType,
    Scatter,
    validate_attenuation,
)


def schlick_reflectance(cos_theta: float, ratio: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cos_theta: Cosine of the angle between incident direction and normal.
        ratio: Ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        ``r0 + (1 - r0)(1 - cos_theta)^5`` with ``r0 = ((1 - ratio)/(1 + ratio))^2``.
    """
    r0 = ((1.0 - ratio) / (1.0 + ratio)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cos_theta) ** 5


def refract(incident: Vector3, normal: Vector3, ratio: float, sample: float) -> Vector3:
    """Choose between reflection and refraction at a dielectric boundary.

    If the ray is leaving the medium (it travels along the outward normal),
    the normal is flipped and the ratio inverted before applying Snell's law.

    Args:
        incident: The incoming direction (normalized).
        normal: The outward surface normal (normalized).
        ratio: Ratio of refractive indices for a ray entering the surface.
        sample: A uniform draw in [0, 1) deciding reflection vs refraction.

    Returns:
        The reflected direction under total internal reflection or when
        ``sample`` falls below the Schlick reflectance, else the refracted
        direction.
    """
    cos_theta = min(-incident.dot(normal), 1.0)
    if cos_theta < 0.0:
        normal = -normal
        ratio = 1.0 / ratio
        cos_theta = min(-incident.dot(normal), 1.0)

    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    if ratio * sin_theta > 1.0 or sample < schlick_reflectance(cos_theta, ratio):
        return reflect(incident, normal)

    perpendicular = (incident + normal * cos_theta) * ratio
    parallel = normal * -math.sqrt(abs(1.0 - perpendicular.dot(perpendicular)))
    return perpendicular + parallel


@dataclass(frozen=True)
class Dielectric(Material):
    """Dielectric (glass/water) material properties.

    Attributes:
        attenuation: Color tint applied to transmitted and reflected light.
            White for clear glass.
        refractive_index: Index of refraction relative to the surrounding
            medium. Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    attenuation: Color
    refractive_index: float = 1.5
    material_type = MaterialType.DIELECTRIC

    def __post_init__(self) -> None:
        validate_attenuation(self.attenuation)
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Refractive index = {self.refractive_index} must be positive"
            )

    def scatter(
        self,
        ray: Ray,
        intersection: Intersection,
        rng: np.random.Generator,
    ) -> list[Scatter]:
        """Reflect or refract. Dielectrics always scatter exactly one ray."""
        direction = refract(
            ray.direction,
            intersection.normal,
            1.0 / self.refractive_index,
            float(rng.random()),
        )
        return [(Ray(intersection.point, direction), self.attenuation)]

    def packed(self) -> tuple[MaterialType, Color, float]:
        return (self.material_type, self.attenuation, self.refractive_index)
