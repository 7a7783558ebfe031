"""Base material interface.

A material turns one incoming ray into zero or more scattered rays, each
paired with the color attenuation applied to the light it carries back. The
integrator averages the contributions of all returned pairs; an empty list
means the ray was absorbed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import ClassVar

import numpy as np

from pathtracer.core.image import Color
from pathtracer.core.ray import Ray
from pathtracer.geometry.sphere import Intersection

Scatter = tuple[Ray, Color]


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used by the parallel backend to dispatch to the matching scatter function
    inside a kernel.
    """

    LAMBERTIAN = 0
    HEMISPHERICAL = 1
    METAL = 2
    DIELECTRIC = 3


def validate_attenuation(attenuation: Color) -> None:
    """Reject attenuation colors with negative channels.

    Raises:
        ValueError: If any channel is negative.
    """
    for name, component in zip("rgb", attenuation.as_tuple()):
        if component < 0.0:
            raise ValueError(f"Attenuation channel {name} = {component} is negative")


class Material(ABC):
    """Abstract scattering rule. Subclasses implement ``scatter``."""

    material_type: ClassVar[MaterialType]

    @abstractmethod
    def scatter(
        self,
        ray: Ray,
        intersection: Intersection,
        rng: np.random.Generator,
    ) -> list[Scatter]:
        """Scatter a ray at an intersection point.

        Args:
            ray: The incoming ray.
            intersection: Where the ray met the surface.
            rng: Random source for stochastic scattering.

        Returns:
            A list of (scattered ray, attenuation) pairs, possibly empty.
        """

    @abstractmethod
    def packed(self) -> tuple[MaterialType, Color, float]:
        """Flatten the material to (type, attenuation, scalar parameter).

        The scalar is the fuzziness for metals, the refractive index for
        dielectrics and unused (0.0) for diffuse materials.
        """
