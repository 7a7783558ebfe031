"""Materials module for light scattering models.

Components:
    material: Base material interface and the MaterialType enumeration
    diffuse: Lambertian and uniform hemispherical diffuse reflection
    metal: Specular reflection with optional fuzziness
    dielectric: Glass-like materials with refraction (Schlick Fresnel)

Each material maps an incoming ray and an intersection to a list of
(scattered ray, attenuation) pairs. An empty list means the ray was absorbed.
"""

from .dielectric import Dielectric, refract, schlick_reflectance
from .diffuse import Hemispherical, Lambertian
from .material import Material, MaterialType, Scatter
from .metal import Metal, orthogonal_basis

__all__ = [
    "Material",
    "MaterialType",
    "Scatter",
    # Diffuse
    "Lambertian",
    "Hemispherical",
    # Metal
    "Metal",
    "orthogonal_basis",
    # Dielectric
    "Dielectric",
    "refract",
    "schlick_reflectance",
]
