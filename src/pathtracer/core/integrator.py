"""Recursive radiance integrator.

The integrator follows a ray into the scene. At the nearest hit the material
scatters it into zero or more rays, each of which is traced recursively with
one less bounce of budget; their attenuated results are averaged. Rays that
escape the scene pick up the sky gradient. A path that runs out of depth or is
absorbed contributes black.

Example:
    >>> import numpy as np
    >>> from pathtracer.core.integrator import render_ray
    >>> from pathtracer.core.ray import Ray
    >>> from pathtracer.core.vector import Point3, Vector3
    >>> from pathtracer.scene.manager import Scene
    >>> ray = Ray(Point3(0.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0))
    >>> render_ray(Scene(), ray, 5, np.random.default_rng(0))
    Color(r=0.5, g=0.7, b=1.0)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.image import Color
from pathtracer.core.ray import Ray

if TYPE_CHECKING:
    from pathtracer.scene.manager import Scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Rays ignore hits closer than this to their origin (shadow acne)
RAY_EPSILON = 0.001

# Background gradient endpoints, bottom (t = 0) to top (t = 1)
HORIZON_COLOR = Color(1.0, 1.0, 1.0)
ZENITH_COLOR = Color(0.5, 0.7, 1.0)


def background(ray: Ray) -> Color:
    """Sky color seen along a ray that escapes the scene.

    Linearly interpolates from white to light blue with
    ``t = 0.5 * (direction.y + 1)``.
    """
    t = 0.5 * (ray.direction.y + 1.0)
    return HORIZON_COLOR * (1.0 - t) + ZENITH_COLOR * t


def render_ray(scene: Scene, ray: Ray, depth: int, rng: np.random.Generator) -> Color:
    """Estimate the radiance carried back along a ray.

    Args:
        scene: The scene to trace against.
        ray: The ray to follow.
        depth: Remaining bounce budget. 0 returns black.
        rng: Random source for material scattering.

    Returns:
        The averaged radiance estimate.
    """
    if depth <= 0:
        return Color.black()

    hit = scene.intersect(ray, RAY_EPSILON, math.inf)
    if hit is None:
        return background(ray)

    scattered = hit.material.scatter(ray, hit.intersection, rng)
    if not scattered:
        return Color.black()

    total = Color.black()
    for next_ray, attenuation in scattered:
        total = total + attenuation * render_ray(scene, next_ray, depth - 1, rng)
    return total / len(scattered)
