"""Scene-level nearest-hit selection.

A scene query produces one candidate per accepted sphere root. Each candidate
pairs the Intersection with the material of the object that produced it and
its Euclidean distance from the ray origin. The nearest candidate wins.

Distances can be NaN when the geometry is degenerate (for example a
zero-radius sphere). A NaN distance is treated as worse than every real
distance and is never selected.

Example:
    >>> from pathtracer.scene.intersection import closest_hit
    >>> closest_hit([]) is None
    True
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from pathtracer.geometry.sphere import Intersection
from pathtracer.materials.material import Material


@dataclass(frozen=True)
class SceneHit:
    """Record of a ray-scene intersection with material information.

    Attributes:
        intersection: The surface point and normal.
        material: Material of the object that was hit.
        distance: Distance from the ray origin to the hit point.
    """

    intersection: Intersection
    material: Material
    distance: float


def closest_hit(candidates: Iterable[SceneHit]) -> SceneHit | None:
    """Select the candidate with the smallest distance.

    Args:
        candidates: Hits in scene order.

    Returns:
        The nearest hit, the earliest one on ties, or None if there are no
        candidates with a comparable (non-NaN) distance.
    """
    best = None
    for candidate in candidates:
        if math.isnan(candidate.distance):
            continue
        if best is None or candidate.distance < best.distance:
            best = candidate
    return best
