"""Named demonstration scenes.

Two scenes are available, each returned together with a matching camera:

    small: a hollow glass shell, a diffuse and a metal sphere side by side on
        a large yellow ground sphere.
    large: three large spheres (glass, diffuse, metal) surrounded by a grid
        of small spheres with randomly chosen materials.

Both cameras use a viewport of ``(2 * aspect_ratio, 2)`` and derive their
focal length from a diagonal angle of view.

Example:
    >>> from pathtracer.scene.presets import get_scene
    >>> camera, scene = get_scene("small", aspect_ratio=16 / 9)
    >>> len(scene)
    5
"""

from __future__ import annotations

import logging

import numpy as np

from pathtracer.camera.thin_lens import Camera
from pathtracer.core.image import Color
from pathtracer.core.vector import Point3, Vector3
from pathtracer.materials import Dielectric, Hemispherical, Lambertian, Material, Metal
from pathtracer.scene.manager import Scene

logger = logging.getLogger(__name__)

WORLD_UP = Vector3(0.0, 1.0, 0.0)
GLASS = Dielectric(Color(1.0, 1.0, 1.0), 1.5)


def _viewport(aspect_ratio: float) -> tuple[float, float]:
    if not aspect_ratio > 0.0:
        raise ValueError(f"Aspect ratio = {aspect_ratio} must be positive")
    return (2.0 * aspect_ratio, 2.0)


def small_scene(aspect_ratio: float) -> tuple[Camera, Scene]:
    """Build the small scene.

    Args:
        aspect_ratio: Image width divided by height.

    Returns:
        A (camera, scene) tuple.
    """
    camera = Camera.from_field_of_view(
        origin=Point3(-2.0, 2.0, 1.0),
        target=Point3(0.0, 0.0, -1.0),
        up=WORLD_UP,
        angle_of_view=40.0,
        viewport=_viewport(aspect_ratio),
        f_stop=16.0,
    )

    scene = Scene()
    # Hollow glass shell: the inner sphere's negative radius flips its normals
    scene.add_sphere(Point3(-1.0, 0.0, -1.0), 0.5, GLASS)
    scene.add_sphere(Point3(-1.0, 0.0, -1.0), -0.4, GLASS)
    scene.add_sphere(Point3(0.0, 0.0, -1.0), 0.5, Lambertian(Color(0.1, 0.2, 0.5)))
    scene.add_sphere(Point3(1.0, 0.0, -1.0), 0.5, Metal(Color(0.8, 0.6, 0.2), 0.0))
    # Ground
    scene.add_sphere(Point3(0.0, -100.5, -1.0), 100.0, Hemispherical(Color(0.8, 0.8, 0.0)))
    return camera, scene


def _random_material(rng: np.random.Generator) -> Material:
    choice = rng.random()
    if choice < 0.8:
        r, g, b = rng.random(3) * rng.random(3)
        return Lambertian(Color(float(r), float(g), float(b)))
    if choice < 0.95:
        r, g, b = 0.5 + 0.5 * rng.random(3)
        return Metal(Color(float(r), float(g), float(b)), 0.5 * float(rng.random()))
    return GLASS


def large_scene(aspect_ratio: float, rng: np.random.Generator) -> tuple[Camera, Scene]:
    """Build the large scene.

    The 22x22 grid of small spheres is laid out with random offsets and
    materials drawn from ``rng``: 80% diffuse, 15% metal, 5% glass.

    Args:
        aspect_ratio: Image width divided by height.
        rng: Random source for the sphere grid.

    Returns:
        A (camera, scene) tuple.
    """
    camera = Camera.from_field_of_view(
        origin=Point3(13.0, 2.0, 3.0),
        target=Point3(3.36376, 0.517501, 0.776252),
        up=WORLD_UP,
        angle_of_view=36.0,
        viewport=_viewport(aspect_ratio),
        f_stop=32.0,
    )

    scene = Scene()
    scene.add_sphere(Point3(0.0, 1.0, 0.0), 1.0, GLASS)
    scene.add_sphere(Point3(-4.0, 1.0, 0.0), 1.0, Lambertian(Color(0.4, 0.2, 0.1)))
    scene.add_sphere(Point3(4.0, 1.0, 0.0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0))
    scene.add_sphere(Point3(0.0, -1000.0, 0.0), 1000.0, Hemispherical(Color(0.5, 0.5, 0.5)))

    for a in range(-11, 11):
        for b in range(-11, 11):
            dx, dz = rng.random(2)
            center = Point3(a + 0.9 * float(dx), 0.2, b + 0.9 * float(dz))
            scene.add_sphere(center, 0.2, _random_material(rng))
    return camera, scene


SCENE_NAMES = ("small", "large")


def get_scene(
    name: str,
    aspect_ratio: float,
    seed: int | None = None,
) -> tuple[Camera, Scene]:
    """Get a predefined scene and its camera by name.

    Args:
        name: One of ``SCENE_NAMES``.
        aspect_ratio: Image width divided by height.
        seed: Seed for randomly generated scene content. None draws fresh
            entropy from the operating system.

    Returns:
        A (camera, scene) tuple.

    Raises:
        ValueError: If the scene name is unknown or the aspect ratio is not
            positive.
    """
    if name == "small":
        camera, scene = small_scene(aspect_ratio)
    elif name == "large":
        camera, scene = large_scene(aspect_ratio, np.random.default_rng(seed))
    else:
        raise ValueError(f"Unknown scene {name!r}, expected one of {', '.join(SCENE_NAMES)}")
    logger.debug("Built scene %r with %d objects", name, len(scene))
    return camera, scene
