"""Core module for vector algebra, rays, images and the render loop.

Components:
    vector: Vector3 and Point3 algebra
    ray: Ray type, reflection and Monte Carlo sampling helpers
    image: Color values and the Image buffer
    integrator: Recursive radiance estimate and background gradient
    render: Single-threaded render loop with per-row random streams
    parallel: Taichi data-parallel renderer (requires taichi)

Only the dependency-free building blocks are re-exported here. Import the
integrator, render loop and parallel backend from their modules.
"""

from .image import Color, Image
from .ray import Ray, reflect
from .vector import Point3, Vector3

__all__ = ["Color", "Image", "Point3", "Ray", "Vector3", "reflect"]
