"""Geometry module for shape primitives and intersection algorithms.

Components:
    sphere: Ray-sphere intersection reporting every root in range
"""

from .sphere import Intersection, Sphere

__all__ = ["Intersection", "Sphere"]
