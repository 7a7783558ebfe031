"""Stochastic path tracer for scenes made of spheres.

This package renders still images by Monte Carlo path tracing, with support for:
- Diffuse (Lambertian, hemispherical), metal and dielectric materials
- A thin-lens camera with depth of field and polygonal apertures
- A single-threaded reference renderer and a Taichi data-parallel backend
- PPM and PNG output

Subpackages:
    core: Vector algebra, rays, images, the integrator and rendering loops
    geometry: Sphere primitive and ray intersection
    materials: Scattering models
    scene: Scene container, nearest-hit queries and demonstration scenes
    camera: Thin-lens camera with ray generation
    preview: Image export and preview utilities
"""

__version__ = "0.1.0"
