"""Data-parallel renderer built on Taichi kernels.

This module renders the same image as ``pathtracer.core.render`` but spreads
the pixels across Taichi's parallel backends (CPU threads or GPU). The scene
and camera are uploaded once into Taichi fields:

- Sphere storage as a Structure of Arrays (centers, radii)
- Packed materials (MaterialType, attenuation, scalar parameter)
- Camera vectors (origin, corner, horizontal, vertical, right, up)

Every material scatters at most one ray, so the recursive integrator becomes
a loop that multiplies a throughput color by each attenuation until the path
escapes to the background, is absorbed or runs out of depth. Each pixel uses
Taichi's per-thread random number generator, seeded by ``ti.init``.

Rows are rendered in batches. The kernel writes straight into the Image's
NumPy buffer and the progress callback fires once per finished row.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=42)
    >>> from pathtracer.core.parallel import ParallelRenderer
    >>> from pathtracer.scene.presets import get_scene
    >>>
    >>> camera, scene = get_scene("small", aspect_ratio=2.0)
    >>> renderer = ParallelRenderer(scene, camera)
    >>> image = renderer.render(width=200, height=100, samples=16, depth=8)
"""

import logging
import math
import time
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti
import taichi.math as tm

from pathtracer.core.image import Image
from pathtracer.core.integrator import HORIZON_COLOR, RAY_EPSILON, ZENITH_COLOR
from pathtracer.core.render import ProgressCallback, RenderSettings
from pathtracer.materials.material import MaterialType

if TYPE_CHECKING:
    from pathtracer.camera.thin_lens import Camera
    from pathtracer.scene.manager import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3
vec2 = tm.vec2

# =============================================================================
# Rendering Constants
# =============================================================================

# Upper bound for hit distances
T_MAX = 1e10

# Material dispatch codes
LAMBERTIAN = int(MaterialType.LAMBERTIAN)
HEMISPHERICAL = int(MaterialType.HEMISPHERICAL)
METAL = int(MaterialType.METAL)

# Camera vector slots
_ORIGIN, _CORNER, _HORIZONTAL, _VERTICAL, _RIGHT, _UP = range(6)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector uniformly distributed on the sphere.

    Rejection-samples the unit ball and normalizes the accepted point.
    """
    p = vec3(0.0, 0.0, 1.0)
    found = False
    for _ in range(100):  # Max iterations to avoid infinite loops
        if not found:
            q = vec3(
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
            )
            length_sq = q.dot(q)
            if length_sq > 1e-12 and length_sq < 1.0:
                p = q / ti.sqrt(length_sq)
                found = True
    return p


@ti.func
def random_in_unit_disk() -> vec2:
    """Generate a random point inside the unit disk."""
    p = vec2(0.0, 0.0)
    found = False
    for _ in range(100):
        if not found:
            q = vec2(ti.random(ti.f32) * 2.0 - 1.0, ti.random(ti.f32) * 2.0 - 1.0)
            if q.dot(q) < 1.0:
                p = q
                found = True
    return p


@ti.func
def random_in_polygon(blades: ti.i32) -> vec2:
    """Generate a random point inside a regular polygon of unit circumradius.

    Samples a canonical wedge triangle (folding points that fall outside it)
    and rotates it into a uniformly chosen wedge.
    """
    angle = 2.0 * tm.pi / ti.cast(blades, ti.f32)
    s = ti.random(ti.f32)
    t = ti.random(ti.f32)
    if s + t > 1.0:
        s = 1.0 - s
        t = 1.0 - t
    x = s + t * ti.cos(angle)
    y = t * ti.sin(angle)
    wedge = ti.min(ti.cast(ti.random(ti.f32) * blades, ti.i32), blades - 1)
    rotation = angle * ti.cast(wedge, ti.f32)
    cos_r = ti.cos(rotation)
    sin_r = ti.sin(rotation)
    return vec2(x * cos_r - y * sin_r, x * sin_r + y * cos_r)


# =============================================================================
# Scattering (one ray in, at most one ray out)
# =============================================================================


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    return incident - 2.0 * incident.dot(normal) * normal


@ti.func
def scatter_lambertian(normal: vec3) -> vec3:
    direction = normal + random_unit_vector()
    if ti.abs(direction.x) < 1e-8 and ti.abs(direction.y) < 1e-8 and ti.abs(direction.z) < 1e-8:
        direction = normal
    return direction


@ti.func
def scatter_hemispherical(normal: vec3) -> vec3:
    direction = random_unit_vector()
    if direction.dot(normal) <= 0.0:
        direction = -direction
    return direction


@ti.func
def scatter_metal(incident: vec3, normal: vec3, fuzziness: ti.f32):
    """Reflect with fuzz.

    Returns:
        A tuple (direction, did_scatter) where did_scatter is 0 when the
        perturbed direction points into the surface.
    """
    reflected = reflect(incident, normal)
    direction = reflected
    if fuzziness > 0.0:
        axis = vec3(1.0, 0.0, 0.0)
        if ti.abs(reflected.x) >= 0.9:
            axis = vec3(0.0, 1.0, 0.0)
        projected = reflected * (reflected.dot(axis) / reflected.dot(reflected))
        e1 = tm.normalize(axis - projected)
        e2 = reflected.cross(e1)
        offset = random_in_unit_disk()
        direction = reflected + (e1 * offset.x + e2 * offset.y) * fuzziness
    did_scatter = 0
    if direction.dot(normal) > 0.0:
        did_scatter = 1
    return direction, did_scatter


@ti.func
def scatter_dielectric(incident: vec3, normal: vec3, refractive_index: ti.f32) -> vec3:
    """Reflect or refract following Snell's law and Schlick's approximation."""
    n = normal
    ratio = 1.0 / refractive_index
    cos_theta = ti.min(-incident.dot(n), 1.0)
    if cos_theta < 0.0:
        n = -n
        ratio = 1.0 / ratio
        cos_theta = ti.min(-incident.dot(n), 1.0)

    sin_theta = ti.sqrt(ti.max(0.0, 1.0 - cos_theta * cos_theta))
    r0 = (1.0 - ratio) / (1.0 + ratio)
    r0 = r0 * r0
    reflectance = r0 + (1.0 - r0) * (1.0 - cos_theta) ** 5

    direction = vec3(0.0, 0.0, 0.0)
    if ratio * sin_theta > 1.0 or ti.random(ti.f32) < reflectance:
        direction = reflect(incident, n)
    else:
        perpendicular = ratio * (incident + cos_theta * n)
        parallel = -ti.sqrt(ti.abs(1.0 - perpendicular.dot(perpendicular))) * n
        direction = perpendicular + parallel
    return direction


@ti.func
def background(direction: vec3) -> vec3:
    t = 0.5 * (direction.y + 1.0)
    horizon = vec3(HORIZON_COLOR.r, HORIZON_COLOR.g, HORIZON_COLOR.b)
    zenith = vec3(ZENITH_COLOR.r, ZENITH_COLOR.g, ZENITH_COLOR.b)
    return (1.0 - t) * horizon + t * zenith


# =============================================================================
# Renderer
# =============================================================================


@ti.data_oriented
class ParallelRenderer:
    """Render a scene with Taichi kernels.

    Taichi must be initialized (``ti.init``) before the renderer is created.
    The scene and camera are copied into Taichi fields at construction, so
    later changes to them are not picked up.

    Attributes:
        num_spheres: Number of spheres uploaded.
        lens_radius: The camera lens radius.
        blades: The camera aperture blade count.
    """

    def __init__(self, scene: "Scene", camera: "Camera") -> None:
        self.num_spheres = len(scene)
        size = max(1, self.num_spheres)

        # Sphere and material storage: Structure of Arrays layout
        self.centers = ti.Vector.field(3, dtype=ti.f32, shape=size)
        self.radii = ti.field(dtype=ti.f32, shape=size)
        self.material_types = ti.field(dtype=ti.i32, shape=size)
        self.attenuations = ti.Vector.field(3, dtype=ti.f32, shape=size)
        self.params = ti.field(dtype=ti.f32, shape=size)
        self.camera = ti.Vector.field(3, dtype=ti.f32, shape=6)

        self._upload_scene(scene, size)
        self._upload_camera(camera)
        logger.debug("Uploaded %d spheres to Taichi fields", self.num_spheres)

    def _upload_scene(self, scene: "Scene", size: int) -> None:
        centers = np.zeros((size, 3), dtype=np.float32)
        radii = np.zeros(size, dtype=np.float32)
        types = np.zeros(size, dtype=np.int32)
        attenuations = np.zeros((size, 3), dtype=np.float32)
        params = np.zeros(size, dtype=np.float32)

        for i, obj in enumerate(scene):
            material_type, attenuation, param = obj.material.packed()
            centers[i] = obj.surface.center.as_tuple()
            radii[i] = obj.surface.radius
            types[i] = int(material_type)
            attenuations[i] = attenuation.as_tuple()
            params[i] = param

        self.centers.from_numpy(centers)
        self.radii.from_numpy(radii)
        self.material_types.from_numpy(types)
        self.attenuations.from_numpy(attenuations)
        self.params.from_numpy(params)

    def _upload_camera(self, camera: "Camera") -> None:
        vectors = np.zeros((6, 3), dtype=np.float32)
        vectors[_ORIGIN] = camera.origin.as_tuple()
        vectors[_CORNER] = camera.corner.as_tuple()
        vectors[_HORIZONTAL] = camera.horizontal.as_tuple()
        vectors[_VERTICAL] = camera.vertical.as_tuple()
        vectors[_RIGHT] = camera.right.as_tuple()
        vectors[_UP] = camera.up.as_tuple()
        self.camera.from_numpy(vectors)
        self.lens_radius = float(camera.lens_radius)
        self.blades = int(camera.blades)

    @ti.func
    def _closest_hit(self, origin: vec3, direction: vec3):
        """Find the nearest sphere root in ``[RAY_EPSILON, T_MAX)``.

        NaN roots fail both comparisons and are never selected. Ties keep
        the first candidate in scene order.

        Returns:
            A tuple (index, t) with index -1 on a miss.
        """
        best_index = -1
        best_t = T_MAX
        for i in range(self.num_spheres):
            offset = origin - self.centers[i]
            radius = self.radii[i]
            a = direction.dot(direction)
            b = offset.dot(direction)
            c = offset.dot(offset) - radius * radius
            discriminant = b * b - a * c
            if discriminant >= 0.0:
                sqrt_d = ti.sqrt(discriminant)
                t0 = (-b - sqrt_d) / a
                t1 = (-b + sqrt_d) / a
                if t0 >= RAY_EPSILON and t0 < best_t:
                    best_t = t0
                    best_index = i
                if t1 >= RAY_EPSILON and t1 < best_t:
                    best_t = t1
                    best_index = i
        return best_index, best_t

    @ti.func
    def _camera_ray(self, u: ti.f32, v: ti.f32, lens_radius: ti.f32, blades: ti.i32):
        origin = self.camera[_ORIGIN]
        target = self.camera[_CORNER] + u * self.camera[_HORIZONTAL] + v * self.camera[_VERTICAL]
        if lens_radius > 0.0:
            offset = vec2(0.0, 0.0)
            if blades >= 3:
                offset = random_in_polygon(blades)
            else:
                offset = random_in_unit_disk()
            origin += (offset.x * self.camera[_RIGHT] + offset.y * self.camera[_UP]) * lens_radius
        return origin, tm.normalize(target - origin)

    @ti.func
    def _trace(self, ray_origin: vec3, ray_direction: vec3, depth: ti.i32) -> vec3:
        """Follow one path and return its radiance estimate."""
        origin = ray_origin
        direction = ray_direction
        color = vec3(0.0, 0.0, 0.0)
        throughput = vec3(1.0, 1.0, 1.0)
        active = 1
        for _ in range(depth):
            if active == 1:
                index, t = self._closest_hit(origin, direction)
                if index < 0:
                    color = throughput * background(direction)
                    active = 0
                else:
                    point = origin + t * direction
                    normal = tm.normalize((point - self.centers[index]) / self.radii[index])
                    material_type = self.material_types[index]
                    param = self.params[index]

                    new_direction = vec3(0.0, 0.0, 0.0)
                    did_scatter = 1
                    if material_type == LAMBERTIAN:
                        new_direction = scatter_lambertian(normal)
                    elif material_type == HEMISPHERICAL:
                        new_direction = scatter_hemispherical(normal)
                    elif material_type == METAL:
                        new_direction, did_scatter = scatter_metal(direction, normal, param)
                    else:
                        new_direction = scatter_dielectric(direction, normal, param)

                    if did_scatter == 1:
                        throughput *= self.attenuations[index]
                        origin = point
                        direction = tm.normalize(new_direction)
                    else:
                        active = 0
        return color

    @ti.kernel
    def _render_rows(
        self,
        pixels: ti.types.ndarray(dtype=ti.f32, ndim=3),
        first_row: ti.i32,
        row_count: ti.i32,
        width: ti.i32,
        height: ti.i32,
        samples: ti.i32,
        depth: ti.i32,
        jitter: ti.i32,
        lens_radius: ti.f32,
        blades: ti.i32,
    ):
        for r, x in ti.ndrange(row_count, width):
            row = first_row + r
            y = height - 1 - row
            total = vec3(0.0, 0.0, 0.0)
            for _ in range(samples):
                du = 0.5
                dv = 0.5
                if jitter != 0:
                    du = ti.random(ti.f32)
                    dv = ti.random(ti.f32)
                u = (ti.cast(x, ti.f32) + du) / ti.cast(width, ti.f32)
                v = (ti.cast(y, ti.f32) + dv) / ti.cast(height, ti.f32)
                origin, direction = self._camera_ray(u, v, lens_radius, blades)
                total += self._trace(origin, direction, depth)
            color = total / ti.cast(samples, ti.f32)
            for k in ti.static(range(3)):
                pixels[row, x, k] = color[k]

    def render(
        self,
        width: int,
        height: int,
        samples: int,
        depth: int,
        progress_callback: "ProgressCallback | None" = None,
        jitter: bool = True,
        rows_per_batch: int = 16,
    ) -> Image:
        """Render an image.

        Args:
            width: Output image width.
            height: Output image height.
            samples: Samples per pixel.
            depth: Maximum number of bounces per path.
            progress_callback: Called after each row with the number of rows
                completed so far.
            jitter: Jitter samples within the pixel and across the lens. With
                ``jitter=False`` every sample is a pinhole ray through the
                pixel center.
            rows_per_batch: Rows rendered per kernel launch.

        Returns:
            The rendered image.

        Raises:
            ValueError: If any parameter is out of range.
        """
        settings = RenderSettings(width, height, samples, depth)
        if rows_per_batch < 1:
            raise ValueError(f"Rows per batch = {rows_per_batch} must be at least 1")

        image = Image(settings.width, settings.height)
        logger.info(
            "Rendering %dx%d with Taichi, %d samples per pixel, depth %d",
            width,
            height,
            samples,
            depth,
        )
        start = time.perf_counter()
        for first_row in range(0, height, rows_per_batch):
            row_count = min(rows_per_batch, height - first_row)
            self._render_rows(
                image.pixels,
                first_row,
                row_count,
                width,
                height,
                samples,
                depth,
                int(jitter),
                self.lens_radius if jitter else 0.0,
                self.blades,
            )
            if progress_callback is not None:
                for row in range(first_row, first_row + row_count):
                    progress_callback(row + 1)
        ti.sync()
        logger.info("Rendered %d rows in %.2fs", height, time.perf_counter() - start)
        return image

    def __repr__(self) -> str:
        return f"ParallelRenderer(spheres={self.num_spheres}, lens_radius={self.lens_radius})"


def default_rows_per_batch(height: int) -> int:
    """Pick a batch size giving roughly 32 progress updates per image."""
    return max(1, math.ceil(height / 32))
