"""Single-threaded render loop.

The renderer fills an Image row by row. Row 0 is the top of the image, so the
vertical sample coordinate ``v`` runs from 1 at the top to 0 at the bottom.
Each pixel averages ``samples`` camera rays, each jittered uniformly within
the pixel footprint for anti-aliasing.

Every row draws from its own random stream, spawned from a single
``numpy.random.SeedSequence``. Rows are therefore independent units of work
and a fixed seed reproduces the same image.

Example:
    >>> from pathtracer.core.render import render
    >>> from pathtracer.scene.presets import get_scene
    >>> camera, scene = get_scene("small", aspect_ratio=2.0)
    >>> image = render(scene, camera, width=8, height=4, samples=2, depth=4, seed=1)
    >>> image.width, image.height
    (8, 4)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.image import Color, Image
from pathtracer.core.integrator import render_ray

if TYPE_CHECKING:
    from pathtracer.camera.thin_lens import Camera
    from pathtracer.scene.manager import Scene

logger = logging.getLogger(__name__)

# Callback receives the number of rows completed so far
ProgressCallback = Callable[[int], None]


@dataclass(frozen=True)
class RenderSettings:
    """Validated render parameters.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Camera rays averaged per pixel.
        depth: Maximum number of bounces per path.
    """

    width: int
    height: int
    samples: int = 100
    depth: int = 50

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.samples < 1:
            raise ValueError(f"Samples per pixel = {self.samples} must be at least 1")
        if self.depth < 0:
            raise ValueError(f"Depth = {self.depth} must not be negative")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def row_generators(height: int, seed: int | None = None) -> list[np.random.Generator]:
    """Create one independent random generator per image row."""
    return [np.random.default_rng(child) for child in np.random.SeedSequence(seed).spawn(height)]


def render_row(
    scene: Scene,
    camera: Camera,
    row: int,
    out: np.ndarray,
    settings: RenderSettings,
    rng: np.random.Generator,
    jitter: bool = True,
) -> None:
    """Render one row of the image into ``out``.

    Args:
        scene: The scene to render.
        camera: The camera generating primary rays.
        row: Row index, 0 at the top.
        out: Destination array of shape (width, 3).
        settings: Render parameters.
        rng: Random stream owned by this row.
        jitter: If False, every sample is a pinhole ray through the pixel
            center.
    """
    width, height, samples = settings.width, settings.height, settings.samples
    y = height - 1 - row
    for x in range(width):
        total = Color.black()
        for _ in range(samples):
            if jitter:
                du, dv = (float(value) for value in rng.random(2))
            else:
                du = dv = 0.5
            u = (x + du) / width
            v = (y + dv) / height
            ray = camera.ray(u, v, rng if jitter else None)
            total = total + render_ray(scene, ray, settings.depth, rng)
        out[x] = (total / samples).as_tuple()


def render(
    scene: Scene,
    camera: Camera,
    width: int,
    height: int,
    samples: int,
    depth: int,
    progress_callback: ProgressCallback | None = None,
    *,
    seed: int | None = None,
    jitter: bool = True,
) -> Image:
    """Render an image by path tracing.

    Args:
        scene: The scene to render.
        camera: The camera generating primary rays.
        width: Output image width.
        height: Output image height.
        samples: Samples per pixel.
        depth: Maximum recursion depth.
        progress_callback: Called after each row with the number of rows
            completed so far.
        seed: Seed for the per-row random streams. None draws fresh entropy.
        jitter: Jitter samples within the pixel and across the lens. With
            ``jitter=False`` every sample is a pinhole ray through the pixel
            center.

    Returns:
        The rendered image.

    Raises:
        ValueError: If any parameter is out of range.
    """
    settings = RenderSettings(width, height, samples, depth)
    image = Image(width, height)
    generators = row_generators(height, seed)

    logger.info(
        "Rendering %dx%d, %d samples per pixel, depth %d, %d objects",
        width,
        height,
        samples,
        depth,
        len(scene),
    )
    start = time.perf_counter()
    for row in range(height):
        render_row(scene, camera, row, image[row], settings, generators[row], jitter)
        if progress_callback is not None:
            progress_callback(row + 1)
    logger.info("Rendered %d rows in %.2fs", height, time.perf_counter() - start)
    return image
