"""Image export utilities for rendered images.

This module provides functions for saving rendered images to files with gamma
correction.

Supported formats:
    - PPM (plain-text P3 portable pixmap, one pixel per line)
    - PNG and anything else Pillow can write (8-bit RGB)

Every format shares the same quantization: each channel is clamped to
[0, 1], raised to ``1 / gamma``, scaled to 255 and rounded half up.

Example:
    >>> import io
    >>> from pathtracer.core.image import Color, Image
    >>> from pathtracer.preview.export import write_ppm
    >>>
    >>> image = Image(1, 1)
    >>> image[0, 0] = Color(1.0, 0.5, 0.0)
    >>> stream = io.StringIO()
    >>> write_ppm(stream, image, gamma=1.0)
    >>> stream.getvalue()
    'P3\\n1 1\\n255\\n255 128 0\\n'
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from pathtracer.preview.display import apply_gamma

if TYPE_CHECKING:
    from pathtracer.core.image import Image

logger = logging.getLogger(__name__)

# Callback receives the number of rows written so far
ProgressCallback = Callable[[int], None]

PPM_SUFFIXES = (".ppm", ".pnm")


def image_to_uint8(
    image: Image,
    gamma: float = 2.2,
) -> npt.NDArray[np.uint8]:
    """Convert an image to 8-bit channels for display/export.

    Args:
        image: The rendered image.
        gamma: Gamma correction value (default 2.2).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    corrected = apply_gamma(image.pixels, gamma).astype(np.float64)
    return np.floor(corrected * 255.0 + 0.5).astype(np.uint8)


def write_ppm(
    stream: TextIO,
    image: Image,
    gamma: float = 2.2,
    progress_callback: ProgressCallback | None = None,
) -> None:
    """Serialize an image as a plain-text P3 pixmap.

    The header is ``P3``, ``<width> <height>`` and ``255`` on separate lines,
    followed by one ``r g b`` line per pixel, rows top to bottom.

    Args:
        stream: Text stream to write into.
        image: The image to serialize.
        gamma: Gamma correction value (default 2.2).
        progress_callback: Called after each row with the number of rows
            written so far.
    """
    quantized = image_to_uint8(image, gamma)
    stream.write(f"P3\n{image.width} {image.height}\n255\n")
    for row_index, row in enumerate(quantized):
        stream.write("".join(f"{r} {g} {b}\n" for r, g, b in row))
        if progress_callback is not None:
            progress_callback(row_index + 1)


def save_png(
    image: Image,
    filepath: str | Path,
    gamma: float = 2.2,
) -> None:
    """Save the rendered image through Pillow.

    The format follows the file extension; the output is 8-bit RGB.

    Args:
        image: The image to save.
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value (default 2.2).
    """
    pil_image = PILImage.fromarray(image_to_uint8(image, gamma))
    pil_image.save(filepath)


def save_image(
    image: Image,
    filepath: str | Path,
    gamma: float = 2.2,
    progress_callback: ProgressCallback | None = None,
) -> None:
    """Save an image, choosing the format from the file extension.

    ``.ppm`` and ``.pnm`` are written as P3 text, everything else via Pillow.
    """
    path = Path(filepath)
    if path.suffix.lower() in PPM_SUFFIXES:
        with path.open("w", encoding="ascii") as stream:
            write_ppm(stream, image, gamma, progress_callback)
    else:
        save_png(image, path, gamma)
    logger.info("Saved %dx%d image to %s", image.width, image.height, path)


def load_image(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read an 8-bit RGB image back into a (H, W, 3) array via Pillow."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGB"), dtype=np.uint8)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
