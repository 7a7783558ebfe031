"""Matplotlib-based preview display for rendered images.

This module provides gamma correction shared by the exporters and a
preview window for finished renders.

Example:
    >>> from pathtracer.preview.display import show_preview
    >>> from pathtracer.core.image import Image
    >>>
    >>> image = Image(64, 32)
    >>> show_preview(image, title="Empty")  # doctest: +SKIP
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from pathtracer.core.image import Image


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Apply gamma correction for display.

    Converts linear values to gamma space for correct display on standard
    monitors. Values are clamped to [0, 1] first; NaN channels become 0.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (default 2.2).

    Returns:
        Gamma corrected image in [0, 1].

    Raises:
        ValueError: If gamma is not positive.
    """
    if not gamma > 0.0:
        raise ValueError(f"Gamma = {gamma} must be positive")

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(np.nan_to_num(image, nan=0.0), 0.0, 1.0)
    if gamma == 1.0:
        return image.astype(np.float32)

    # Apply gamma encoding: out = in^(1/gamma)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def show_preview(
    image: Image,
    *,
    gamma: float = 2.2,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: The rendered image.
        gamma: Gamma correction value (default 2.2).
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = apply_gamma(image.pixels, gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = f"{image.width}x{image.height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
