"""Preview module for image output and display.

Components:
    export: PPM (P3) and Pillow-based image writers
    display: Gamma correction and a Matplotlib preview window
"""

from .display import apply_gamma, show_preview
from .export import (
    compute_rmse,
    image_to_uint8,
    load_image,
    save_image,
    save_png,
    write_ppm,
)

__all__ = [
    "apply_gamma",
    "show_preview",
    "compute_rmse",
    "image_to_uint8",
    "load_image",
    "save_image",
    "save_png",
    "write_ppm",
]
