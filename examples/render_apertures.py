#!/usr/bin/env python3
"""Render the small scene through differently shaped apertures.

This script renders the small demonstration scene once per aperture shape
(circular, then polygons with the given blade counts) using the Taichi
backend, and saves one PNG per shape. A wide aperture and a focus distance
in front of the spheres make the bokeh shape visible in the out-of-focus
highlights.

Usage:
    python examples/render_apertures.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 400)
    --height HEIGHT     Image height in pixels (default: 200)
    --samples SAMPLES   Number of samples per pixel (default: 64)
    --f-stop F_STOP     Aperture f-stop (default: 2.0)
    --blades N [N ...]  Polygon blade counts to render (default: 5 6)
    --output-dir DIR    Directory for the PNG files (default: .)

Example:
    python examples/render_apertures.py --samples 32 --blades 3 5 8
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the small scene through several aperture shapes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=400, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=200, help="Image height in pixels")
    parser.add_argument("--samples", type=int, default=64, help="Samples per pixel")
    parser.add_argument("--f-stop", type=float, default=2.0, help="Aperture f-stop")
    parser.add_argument(
        "--blades",
        type=int,
        nargs="+",
        default=[5, 6],
        help="Polygon blade counts to render (default: 5 6)",
    )
    parser.add_argument("--output-dir", type=str, default=".", help="Output directory")
    return parser.parse_args()


def render_apertures(
    width: int,
    height: int,
    samples: int,
    f_stop: float,
    blades: list[int],
    output_dir: Path,
) -> list[Path]:
    """Render one image per aperture shape.

    Returns:
        Paths of the saved images.
    """
    # Lazy imports to allow Taichi initialization first
    from pathtracer.camera import Camera
    from pathtracer.core.parallel import ParallelRenderer
    from pathtracer.preview.export import save_png
    from pathtracer.scene.presets import get_scene

    reference, scene = get_scene("small", width / height)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for blade_count in [0, *blades]:
        # Focus halfway to the target so the spheres fall out of focus
        camera = Camera(
            origin=reference.origin,
            target=reference.origin - reference.forward,
            up=reference.up,
            focal_length=reference.focal_length,
            viewport=(2.0 * width / height, 2.0),
            f_stop=f_stop,
            blades=blade_count,
            focus_distance=reference.focus_distance / 2.0,
        )
        name = "circle" if blade_count == 0 else f"{blade_count}_blades"
        print(f"Rendering {name} aperture...")

        start_time = time.time()
        image = ParallelRenderer(scene, camera).render(width, height, samples, depth=16)
        path = output_dir / f"aperture_{name}.png"
        save_png(image, path)
        print(f"  Saved to: {path} ({time.time() - start_time:.2f}s)")
        paths.append(path)
    return paths


def main() -> int:
    """Main entry point."""
    args = parse_args()
    ti.init(arch=ti.cpu, random_seed=0)

    try:
        render_apertures(
            args.width,
            args.height,
            args.samples,
            args.f_stop,
            args.blades,
            Path(args.output_dir),
        )
        return 0
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
