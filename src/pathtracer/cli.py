"""Command line interface for rendering the demonstration scenes.

Usage:
    pathtracer [options]

Options:
    -o, --output OUTPUT   Output file, ``-`` for PPM on stdout (default: -)
    --width WIDTH         Image width in pixels (default: 400)
    --height HEIGHT       Image height in pixels (default: 225)
    --samples SAMPLES     Number of samples per pixel (default: 100)
    --depth DEPTH         Maximum number of bounces per path (default: 50)
    --scene NAME          Scene to render: small or large (default: small)
    --gamma GAMMA         Gamma correction for the output (default: 2.2)
    --seed SEED           Seed for reproducible renders
    --backend NAME        python (reference) or taichi (parallel)
    --arch ARCH           Taichi architecture: cpu or gpu (default: cpu)
    --preview             Show the result in a Matplotlib window
    -q, --quiet           Suppress progress output
    -v, --verbose         Enable debug logging

The output format follows the file extension: ``.ppm`` writes a plain-text
P3 pixmap, anything else (``.png``, ``.jpg``, ...) is written with Pillow.

Example:
    pathtracer --scene large --width 320 --height 180 --samples 16 -o large.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Sequence

from pathtracer.core.image import Image
from pathtracer.core.render import RenderSettings, render
from pathtracer.preview.export import save_image, write_ppm
from pathtracer.scene.presets import SCENE_NAMES, get_scene

logger = logging.getLogger(__name__)

BACKENDS = ("python", "taichi")
ARCHS = ("cpu", "gpu")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Render a scene of spheres by stochastic path tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file path, '-' for PPM on stdout (default: -)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=225,
        help="Image height in pixels (default: 225)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=50,
        help="Maximum number of bounces per path (default: 50)",
    )
    parser.add_argument(
        "--scene",
        choices=SCENE_NAMES,
        default="small",
        help="Scene to render (default: small)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=2.2,
        help="Gamma correction for the output (default: 2.2)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for reproducible renders (default: random)",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="python",
        help="Renderer backend (default: python)",
    )
    parser.add_argument(
        "--arch",
        choices=ARCHS,
        default="cpu",
        help="Taichi architecture for the taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the rendered image in a Matplotlib window",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse and validate command-line arguments.

    Exits with status 2 (argparse convention) on invalid values.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        RenderSettings(args.width, args.height, args.samples, args.depth)
    except ValueError as exc:
        parser.error(str(exc))
    if not args.gamma > 0.0:
        parser.error(f"Gamma = {args.gamma} must be positive")
    return args


def _render_with_taichi(args: argparse.Namespace, camera, scene, callback) -> Image:
    # Lazy import so the reference backend works without Taichi
    import taichi as ti

    from pathtracer.core.parallel import ParallelRenderer, default_rows_per_batch

    arch = ti.gpu if args.arch == "gpu" else ti.cpu
    init_kwargs = {"arch": arch, "log_level": ti.WARN}
    if args.seed is not None:
        init_kwargs["random_seed"] = args.seed
    ti.init(**init_kwargs)

    renderer = ParallelRenderer(scene, camera)
    return renderer.render(
        args.width,
        args.height,
        args.samples,
        args.depth,
        progress_callback=callback,
        rows_per_batch=default_rows_per_batch(args.height),
    )


def run(args: argparse.Namespace) -> Image:
    """Render and save an image as described by parsed arguments.

    Returns:
        The rendered image.
    """
    quiet = args.quiet
    camera, scene = get_scene(args.scene, args.width / args.height, seed=args.seed)

    if not quiet:
        print(
            f"Rendering {args.scene} scene ({args.width}x{args.height}, "
            f"{args.samples} spp, depth {args.depth}, {args.backend} backend)...",
            file=sys.stderr,
        )

    start_time = time.time()

    def progress_callback(rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            print(
                f"\r  Rendered line {rows}/{args.height} ({elapsed:.1f}s)",
                end="",
                flush=True,
                file=sys.stderr,
            )

    if args.backend == "taichi":
        image = _render_with_taichi(args, camera, scene, progress_callback)
    else:
        image = render(
            scene,
            camera,
            args.width,
            args.height,
            args.samples,
            args.depth,
            progress_callback,
            seed=args.seed,
        )

    if not quiet:
        print(f"\n{args.height} lines rendered!", file=sys.stderr)

    if args.output == "-":
        write_ppm(sys.stdout, image, args.gamma)
        sys.stdout.flush()
    else:
        save_image(image, args.output, args.gamma)
        if not quiet:
            print(f"Image saved to: {args.output}", file=sys.stderr)

    if args.preview:
        from pathtracer.preview.display import show_preview

        show_preview(image, gamma=args.gamma, title=f"{args.scene} ({args.samples} spp)")

    return image


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug("Arguments: %s", vars(args))
    run(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
