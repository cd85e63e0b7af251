"""
raytracer -- render a demo scene or an OBJ model to an image file.

Usage:
    python -m raytracer --scene glass --width 320 --height 160 --antialias
    python -m raytracer --obj teapot.obj --output images/teapot.png --preview
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from raytracer.config import LOG_LEVEL, MAX_DEPTH, OUTPUT_DIR, RENDER_HEIGHT, RENDER_WIDTH
from raytracer.logging_config import setup_logging
from raytracer.scenes import SCENES, obj_scene

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="raytracer",
        description="Offline ray tracer: render a scene to PNG/PPM.",
        epilog=(
            "examples:\n"
            "  %(prog)s --scene three-spheres\n"
            "  %(prog)s --scene glass --antialias --output out/glass.png\n"
            "  %(prog)s --obj model.obj --preview\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene", choices=sorted(SCENES), default="three-spheres",
        help="built-in scene to render (default: three-spheres)",
    )
    parser.add_argument(
        "--obj", type=Path, metavar="FILE",
        help="render this Wavefront OBJ model instead of a built-in scene",
    )
    parser.add_argument(
        "--width", type=int, default=RENDER_WIDTH,
        help=f"image width in pixels (default: {RENDER_WIDTH})",
    )
    parser.add_argument(
        "--height", type=int, default=RENDER_HEIGHT,
        help=f"image height in pixels (default: {RENDER_HEIGHT})",
    )
    parser.add_argument(
        "--antialias", action="store_true",
        help="2x2 supersampling (four times the rays)",
    )
    parser.add_argument(
        "--depth", type=int, default=MAX_DEPTH,
        help=f"reflection/refraction recursion limit (default: {MAX_DEPTH})",
    )
    parser.add_argument(
        "-o", "--output", type=Path, metavar="FILE",
        help=f"output image; format from the extension (default: {OUTPUT_DIR}/<scene>.png)",
    )
    parser.add_argument(
        "--preview", action="store_true",
        help="show the result in a pygame window",
    )
    parser.add_argument(
        "--log-level", default=LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help=f"logging verbosity (default: {LOG_LEVEL})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.width < 1 or args.height < 1:
        parser.error("--width and --height must be positive")
    if args.depth < 0:
        parser.error("--depth cannot be negative")
    if args.obj is not None and not args.obj.is_file():
        parser.error(f"cannot read OBJ file: {args.obj}")

    setup_logging(level=args.log_level)

    if args.obj is not None:
        name = args.obj.stem
        world, camera = obj_scene(args.obj, args.width, args.height)
    else:
        name = args.scene
        world, camera = SCENES[args.scene](args.width, args.height)

    logger.info("Rendering %s: %r, %r", name, world, camera)
    canvas = camera.render(world, antialias=args.antialias, depth=args.depth)

    output = args.output if args.output is not None else OUTPUT_DIR / f"{name}.png"
    written = canvas.save(output)
    logger.info("Written: %s", written)

    if args.preview:
        # pygame is only needed for the window
        from raytracer.preview import show
        show(canvas, title=name)
    return 0
