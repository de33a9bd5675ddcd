#!/usr/bin/env python3
"""CLI for content-aware width reduction."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from width_carve.errors import DecodeError, EncodeError, InvalidTargetError
from width_carve.raster import Raster
from width_carve.resizer import WidthResizer, load_raster, parse_target_width, save_raster

logger = logging.getLogger("width_carve")

EXIT_DECODE = 1
EXIT_INVALID_TARGET = 2

DEFAULT_OUTPUT = "output.jpg"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
    )


def _save_visualization(vis: np.ndarray, output: str) -> bool:
    """Write a debug view; a failed write is only a warning."""
    try:
        save_raster(Raster(vis), output)
    except EncodeError as ex:
        logger.warning("%s", ex)
        return False
    return True


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="width-carve",
        description="Reduce image width by removing low-energy seams",
    )
    parser.add_argument(
        "input", type=str, nargs="?", default="input.jpg", help="Input image path"
    )
    parser.add_argument(
        "-o", "--output", type=str, help=f"Output image path (default: {DEFAULT_OUTPUT})"
    )
    parser.add_argument(
        "-w", "--width", type=str,
        help="Target width in pixels (prompted for when omitted)"
    )
    parser.add_argument(
        "-j", "--workers", type=int,
        help="Threads for the energy pass (default: CPU count)"
    )
    parser.add_argument(
        "--quality", type=int, default=95,
        help="Output JPEG quality"
    )
    parser.add_argument(
        "--no-progress", action="store_true",
        help="Hide the progress bar"
    )
    parser.add_argument(
        "--visualize-energy", action="store_true",
        help="Save the energy map instead of carving"
    )
    parser.add_argument(
        "--visualize-seams", type=int, metavar="N",
        help="Save the first N seams that would be removed instead of carving"
    )
    parser.add_argument(
        "--log-level", type=str.upper, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    input_path = Path(args.input)
    try:
        raster = load_raster(input_path)
    except DecodeError as ex:
        logger.error("Error loading image: %s", ex)
        return EXIT_DECODE

    resizer = WidthResizer(
        workers=args.workers,
        quality=args.quality,
        show_progress=not args.no_progress,
    )

    # Handle visualization modes
    if args.visualize_energy or args.visualize_seams is not None:
        try:
            if args.visualize_energy:
                vis = resizer.carver.visualize_energy(raster)
                output = args.output or f"{input_path.stem}_energy.png"
                if _save_visualization(vis, output):
                    print(f"Energy map saved to: {output}")

            if args.visualize_seams is not None:
                vis = resizer.carver.visualize_seams(raster, n_seams=args.visualize_seams)
                output = args.output or f"{input_path.stem}_seams.png"
                if _save_visualization(vis, output):
                    print(f"Seam visualization saved to: {output}")
        except InvalidTargetError as ex:
            logger.error("%s", ex)
            return EXIT_INVALID_TARGET
        return 0

    print(f"Current dimensions: {raster.width}x{raster.height}")

    text = args.width
    if text is None:
        try:
            text = input("Enter target width: ")
        except (EOFError, KeyboardInterrupt):
            # No line was read; parsed below as an invalid number
            text = ""

    try:
        target_width = parse_target_width(text, raster.width)
    except InvalidTargetError as ex:
        logger.error("%s", ex)
        return EXIT_INVALID_TARGET

    print("Starting seam carving...")
    result = resizer.run(raster, target_width, output_path=args.output or DEFAULT_OUTPUT)

    width, height = result.final_size
    print(f"Final dimensions: {width}x{height}")
    if result.saved:
        print(f"Saved result to {result.output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
