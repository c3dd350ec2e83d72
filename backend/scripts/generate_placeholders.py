#!/usr/bin/env python3
"""Generate static SVG placeholders for tapes missing both cover and side images.

Usage:
    python backend/scripts/generate_placeholders.py data/tapes.json out/placeholders
    python backend/scripts/generate_placeholders.py tapes.json out --gradients
    python backend/scripts/generate_placeholders.py tapes.json out --max-elements 120
"""

import argparse
import logging
import sys

from engine.export import ExportStatus, PlaceholderExporter, load_tapes
from engine.generator import PatternGenerator, cache_from_env
from engine.models import DEFAULT_MAX_ELEMENTS, PatternConfig
from security import validate_config, validate_output_dir, validate_tapes_path

logger = logging.getLogger("generate_placeholders")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render placeholder tape labels")
    parser.add_argument("tapes", help="Path to tapes JSON")
    parser.add_argument("output_dir", help="Directory for <id>.svg files")
    parser.add_argument(
        "--max-elements",
        type=int,
        default=DEFAULT_MAX_ELEMENTS,
        help=f"Element cap per label (default {DEFAULT_MAX_ELEMENTS})",
    )
    parser.add_argument(
        "--gradients", action="store_true", help="Allow gradient paint"
    )
    parser.add_argument(
        "--exact",
        action="store_true",
        help="Emit full-precision path coordinates instead of one decimal",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    config = PatternConfig(
        max_elements=args.max_elements,
        enable_gradients=args.gradients,
        simplify_paths=not args.exact,
    )
    errors = (
        validate_tapes_path(args.tapes)
        + validate_config(config.to_dict())
        + validate_output_dir(args.output_dir)
    )
    if errors:
        for err in errors:
            logger.error(err)
        return 2

    try:
        tapes = load_tapes(args.tapes)
    except ValueError as e:
        logger.error("Unreadable tapes file: %s", e)
        return 2
    logger.info("Generating placeholders for %d tapes...", len(tapes))

    exporter = PlaceholderExporter(PatternGenerator(cache_from_env()), config)
    job = exporter.start(tapes, args.output_dir)
    try:
        job.wait()
    except KeyboardInterrupt:
        exporter.cancel()
        job.wait()

    status = exporter.get_status()
    if job.status is ExportStatus.ERROR:
        logger.error(status["error"])
        return 1
    if job.status is ExportStatus.CANCELLED:
        logger.warning("Cancelled after %d of %d", job.current, job.total)
        return 130

    logger.info("Generated %d placeholders", status["current"])
    logger.info("Skipped %d tapes (have cover or sides images)", status["skipped"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
