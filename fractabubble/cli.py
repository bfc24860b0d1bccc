"""Command-line interface.

Typical usage:
    $ fractabubble pack LiberationMono-Regular.ttf a a.svg --min-radius 5
    $ fractabubble atlas LiberationMono-Regular.ttf glyphs/ --jobs 4

Each run prints a JSON summary to stdout. Logs go to stderr. Invalid
options exit with status 2, font and output failures with status 1.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import structlog

from .atlas import DEFAULT_GLYPHS, build_atlas
from .config import PackingConfig, load_config, make_config
from .oracle import ORACLES
from .packer import GreedyPacker
from .rasterizer import GlyphRasterizer
from .renderer import render_png, write_svg

EXIT_FAILURE = 1
EXIT_USAGE = 2


def _configure_logging(verbose: bool) -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _add_config_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", help="JSON config file; flags override its values.")
    p.add_argument("--min-radius", type=int, help="Stop when no circle this large fits (fineness).")
    p.add_argument("--max-radius", type=int, help="Never report a circle larger than this.")
    p.add_argument("--height", dest="image_height", type=int, help="Canvas height in pixels.")
    p.add_argument("--threshold", type=int, help="Intensity above which a pixel is filled.")
    p.add_argument("--oracle", choices=sorted(ORACLES), help="Radius strategy.")
    p.add_argument("--fill", help="Circle fill color (#rrggbb).")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every packed circle.")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fractabubble",
        description="Approximate font glyphs with greedily packed circles.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    pk = sub.add_parser("pack", help="Pack one glyph into an SVG.")
    pk.add_argument("font", help="Font file.")
    pk.add_argument("glyph", help="Single character to pack.")
    pk.add_argument("output", help="Output SVG path.")
    pk.add_argument("--png", help="Also write a PNG rendering to this path.")
    _add_config_options(pk)

    at = sub.add_parser("atlas", help="Pack a glyph set and write an atlas index.")
    at.add_argument("font", help="Font file.")
    at.add_argument("out_dir", help="Output directory.")
    at.add_argument("--glyphs", default=DEFAULT_GLYPHS, help="Characters to pack.")
    at.add_argument("--jobs", type=int, default=1, help="Parallel worker processes.")
    _add_config_options(at)
    return p


def config_from_args(args: argparse.Namespace) -> PackingConfig:
    """Merge the config file (if any) with command-line overrides.

    Raises:
        ValueError: If the merged configuration is invalid.
    """
    overrides = {
        "min_radius": args.min_radius,
        "max_radius": args.max_radius,
        "image_height": args.image_height,
        "threshold": args.threshold,
        "oracle": args.oracle,
        "fill": args.fill,
    }
    if args.config:
        return load_config(args.config, **overrides)
    return make_config(**{k: v for k, v in overrides.items() if v is not None})


def _run_pack(args: argparse.Namespace, config: PackingConfig) -> dict:
    rasterizer = GlyphRasterizer.from_config(args.font, config)
    grid = rasterizer.rasterize(args.glyph, threshold=config.threshold)
    packer = GreedyPacker(
        oracle=config.oracle,
        min_radius=config.min_radius,
        max_radius=config.max_radius,
    )
    result = packer.pack(grid)
    out = write_svg(args.output, result, fill=config.fill)
    summary = {"glyph": args.glyph, "svg": str(out), **result.to_dict()}
    if args.png:
        png_path = Path(args.png)
        png_path.parent.mkdir(parents=True, exist_ok=True)
        png_path.write_bytes(render_png(result, fill=config.fill))
        summary["png"] = str(png_path)
    return summary


def _run_atlas(args: argparse.Namespace, config: PackingConfig) -> dict:
    if args.jobs < 1:
        raise ValueError(f"--jobs must be at least 1, got {args.jobs}")
    entries = build_atlas(args.font, args.out_dir, config, glyphs=args.glyphs, jobs=args.jobs)
    return {
        "out_dir": args.out_dir,
        "glyphs": len(entries),
        "circles": sum(e.circles for e in entries),
    }


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = config_from_args(args)
    except (ValueError, FileNotFoundError) as e:
        print(f"fractabubble: invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        if args.command == "pack":
            summary = _run_pack(args, config)
        else:
            summary = _run_atlas(args, config)
    except (ValueError, OSError) as e:
        print(f"fractabubble: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(json.dumps(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
