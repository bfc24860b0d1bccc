#!/usr/bin/env python3
"""Basic usage example for fractabubble.

Packs a synthetic ring-shaped grid with both radius strategies, then
packs a real glyph if a font path is given.

Usage:
    python examples/basic_usage.py [FONT.ttf] [GLYPH]
"""

import os
import sys

import numpy as np

# Add parent directory to path for direct script execution
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fractabubble.grid import OccupancyGrid
from fractabubble.packer import pack
from fractabubble.rasterizer import GlyphRasterizer
from fractabubble.renderer import render_svg


def example_ring():
    """Pack an annulus and compare the two strategies."""
    print("=" * 60)
    print("Example 1: Packing a ring")
    print("=" * 60)

    yy, xx = np.mgrid[0:80, 0:80]
    d2 = (xx - 40) ** 2 + (yy - 40) ** 2
    grid = OccupancyGrid((d2 < 36**2) & (d2 >= 18**2))
    print(f"  Grid:        {grid}")

    for oracle in ("scan", "growth"):
        result = pack(grid, min_radius=3, oracle=oracle, copy=True)
        radii = [c.radius for c in result.circles]
        print(f"  {oracle:<7}      {len(radii)} circles, radii {radii[:6]}...")
        print(f"  coverage:    {result.coverage:.1%}")
    print()


def example_glyph(font_path, glyph):
    """Pack one glyph and print the SVG."""
    print("=" * 60)
    print(f"Example 2: Packing {glyph!r} from {font_path}")
    print("=" * 60)

    grid = GlyphRasterizer(font_path, image_height=128).rasterize(glyph)
    result = pack(grid, min_radius=3, max_radius=30)
    print(f"  Circles:     {len(result.circles)}")
    print(f"  Coverage:    {result.coverage:.1%}")
    print(render_svg(result))


if __name__ == "__main__":
    example_ring()
    if len(sys.argv) > 1:
        example_glyph(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else "a")
