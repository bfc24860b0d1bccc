"""Fractabubble -- approximate font glyphs with packed circles.

Rasterizes a glyph into an occupancy grid, then greedily packs it: find
the largest circle that fits entirely inside the remaining filled
pixels, record it, erase it, and repeat until nothing larger than the
minimum radius fits. The circles are written out as SVG, largest first.
"""

__version__ = "0.1.0"
