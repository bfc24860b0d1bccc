"""Shared fixtures: a tiny generated font and random occupancy grids."""

import numpy as np
import pytest
import structlog
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from fractabubble.grid import OccupancyGrid

# Glyph boxes in font units (x0, y0, x1, y1), baseline at y = 0.
GLYPH_BOXES = {
    "a": ("square", (100, 0, 500, 400)),
    "l": ("bar", (250, 0, 350, 680)),
    ".": ("period", (250, 0, 350, 100)),
}


def _box_glyph(x0, y0, x1, y1):
    pen = TTGlyphPen(None)
    pen.moveTo((x0, y0))
    pen.lineTo((x0, y1))
    pen.lineTo((x1, y1))
    pen.lineTo((x1, y0))
    pen.closePath()
    return pen.glyph()


@pytest.fixture(scope="session")
def font_path(tmp_path_factory):
    """Monospace test font with a square 'a', a tall 'l' and a '.'."""
    names = [name for name, _ in GLYPH_BOXES.values()]
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "space"] + names)
    fb.setupCharacterMap({0x20: "space", **{ord(ch): name for ch, (name, _) in GLYPH_BOXES.items()}})

    glyf = {".notdef": _box_glyph(50, 0, 550, 700), "space": TTGlyphPen(None).glyph()}
    hmtx = {".notdef": (600, 50), "space": (600, 0)}
    for name, box in GLYPH_BOXES.values():
        glyf[name] = _box_glyph(*box)
        hmtx[name] = (600, box[0])
    fb.setupGlyf(glyf)
    fb.setupHorizontalMetrics(hmtx)
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupNameTable({"familyName": "Boxes", "styleName": "Regular"})
    fb.setupPost(isFixedPitch=1)

    path = tmp_path_factory.mktemp("fonts") / "Boxes-Regular.ttf"
    fb.save(str(path))
    return path


@pytest.fixture
def blob_grid():
    """Factory for reproducible grids made of overlapping random disks."""

    def make(seed, width=32, height=28, disks=6):
        rng = np.random.default_rng(seed)
        yy, xx = np.mgrid[0:height, 0:width]
        cells = np.zeros((height, width), dtype=np.uint8)
        for _ in range(disks):
            cx = int(rng.integers(0, width))
            cy = int(rng.integers(0, height))
            r = int(rng.integers(2, 11))
            cells[(xx - cx) ** 2 + (yy - cy) ** 2 < r * r] = 1
        return OccupancyGrid(cells)

    return make


@pytest.fixture
def disk_grid():
    """Factory for a single filled disk ``dx^2 + dy^2 < r^2``."""

    def make(cx, cy, r, width, height):
        yy, xx = np.mgrid[0:height, 0:width]
        return OccupancyGrid((xx - cx) ** 2 + (yy - cy) ** 2 < r * r)

    return make


@pytest.fixture(autouse=True)
def _reset_structlog():
    """The CLI reconfigures structlog against the captured streams of a test."""
    yield
    structlog.reset_defaults()
