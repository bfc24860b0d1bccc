"""Glyph rasterization into occupancy grids.

Draws a single character with Pillow onto an 8-bit greyscale canvas
and thresholds it into an OccupancyGrid. The canvas is ``image_height``
pixels tall and ``image_height * font_width / font_height`` wide; the
font size is ``image_height / font_height`` and the glyph sits on a
baseline at the bottom edge, starting at x = 0. With the default
monospace proportions this makes one glyph cell fill the canvas.

Character map lookups use fontTools so that a codepoint missing from the
font is reported instead of silently rendering the .notdef box.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from fontTools.ttLib import TTFont, TTLibError
from PIL import Image, ImageDraw, ImageFont

from .config import PackingConfig, canvas_size
from .grid import OccupancyGrid

logger = structlog.get_logger(__name__)


class GlyphRasterizer:
    """Renders characters from one font file.

    Attributes:
        font_path: Path to a TrueType/OpenType font.
        image_height: Canvas height in pixels.
        font_width: Advance width as a fraction of the font size.
        font_height: Canvas height as a fraction of the font size.
    """

    def __init__(
        self,
        font_path: str | Path,
        image_height: int = 256,
        font_width: float = 0.6,
        font_height: float = 0.68,
    ) -> None:
        self.font_path = Path(font_path)
        if not self.font_path.is_file():
            raise FileNotFoundError(f"Font not found: {self.font_path}")
        if image_height <= 0 or font_width <= 0 or font_height <= 0:
            raise ValueError("Canvas dimensions must be positive")

        self.image_height = image_height
        self.font_width = font_width
        self.font_height = font_height
        self.font_size = image_height / font_height

        try:
            self._font = ImageFont.truetype(str(self.font_path), self.font_size)
        except OSError as e:
            raise ValueError(f"Unreadable font {self.font_path}: {e}") from e

        try:
            tt = TTFont(str(self.font_path), fontNumber=0, lazy=True)
            self._cmap = set((tt.getBestCmap() or {}).keys())
            tt.close()
        except (TTLibError, OSError) as e:
            raise ValueError(f"Unreadable font {self.font_path}: {e}") from e

        logger.debug(
            "font_loaded",
            font=str(self.font_path),
            font_size=self.font_size,
            codepoints=len(self._cmap),
        )

    @classmethod
    def from_config(cls, font_path: str | Path, config: PackingConfig) -> GlyphRasterizer:
        return cls(
            font_path,
            image_height=config.image_height,
            font_width=config.font_width,
            font_height=config.font_height,
        )

    @property
    def canvas_size(self) -> tuple[int, int]:
        return canvas_size(self.image_height, self.font_width, self.font_height)

    def has_glyph(self, glyph: str) -> bool:
        """True if the font maps this character."""
        return len(glyph) == 1 and ord(glyph) in self._cmap

    def render(self, glyph: str) -> Image.Image:
        """Draw one character onto a greyscale canvas (255 = ink).

        Raises:
            ValueError: If ``glyph`` is not a single character or the font
                has no mapping for it.
        """
        if len(glyph) != 1:
            raise ValueError(f"Expected a single character, got {glyph!r}")
        if not glyph.isspace() and not self.has_glyph(glyph):
            raise ValueError(
                f"Glyph {glyph!r} (U+{ord(glyph):04X}) not present in font {self.font_path.name}"
            )

        image = Image.new("L", self.canvas_size, 0)
        draw = ImageDraw.Draw(image)
        draw.text((0, self.image_height), glyph, font=self._font, fill=255, anchor="ls")
        return image

    def rasterize(self, glyph: str, threshold: int = 0) -> OccupancyGrid:
        """Render ``glyph`` and threshold it into an OccupancyGrid."""
        grid = OccupancyGrid.from_image(self.render(glyph), threshold=threshold)
        logger.debug(
            "glyph_rasterized",
            glyph=glyph,
            size=f"{grid.width}x{grid.height}",
            filled=grid.filled_count(),
        )
        return grid
