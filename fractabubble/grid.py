"""Occupancy grid for glyph packing.

A grid is a 2-D raster of single-byte intensities, row-major with the
origin at the top-left and y increasing downward. Any nonzero cell is
filled. Coordinates outside ``[0, W) x [0, H)`` always read as empty,
which is what makes inscribed circles near the canvas border run out of
space instead of wrapping.

The grid is mutated in place by the packer (disk erasure) and is never
resized.
"""

from __future__ import annotations

import numpy as np
from PIL import Image


class OccupancyGrid:
    """A mutable binary occupancy mask backed by a ``uint8`` array.

    Attributes:
        cells: Array of shape ``(height, width)``, indexed ``[y, x]``.
    """

    def __init__(self, cells: np.ndarray) -> None:
        cells = np.asarray(cells)
        if cells.ndim != 2:
            raise ValueError(f"Grid must be 2-D, got shape {cells.shape}")
        self.cells = np.ascontiguousarray(cells > 0, dtype=np.uint8)

    @classmethod
    def empty(cls, width: int, height: int) -> OccupancyGrid:
        return cls(np.zeros((height, width), dtype=np.uint8))

    @classmethod
    def full(cls, width: int, height: int) -> OccupancyGrid:
        return cls(np.ones((height, width), dtype=np.uint8))

    @classmethod
    def from_buffer(
        cls,
        data: bytes | bytearray | memoryview,
        width: int,
        height: int,
        stride: int | None = None,
    ) -> OccupancyGrid:
        """Build a grid from a raw single-byte raster.

        Args:
            data: Row-major intensity bytes.
            width: Pixels per row.
            height: Number of rows.
            stride: Bytes per row (>= width). Defaults to width.

        Returns:
            OccupancyGrid where every nonzero byte is filled.

        Raises:
            ValueError: If dimensions, stride and buffer length disagree.
        """
        stride = width if stride is None else stride
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid grid size {width}x{height}")
        if stride < width:
            raise ValueError(f"Stride {stride} is smaller than width {width}")
        needed = stride * (height - 1) + width
        buf = np.frombuffer(bytes(data), dtype=np.uint8)
        if buf.size < needed:
            raise ValueError(
                f"Buffer too small: {buf.size} bytes for {width}x{height} (stride {stride})"
            )
        if buf.size < stride * height:
            buf = np.concatenate([buf, np.zeros(stride * height - buf.size, dtype=np.uint8)])
        rows = buf[: stride * height].reshape(height, stride)
        return cls(rows[:, :width])

    @classmethod
    def from_image(cls, image: Image.Image, threshold: int = 0) -> OccupancyGrid:
        """Threshold a Pillow image into a grid.

        Images with an alpha channel are read from the alpha band, all
        others are converted to 8-bit greyscale. A pixel is filled when
        its intensity is strictly greater than ``threshold``.
        """
        if image.mode in ("RGBA", "LA", "PA"):
            band = image.getchannel("A")
        else:
            band = image.convert("L")
        gray = np.asarray(band, dtype=np.uint8)
        return cls(gray > threshold)

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    @property
    def mask(self) -> np.ndarray:
        """Boolean view of the filled cells."""
        return self.cells.astype(bool)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_filled(self, x: int, y: int) -> bool:
        """True if (x, y) is on the canvas and filled."""
        return self.in_bounds(x, y) and bool(self.cells[y, x])

    def check_point(self, x: int, y: int) -> None:
        """Raise IndexError if (x, y) is off the canvas."""
        if not self.in_bounds(x, y):
            raise IndexError(f"Point ({x}, {y}) outside {self.width}x{self.height} grid")

    def edge_room(self, x: int, y: int) -> int:
        """Pixels between (x, y) and the nearest canvas edge.

        A circle centered here may grow to this radius and still end on
        the last in-canvas pixel; cells on the border have room 0.
        """
        return min(x, self.width - 1 - x, y, self.height - 1 - y)

    def erase_disk(self, x: int, y: int, radius: int) -> int:
        """Clear every cell strictly inside the disk ``dx^2 + dy^2 < r^2``.

        Returns:
            Number of cells that went from filled to empty.
        """
        if radius <= 0:
            return 0
        x0, x1 = max(0, x - radius + 1), min(self.width, x + radius)
        y0, y1 = max(0, y - radius + 1), min(self.height, y + radius)
        if x0 >= x1 or y0 >= y1:
            return 0
        dy, dx = np.ogrid[y0 - y : y1 - y, x0 - x : x1 - x]
        inside = dx * dx + dy * dy < radius * radius
        window = self.cells[y0:y1, x0:x1]
        cleared = int(np.count_nonzero(window[inside]))
        window[inside] = 0
        return cleared

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def copy(self) -> OccupancyGrid:
        return OccupancyGrid(self.cells.copy())

    def to_image(self) -> Image.Image:
        """Render the grid as an 8-bit greyscale image (255 = filled)."""
        return Image.fromarray(self.cells * 255)

    def __repr__(self) -> str:
        return f"OccupancyGrid({self.width}x{self.height}, filled={self.filled_count()})"
