"""Circle records produced by the packer.

A packing is an ordered sequence of circles in discovery order. Each
circle is immutable once produced; the sequence is append-only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Circle:
    """A packed circle on the pixel grid.

    Attributes:
        x: Center column.
        y: Center row.
        radius: Integer radius (>= 0). The disk covers the cells with
            ``dx^2 + dy^2 < radius^2``.
    """

    x: int
    y: int
    radius: int

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ValueError(f"Circle radius must be non-negative, got {self.radius}")

    def contains(self, px: int, py: int) -> bool:
        """True if cell (px, py) lies strictly inside the disk."""
        dx = px - self.x
        dy = py - self.y
        return dx * dx + dy * dy < self.radius * self.radius

    @property
    def area(self) -> float:
        return math.pi * self.radius * self.radius

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.radius)

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "radius": self.radius}


@dataclass
class PackResult:
    """Outcome of packing one grid.

    Attributes:
        width: Grid width in pixels.
        height: Grid height in pixels.
        circles: Circles in discovery order.
        initial_pixels: Filled cells before packing.
        covered_pixels: Cells erased by the packed circles.
    """

    width: int
    height: int
    circles: list[Circle] = field(default_factory=list)
    initial_pixels: int = 0
    covered_pixels: int = 0

    @property
    def iterations(self) -> int:
        return len(self.circles)

    @property
    def remaining_pixels(self) -> int:
        return self.initial_pixels - self.covered_pixels

    @property
    def coverage(self) -> float:
        """Fraction of the initially filled cells covered by circles."""
        if self.initial_pixels == 0:
            return 0.0
        return self.covered_pixels / self.initial_pixels

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "circles": [c.to_dict() for c in self.circles],
            "initial_pixels": self.initial_pixels,
            "covered_pixels": self.covered_pixels,
            "coverage": round(self.coverage, 4),
        }
