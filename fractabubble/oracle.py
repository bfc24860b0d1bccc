"""Radius oracles: the largest inscribed circle centered on a cell.

Given an occupancy grid and a candidate center, an oracle returns the
largest integer radius ``r`` such that every cell of the disk
``dx^2 + dy^2 < r^2`` is filled and the circle of radius ``r`` ends on or
before the last in-canvas pixel, so a cell on the canvas border has
radius 0. A center that is itself empty has radius 0 too.

An optional ``bound`` caps the answer. The packer passes its running
bound here, so no oracle ever reports more than the configured maximum
even when the geometry has room for a larger circle.

Two interchangeable strategies are provided:

- ``scan``: minimum squared distance to an empty cell inside a local
  window of half-size ``bound - 1``. The radius is ``isqrt`` of that
  distance, or the window bound when the window is entirely filled.
  Whole-grid queries use a Euclidean distance transform.
- ``growth``: start at ``r = 0`` and grow one ring at a time, checking
  only the new annulus ``r^2 <= d^2 < (r+1)^2`` until an empty cell or
  its edge room stops it.

Both give identical answers for every cell.
"""

from __future__ import annotations

import math
from functools import lru_cache

import numpy as np
from scipy.ndimage import distance_transform_edt

from .grid import OccupancyGrid


def _limit(grid: OccupancyGrid, x: int, y: int, bound: int | None) -> int:
    room = grid.edge_room(x, y)
    return room if bound is None else max(0, min(room, bound))


@lru_cache(maxsize=512)
def _squared_offsets(reach: int) -> np.ndarray:
    """Squared distance from the center of a (2*reach+1)^2 window."""
    d = np.arange(-reach, reach + 1, dtype=np.int64)
    return d[:, None] ** 2 + d[None, :] ** 2


@lru_cache(maxsize=4096)
def _ring(r: int) -> tuple[tuple[int, int], ...]:
    """Offsets of the integer annulus ``r^2 <= dx^2 + dy^2 < (r+1)^2``.

    Walks one octant (0 <= a <= b) and mirrors each hit eight ways.
    """
    inner = r * r
    outer = (r + 1) * (r + 1)
    points: set[tuple[int, int]] = set()
    a = 0
    while 2 * a * a < outer:
        rest = inner - a * a
        lo = a if rest <= 0 else max(a, math.isqrt(rest - 1) + 1)
        hi = math.isqrt(outer - a * a - 1)
        for b in range(lo, hi + 1):
            for sx, sy in ((a, b), (b, a)):
                points.update({(sx, sy), (-sx, sy), (sx, -sy), (-sx, -sy)})
        a += 1
    return tuple(sorted(points))


def _isqrt_array(d2: np.ndarray) -> np.ndarray:
    """Elementwise integer square root of a non-negative int64 array."""
    r = np.floor(np.sqrt(d2)).astype(np.int64)
    r -= (r * r > d2).astype(np.int64)
    r += ((r + 1) * (r + 1) <= d2).astype(np.int64)
    return r


class RadiusOracle:
    """Interface shared by the radius strategies."""

    name = "base"

    def radius_at(self, grid: OccupancyGrid, x: int, y: int, bound: int | None = None) -> int:
        """Largest inscribed radius centered on (x, y), capped by ``bound``.

        Raises:
            IndexError: If (x, y) is off the canvas.
        """
        raise NotImplementedError

    def radius_map(self, grid: OccupancyGrid, bound: int | None = None) -> np.ndarray:
        """Radius for every cell, as an int64 array indexed ``[y, x]``."""
        radii = np.zeros((grid.height, grid.width), dtype=np.int64)
        for y in range(grid.height):
            for x in range(grid.width):
                radii[y, x] = self.radius_at(grid, x, y, bound)
        return radii

    def find_best(self, grid: OccupancyGrid, bound: int | None = None) -> tuple[int, int, int]:
        """Best center over the whole grid.

        Candidates are visited column by column (x outer, y inner) and
        only a strictly larger radius replaces the current best. A cell
        whose cap cannot beat the best so far is skipped, and the scan
        stops once the best reaches ``bound``.

        Returns:
            (x, y, radius); radius is 0 when nothing is filled.
        """
        best = (0, 0, 0)
        for x in range(grid.width):
            for y in range(grid.height):
                if _limit(grid, x, y, bound) <= best[2]:
                    continue
                r = self.radius_at(grid, x, y, bound)
                if r > best[2]:
                    best = (x, y, r)
                    if bound is not None and r >= bound:
                        return best
        return best


class DistanceScanOracle(RadiusOracle):
    """Nearest-empty-cell distance inside a window bounded by the cap."""

    name = "scan"

    def radius_at(self, grid: OccupancyGrid, x: int, y: int, bound: int | None = None) -> int:
        grid.check_point(x, y)
        if not grid.cells[y, x]:
            return 0
        limit = _limit(grid, x, y, bound)
        if limit <= 1:
            return limit
        # Only cells with d^2 < limit^2 can lower the answer below limit.
        reach = limit - 1
        window = grid.cells[y - reach : y + reach + 1, x - reach : x + reach + 1]
        empty = _squared_offsets(reach)[window == 0]
        if empty.size == 0:
            return limit
        return min(limit, math.isqrt(int(empty.min())))

    def radius_map(self, grid: OccupancyGrid, bound: int | None = None) -> np.ndarray:
        # One empty ring around the canvas stands in for everything off it.
        padded = np.pad(grid.mask, 1, constant_values=False)
        dist = distance_transform_edt(padded)[1:-1, 1:-1]
        radii = _isqrt_array(np.rint(dist * dist).astype(np.int64))
        yy, xx = np.ogrid[0 : grid.height, 0 : grid.width]
        room = np.minimum(np.minimum(xx, grid.width - 1 - xx), np.minimum(yy, grid.height - 1 - yy))
        radii = np.minimum(radii, room)
        if bound is not None:
            radii = np.minimum(radii, max(0, bound))
        return radii

    def find_best(self, grid: OccupancyGrid, bound: int | None = None) -> tuple[int, int, int]:
        radii = self.radius_map(grid, bound)
        # Transposed so that argmax returns the first hit in x-major order.
        flat = int(np.argmax(radii.T))
        x, y = divmod(flat, grid.height)
        return (x, y, int(radii[y, x]))


class BoundaryGrowthOracle(RadiusOracle):
    """Grow the radius one integer ring at a time."""

    name = "growth"

    def radius_at(self, grid: OccupancyGrid, x: int, y: int, bound: int | None = None) -> int:
        grid.check_point(x, y)
        if not grid.cells[y, x]:
            return 0
        limit = _limit(grid, x, y, bound)
        r = 0
        while r < limit and all(grid.is_filled(x + dx, y + dy) for dx, dy in _ring(r)):
            r += 1
        return r


ORACLES: dict[str, type[RadiusOracle]] = {
    DistanceScanOracle.name: DistanceScanOracle,
    BoundaryGrowthOracle.name: BoundaryGrowthOracle,
}


def select_oracle(name: str) -> RadiusOracle:
    """Instantiate a radius oracle by name.

    Args:
        name: Strategy name (scan, growth).

    Raises:
        ValueError: If the name is not recognized.
    """
    if name not in ORACLES:
        valid = ", ".join(ORACLES.keys())
        raise ValueError(f"Unknown oracle '{name}'. Valid oracles: {valid}")
    return ORACLES[name]()
