"""Greedy maximal-inscribed-circle packing.

Packing algorithm:
1. Ask the radius oracle for the best center over the whole grid,
   capped by the running bound
2. Stop when the best radius is below ``min_radius``
3. Record the circle and lower the running bound to its radius
4. Erase the disk ``dx^2 + dy^2 < r^2`` from the grid
5. Repeat

The running bound starts at ``max_radius`` (uncapped when None), so the
sequence of radii never increases. Every iteration erases at least the
center cell, so a W x H grid packs in at most W * H iterations.

The grid is mutated in place unless ``copy=True`` is passed.
"""

from __future__ import annotations

from collections.abc import Iterator
from numbers import Integral

import structlog

from .circles import Circle, PackResult
from .grid import OccupancyGrid
from .oracle import DistanceScanOracle, RadiusOracle, select_oracle

logger = structlog.get_logger(__name__)

DEFAULT_MIN_RADIUS = 5


def _check_radius(name: str, value: int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Integral) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


class GreedyPacker:
    """Scan-and-erase packer with a non-increasing running bound.

    Attributes:
        oracle: Radius strategy used to locate each circle.
        min_radius: Smallest radius worth recording (the fineness).
        max_radius: Seed for the running bound, or None for no cap.
        bound: Current running bound. Reset by every pack.
    """

    def __init__(
        self,
        oracle: RadiusOracle | str | None = None,
        min_radius: int = DEFAULT_MIN_RADIUS,
        max_radius: int | None = None,
    ) -> None:
        min_radius = _check_radius("min_radius", min_radius)
        max_radius = _check_radius("max_radius", max_radius)
        if isinstance(oracle, str):
            oracle = select_oracle(oracle)
        self.oracle = oracle or DistanceScanOracle()
        self.min_radius = min_radius
        self.max_radius = max_radius
        self.bound: int | None = max_radius

    def iter_pack(self, grid: OccupancyGrid) -> Iterator[Circle]:
        """Yield circles one at a time as they are found.

        The grid is erased as the generator advances. Stopping iteration
        early leaves the grid in the state of the last yielded circle.
        """
        self.bound = self.max_radius
        limit = grid.width * grid.height
        for _ in range(limit):
            x, y, radius = self.oracle.find_best(grid, self.bound)
            if radius < self.min_radius:
                return
            self.bound = radius
            circle = Circle(x, y, radius)
            cleared = grid.erase_disk(x, y, radius)
            logger.debug("circle_packed", x=x, y=y, radius=radius, cleared=cleared)
            yield circle

    def pack(self, grid: OccupancyGrid, copy: bool = False) -> PackResult:
        """Pack the grid until no circle of ``min_radius`` fits.

        Args:
            grid: Occupancy grid, erased in place.
            copy: Pack a copy and leave ``grid`` untouched.

        Returns:
            PackResult with circles in discovery order.
        """
        work = grid.copy() if copy else grid
        initial = work.filled_count()
        result = PackResult(width=work.width, height=work.height, initial_pixels=initial)
        result.circles.extend(self.iter_pack(work))
        result.covered_pixels = initial - work.filled_count()

        logger.info(
            "grid_packed",
            oracle=self.oracle.name,
            size=f"{work.width}x{work.height}",
            circles=len(result.circles),
            min_radius=self.min_radius,
            max_radius=self.max_radius,
            coverage=round(result.coverage, 4),
        )
        return result


def pack(
    grid: OccupancyGrid,
    min_radius: int = DEFAULT_MIN_RADIUS,
    max_radius: int | None = None,
    oracle: RadiusOracle | str = "scan",
    copy: bool = False,
) -> PackResult:
    """Pack a grid with a fresh GreedyPacker.

    Raises:
        ValueError: If a radius is not a positive integer or the oracle
            name is unknown.
    """
    packer = GreedyPacker(oracle=oracle, min_radius=min_radius, max_radius=max_radius)
    return packer.pack(grid, copy=copy)
