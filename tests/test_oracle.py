"""Tests for the radius oracles."""

import math

import numpy as np
import pytest

from fractabubble.grid import OccupancyGrid
from fractabubble.oracle import (
    ORACLES,
    BoundaryGrowthOracle,
    DistanceScanOracle,
    _ring,
    select_oracle,
)

STRATEGIES = [DistanceScanOracle(), BoundaryGrowthOracle()]


def brute_force_radius(grid, x, y, bound=None):
    """Largest r whose strict disk is entirely filled, tested cell by cell.

    The circle must also end on or before the last in-canvas pixel.
    """
    if not grid.is_filled(x, y):
        return 0
    room = min(x, grid.width - 1 - x, y, grid.height - 1 - y)
    r = 0
    while r < room and (bound is None or r < bound):
        candidate = r + 1
        ok = all(
            grid.is_filled(x + dx, y + dy)
            for dy in range(-candidate, candidate + 1)
            for dx in range(-candidate, candidate + 1)
            if dx * dx + dy * dy < candidate * candidate
        )
        if not ok:
            break
        r = candidate
    return r


class TestSelectOracle:
    def test_known_names(self):
        assert isinstance(select_oracle("scan"), DistanceScanOracle)
        assert isinstance(select_oracle("growth"), BoundaryGrowthOracle)
        assert set(ORACLES) == {"scan", "growth"}

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown oracle"):
            select_oracle("voronoi")


class TestRing:
    @pytest.mark.parametrize("r", range(0, 16))
    def test_ring_is_exact_annulus(self, r):
        expected = {
            (dx, dy)
            for dy in range(-r - 1, r + 2)
            for dx in range(-r - 1, r + 2)
            if r * r <= dx * dx + dy * dy < (r + 1) * (r + 1)
        }
        assert set(_ring(r)) == expected

    def test_rings_partition_the_disk(self):
        cells = [p for r in range(6) for p in _ring(r)]
        assert len(cells) == len(set(cells))
        assert len(cells) == sum(
            1 for dy in range(-6, 7) for dx in range(-6, 7) if dx * dx + dy * dy < 36
        )


@pytest.mark.parametrize("oracle", STRATEGIES, ids=lambda o: o.name)
class TestRadiusAt:
    def test_empty_center_is_zero(self, oracle):
        grid = OccupancyGrid.full(9, 9)
        grid.cells[4, 4] = 0
        assert oracle.radius_at(grid, 4, 4) == 0

    def test_isolated_pixel_is_one(self, oracle):
        grid = OccupancyGrid.empty(5, 5)
        grid.cells[2, 2] = 1
        assert oracle.radius_at(grid, 2, 2) == 1

    def test_border_pixel_is_zero(self, oracle):
        grid = OccupancyGrid.full(10, 10)
        assert oracle.radius_at(grid, 0, 0) == 0
        assert oracle.radius_at(grid, 0, 5) == 0
        assert oracle.radius_at(grid, 9, 4) == 0
        assert oracle.radius_at(grid, 1, 5) == 1

    def test_full_grid_center(self, oracle):
        grid = OccupancyGrid.full(10, 10)
        assert oracle.radius_at(grid, 4, 4) == 4
        assert oracle.radius_at(grid, 5, 5) == 4
        assert oracle.radius_at(grid, 3, 4) == 3

    def test_odd_full_grid_center(self, oracle):
        grid = OccupancyGrid.full(11, 11)
        assert oracle.radius_at(grid, 5, 5) == 5

    def test_tiny_full_grid(self, oracle):
        grid = OccupancyGrid.full(3, 3)
        assert oracle.radius_at(grid, 1, 1) == 1
        assert oracle.radius_at(grid, 0, 1) == 0

    def test_radius_map_stays_on_canvas(self, oracle, blob_grid):
        grid = blob_grid(2)
        radii = oracle.radius_map(grid)
        for y in range(grid.height):
            for x in range(grid.width):
                r = int(radii[y, x])
                assert r <= x and x + r <= grid.width - 1
                assert r <= y and y + r <= grid.height - 1

    def test_disk_center(self, oracle, disk_grid):
        grid = disk_grid(30, 30, 20, 60, 60)
        assert oracle.radius_at(grid, 30, 30) == 20
        assert oracle.radius_at(grid, 31, 30) == 19

    def test_nearest_empty_on_diagonal(self, oracle):
        grid = OccupancyGrid.full(21, 21)
        grid.cells[13, 13] = 0  # d^2 = 18 from (10, 10)
        assert oracle.radius_at(grid, 10, 10) == math.isqrt(18)

    def test_bound_caps_radius(self, oracle, disk_grid):
        grid = disk_grid(30, 30, 20, 60, 60)
        assert oracle.radius_at(grid, 30, 30, bound=10) == 10
        assert oracle.radius_at(grid, 30, 30, bound=1) == 1
        assert oracle.radius_at(grid, 30, 30, bound=25) == 20

    def test_out_of_bounds_raises(self, oracle):
        grid = OccupancyGrid.full(4, 4)
        with pytest.raises(IndexError):
            oracle.radius_at(grid, 4, 0)
        with pytest.raises(IndexError):
            oracle.radius_at(grid, -1, 2)

    def test_does_not_mutate_grid(self, oracle, blob_grid):
        grid = blob_grid(3)
        before = grid.cells.copy()
        oracle.radius_map(grid)
        assert np.array_equal(grid.cells, before)


class TestStrategiesAgree:
    @pytest.mark.parametrize("seed", range(4))
    def test_matches_brute_force(self, seed, blob_grid):
        grid = blob_grid(seed, width=20, height=18)
        for oracle in STRATEGIES:
            for y in range(grid.height):
                for x in range(grid.width):
                    assert oracle.radius_at(grid, x, y) == brute_force_radius(grid, x, y)

    @pytest.mark.parametrize("seed", range(5))
    def test_radius_maps_agree(self, seed, blob_grid):
        grid = blob_grid(seed)
        scan = DistanceScanOracle()
        growth = BoundaryGrowthOracle()
        for bound in (None, 4):
            assert np.array_equal(scan.radius_map(grid, bound), growth.radius_map(grid, bound))

    @pytest.mark.parametrize("seed", range(3))
    def test_noise_grid(self, seed):
        rng = np.random.default_rng(seed)
        grid = OccupancyGrid(rng.random((24, 30)) < 0.85)
        scan = DistanceScanOracle()
        growth = BoundaryGrowthOracle()
        fast = scan.radius_map(grid)
        for y in range(grid.height):
            for x in range(grid.width):
                assert scan.radius_at(grid, x, y) == fast[y, x]
                assert growth.radius_at(grid, x, y) == fast[y, x]

    @pytest.mark.parametrize("seed", range(5))
    def test_find_best_agrees(self, seed, blob_grid):
        grid = blob_grid(seed)
        for bound in (None, 3, 6):
            assert DistanceScanOracle().find_best(grid, bound) == BoundaryGrowthOracle().find_best(
                grid, bound
            )


@pytest.mark.parametrize("oracle", STRATEGIES, ids=lambda o: o.name)
class TestFindBest:
    def test_empty_grid(self, oracle):
        assert oracle.find_best(OccupancyGrid.empty(6, 5)) == (0, 0, 0)

    def test_first_candidate_in_column_order_wins_ties(self, oracle):
        grid = OccupancyGrid.full(10, 10)
        assert oracle.find_best(grid) == (4, 4, 4)

    def test_column_order(self, oracle):
        grid = OccupancyGrid.empty(5, 5)
        grid.cells[3, 1] = 1  # (x=1, y=3)
        grid.cells[1, 2] = 1  # (x=2, y=1)
        assert oracle.find_best(grid) == (1, 3, 1)

    def test_bound_is_respected(self, oracle, disk_grid):
        grid = disk_grid(30, 30, 20, 60, 60)
        x, y, r = oracle.find_best(grid, bound=10)
        assert r == 10
        assert oracle.radius_at(grid, x, y) >= 10
