"""Unit tests for the occupancy grid."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from smartpark.exceptions import SpotOccupied, SpotOutOfRange, SpotVacant
from smartpark.models.grid import OccupancyGrid
from smartpark.models.vehicle import Vehicle, VehicleCategory


def make_vehicle(license="ABC-1234", category=VehicleCategory.STANDARD):
    return Vehicle(license=license, owner="Owner", category=category, entry_time=1_700_000_000)


class TestNearestFreeSpot:
    def test_empty_grid_starts_at_entrance(self):
        assert OccupancyGrid().find_nearest_free_spot() == (0, 0)

    def test_scans_spots_before_next_floor(self):
        grid = OccupancyGrid(floors=2, spots_per_floor=3)
        for i in range(3):
            grid.occupy(*grid.find_nearest_free_spot(), make_vehicle(f"P{i}"))
        assert grid.find_nearest_free_spot() == (1, 0)

    def test_released_spot_is_reused_first(self):
        grid = OccupancyGrid(floors=2, spots_per_floor=3)
        for i in range(5):
            grid.occupy(*grid.find_nearest_free_spot(), make_vehicle(f"P{i}"))
        grid.release(0, 1)
        assert grid.find_nearest_free_spot() == (0, 1)

    def test_full_grid_has_no_free_spot(self):
        grid = OccupancyGrid(floors=1, spots_per_floor=2)
        grid.occupy(0, 0, make_vehicle("A"))
        grid.occupy(0, 1, make_vehicle("B"))
        assert grid.find_nearest_free_spot() is None
        assert grid.is_full


class TestOccupyRelease:
    def test_occupy_stamps_position(self):
        grid = OccupancyGrid()
        v = make_vehicle()
        grid.occupy(2, 7, v)
        assert (v.floor, v.spot) == (2, 7)
        assert grid.get(2, 7) is v
        assert grid.find_by_license("ABC-1234") == (2, 7)

    def test_occupy_taken_spot_raises(self):
        grid = OccupancyGrid()
        grid.occupy(0, 0, make_vehicle("A"))
        with pytest.raises(SpotOccupied):
            grid.occupy(0, 0, make_vehicle("B"))
        assert grid.get(0, 0).license == "A"

    def test_release_returns_vehicle_and_frees(self):
        grid = OccupancyGrid()
        v = make_vehicle()
        grid.occupy(1, 1, v)
        assert grid.release(1, 1) is v
        assert grid.is_free(1, 1)
        assert grid.find_by_license("ABC-1234") is None

    def test_release_free_spot_raises(self):
        with pytest.raises(SpotVacant):
            OccupancyGrid().release(0, 0)

    @pytest.mark.parametrize("floor,spot", [(-1, 0), (5, 0), (0, 20), (0, -1)])
    def test_out_of_range(self, floor, spot):
        with pytest.raises(SpotOutOfRange):
            OccupancyGrid().get(floor, spot)


class TestCounts:
    def test_occupied_counts_per_floor(self):
        grid = OccupancyGrid(floors=3, spots_per_floor=4)
        grid.occupy(0, 0, make_vehicle("A"))
        grid.occupy(0, 3, make_vehicle("B"))
        grid.occupy(2, 1, make_vehicle("C"))
        assert grid.occupied_count() == 3
        assert [grid.occupied_count(f) for f in range(3)] == [2, 0, 1]
        assert [v.license for v in grid.occupied_spots()] == ["A", "B", "C"]
        assert grid.capacity == 12

    def test_unknown_license(self):
        assert OccupancyGrid().find_by_license("NOPE") is None
