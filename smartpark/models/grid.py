"""
Occupancy grid: fixed FLOORS x SPOTS_PER_FLOOR table of spots.
Each slot holds either None (free) or the one Vehicle parked there.

"Nearest" means lexicographic (floor, spot) order from the entrance at
(0, 0), not physical distance. Allocation must stay reproducible.
"""

from typing import Iterator, Optional

from smartpark.exceptions import SpotOccupied, SpotOutOfRange, SpotVacant
from smartpark.models.vehicle import Vehicle


class OccupancyGrid:
    def __init__(self, floors: int = 5, spots_per_floor: int = 20):
        if floors < 1 or spots_per_floor < 1:
            raise ValueError("Grid needs at least one floor and one spot per floor")
        self.floors = floors
        self.spots_per_floor = spots_per_floor
        self._slots: list[list[Optional[Vehicle]]] = [
            [None] * spots_per_floor for _ in range(floors)
        ]

    @property
    def capacity(self) -> int:
        return self.floors * self.spots_per_floor

    def in_bounds(self, floor: int, spot: int) -> bool:
        return 0 <= floor < self.floors and 0 <= spot < self.spots_per_floor

    def _check(self, floor: int, spot: int):
        if not self.in_bounds(floor, spot):
            raise SpotOutOfRange(f"Spot ({floor}, {spot}) outside {self.floors}x{self.spots_per_floor} grid")

    def get(self, floor: int, spot: int) -> Optional[Vehicle]:
        self._check(floor, spot)
        return self._slots[floor][spot]

    def is_free(self, floor: int, spot: int) -> bool:
        return self.get(floor, spot) is None

    def find_nearest_free_spot(self) -> Optional[tuple[int, int]]:
        for f in range(self.floors):
            for s in range(self.spots_per_floor):
                if self._slots[f][s] is None:
                    return f, s
        return None

    def find_by_license(self, license: str) -> Optional[tuple[int, int]]:
        for f in range(self.floors):
            for s in range(self.spots_per_floor):
                v = self._slots[f][s]
                if v is not None and v.license == license:
                    return f, s
        return None

    def occupy(self, floor: int, spot: int, vehicle: Vehicle):
        """Bind vehicle to a free spot and stamp its position fields."""
        self._check(floor, spot)
        if self._slots[floor][spot] is not None:
            raise SpotOccupied(f"Spot ({floor}, {spot}) already holds {self._slots[floor][spot].license}")
        vehicle.floor, vehicle.spot = floor, spot
        self._slots[floor][spot] = vehicle

    def release(self, floor: int, spot: int) -> Vehicle:
        """Free an occupied spot and hand back its vehicle for billing."""
        self._check(floor, spot)
        vehicle = self._slots[floor][spot]
        if vehicle is None:
            raise SpotVacant(f"Spot ({floor}, {spot}) is not occupied")
        self._slots[floor][spot] = None
        return vehicle

    def occupied_spots(self) -> Iterator[Vehicle]:
        """Parked vehicles in (floor, spot) order."""
        for row in self._slots:
            for v in row:
                if v is not None:
                    yield v

    def occupied_count(self, floor: Optional[int] = None) -> int:
        if floor is None:
            return sum(1 for _ in self.occupied_spots())
        self._check(floor, 0)
        return sum(1 for v in self._slots[floor] if v is not None)

    @property
    def is_full(self) -> bool:
        return self.find_nearest_free_spot() is None

    def __repr__(self):
        return f"<OccupancyGrid {self.occupied_count()}/{self.capacity}>"
