"""
Parked vehicle record and the closed set of billing categories.
A Vehicle only exists while it is bound to a spot in the OccupancyGrid.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class VehicleCategory(IntEnum):
    TWO_WHEELER = 0
    STANDARD = 1
    HEAVY = 2

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_code(cls, code) -> Optional["VehicleCategory"]:
        """Map an on-disk integer code to a category. Returns None if unknown."""
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_menu_choice(cls, choice) -> Optional["VehicleCategory"]:
        """Operator menus number categories from 1."""
        try:
            choice = int(choice)
        except (TypeError, ValueError):
            return None
        return cls.from_code(choice - 1) if choice >= 1 else None


_LABELS = {
    VehicleCategory.TWO_WHEELER: "Two-wheeler",
    VehicleCategory.STANDARD: "Standard",
    VehicleCategory.HEAVY: "Heavy",
}


@dataclass
class Vehicle:
    license: str
    owner: str
    category: VehicleCategory
    entry_time: int               # epoch seconds
    floor: int = -1               # set by OccupancyGrid.occupy
    spot: int = -1

    @property
    def position(self) -> tuple[int, int]:
        return self.floor, self.spot

    def __repr__(self):
        return f"<Vehicle {self.license} type={self.category.label} at F{self.floor}-S{self.spot}>"
