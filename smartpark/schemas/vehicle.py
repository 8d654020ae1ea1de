from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Union


class VehicleEntryIn(BaseModel):
    category: Union[int, str]  # two-wheeler | standard | heavy | 0..2
    license: str
    owner: str


class ParkedVehicleOut(BaseModel):
    license: str
    owner: str
    category: str
    category_code: int
    floor: int               # 0-based
    spot: int                # 0-based
    display_floor: int       # 1-based, as printed on signage
    display_spot: int
    entry_time: int          # epoch seconds
    entry_at: datetime       # local time

    @classmethod
    def from_vehicle(cls, v) -> "ParkedVehicleOut":
        return cls(
            license=v.license,
            owner=v.owner,
            category=v.category.label,
            category_code=int(v.category),
            floor=v.floor,
            spot=v.spot,
            display_floor=v.floor + 1,
            display_spot=v.spot + 1,
            entry_time=v.entry_time,
            entry_at=datetime.fromtimestamp(v.entry_time),
        )


class EntryOut(BaseModel):
    vehicle: ParkedVehicleOut
    warnings: list[str] = []


class SearchOut(BaseModel):
    license: str
    found: bool
    vehicle: Optional[ParkedVehicleOut] = None
