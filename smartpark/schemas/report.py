from pydantic import BaseModel
from typing import Optional


class FloorOccupancyOut(BaseModel):
    floor: int
    occupied: int
    capacity: int
    occupancy_percent: float
    is_full: bool

    class Config:
        from_attributes = True


class OccupancyReportOut(BaseModel):
    floors: list[FloorOccupancyOut]
    occupied: int
    capacity: int
    occupancy_percent: float
    is_full: bool


class RevenueReportOut(BaseModel):
    date: str
    today: float
    total: float
    transaction_count: int
    has_transactions: bool

    class Config:
        from_attributes = True


class PeakHourReportOut(BaseModel):
    hour: Optional[int]
    count: int
    label: Optional[str]     # "09:00-10:00"
    histogram: list[int]
    has_data: bool

    class Config:
        from_attributes = True
