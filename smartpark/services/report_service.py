"""
Reporting engine: occupancy, revenue and peak entry hour.
Derived from the live grid plus the transaction log. All times are
interpreted in local time, matching what the operator sees on receipts.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from smartpark.models.grid import OccupancyGrid
from smartpark.models.transaction import Transaction

HOURS_PER_DAY = 24


def _percent(part: int, whole: int) -> float:
    return round(100.0 * part / whole, 1) if whole else 0.0


@dataclass
class FloorOccupancy:
    floor: int          # 0-based
    occupied: int
    capacity: int

    @property
    def percent(self) -> float:
        return _percent(self.occupied, self.capacity)


@dataclass
class OccupancyReport:
    floors: list[FloorOccupancy]
    occupied: int
    capacity: int

    @property
    def percent(self) -> float:
        return _percent(self.occupied, self.capacity)


@dataclass
class RevenueReport:
    today: float
    total: float
    transaction_count: int

    @property
    def has_transactions(self) -> bool:
        return self.transaction_count > 0


@dataclass
class PeakHourReport:
    hour: Optional[int]
    count: int
    histogram: list[int] = field(default_factory=lambda: [0] * HOURS_PER_DAY)

    @property
    def has_data(self) -> bool:
        return self.count > 0


def occupancy_report(grid: OccupancyGrid) -> OccupancyReport:
    floors = [
        FloorOccupancy(floor=f, occupied=grid.occupied_count(f), capacity=grid.spots_per_floor)
        for f in range(grid.floors)
    ]
    return OccupancyReport(
        floors=floors,
        occupied=sum(f.occupied for f in floors),
        capacity=grid.capacity,
    )


def revenue_report(transactions: Iterable[Transaction], now: Optional[datetime] = None) -> RevenueReport:
    """Sum fees all-time and for exits that fall on today's local date."""
    today_date = (now or datetime.now()).date()
    today = total = 0.0
    count = 0
    for tx in transactions:
        count += 1
        total += tx.fee
        if datetime.fromtimestamp(tx.exit_time).date() == today_date:
            today += tx.fee
    return RevenueReport(today=round(today, 2), total=round(total, 2), transaction_count=count)


def entry_hour_histogram(grid: OccupancyGrid, transactions: Iterable[Transaction]) -> list[int]:
    """Local entry hour of every past visit plus every vehicle still parked."""
    counts = [0] * HOURS_PER_DAY
    for tx in transactions:
        counts[datetime.fromtimestamp(tx.entry_time).hour] += 1
    for v in grid.occupied_spots():
        counts[datetime.fromtimestamp(v.entry_time).hour] += 1
    return counts


def peak_hour_report(grid: OccupancyGrid, transactions: Iterable[Transaction]) -> PeakHourReport:
    counts = entry_hour_histogram(grid, transactions)
    # Strict > keeps the earliest hour on ties
    peak_hour, peak_count = 0, counts[0]
    for h in range(1, HOURS_PER_DAY):
        if counts[h] > peak_count:
            peak_hour, peak_count = h, counts[h]
    if peak_count == 0:
        return PeakHourReport(hour=None, count=0, histogram=counts)
    return PeakHourReport(hour=peak_hour, count=peak_count, histogram=counts)
