"""
Completed visit record. One row in the transaction log per exit.
Used by the reporting engine for revenue and peak-hour statistics.
"""

from dataclasses import dataclass

from smartpark.models.vehicle import VehicleCategory


@dataclass(frozen=True)
class Transaction:
    license: str
    category: VehicleCategory
    entry_time: int       # epoch seconds
    exit_time: int        # epoch seconds
    duration_min: int
    fee: float
