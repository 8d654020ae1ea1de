"""Shared builders for the test modules."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime
from smartpark.models.grid import OccupancyGrid
from smartpark.services.persistence_service import StateStore, TransactionLog
from smartpark.services.session_service import ParkingSession


def local_ts(year=2026, month=3, day=10, hour=9, minute=0, second=0) -> int:
    """Epoch seconds for a local wall-clock time."""
    return int(datetime(year, month, day, hour, minute, second).timestamp())


class FakeClock:
    def __init__(self, now: int):
        self.now = now

    def __call__(self) -> float:
        return float(self.now)

    def advance(self, minutes=0, seconds=0):
        self.now += minutes * 60 + seconds


def make_session(tmp_path, clock=None, floors=5, spots_per_floor=20) -> ParkingSession:
    return ParkingSession(
        OccupancyGrid(floors, spots_per_floor),
        StateStore(str(tmp_path / "parking_state.csv")),
        TransactionLog(str(tmp_path / "transactions.csv")),
        clock=clock or FakeClock(local_ts()),
    )
