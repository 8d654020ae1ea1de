"""
Session operations. The only code that mutates the grid.

Visit lifecycle: absent → parked (entry) → completed (exit).
  - Entry: validate, reject duplicates / full lot, allocate nearest spot, persist
  - Exit:  bill elapsed time, append transaction, free spot, persist
  - Search: read-only lookup, None when absent

Each operation validates fully before touching the grid, so a failure never
leaves a half-applied change. Persistence failures are downgraded to warnings
on the returned result; the in-memory change stands.
"""

import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Union

from smartpark.exceptions import (
    DuplicateVehicle, LotFull, NotFound, PersistenceWarning, ValidationError,
)
from smartpark.models.grid import OccupancyGrid
from smartpark.models.transaction import Transaction
from smartpark.models.vehicle import Vehicle, VehicleCategory
from smartpark.services import report_service
from smartpark.services.fee_service import compute_fee
from smartpark.services.persistence_service import (
    StateStore, TransactionLog, ensure_data_dir,
)
from smartpark.utils.logger import get_logger

logger = get_logger(__name__)

CategoryInput = Union[VehicleCategory, int, str, None]


@dataclass
class EntryResult:
    vehicle: Vehicle
    warnings: list[str] = field(default_factory=list)


@dataclass
class Receipt:
    transaction: Transaction
    owner: str
    floor: int
    spot: int
    warnings: list[str] = field(default_factory=list)


def billable_minutes(entry_time: int, exit_time: int) -> int:
    """Whole elapsed minutes, truncated. Clock skew or a same-second exit bills 1 minute."""
    return max(1, (exit_time - entry_time) // 60)


def parse_category(value: CategoryInput) -> VehicleCategory:
    """Accept a category, its integer code, or its name/label ("heavy", "two-wheeler")."""
    if isinstance(value, VehicleCategory):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        category = VehicleCategory.from_code(value)
        if category is not None:
            return category
    elif isinstance(value, str):
        key = value.strip().upper().replace("-", "_").replace(" ", "_")
        if key.isdigit():
            category = VehicleCategory.from_code(key)
            if category is not None:
                return category
        elif key in VehicleCategory.__members__:
            return VehicleCategory[key]
    raise ValidationError("Invalid type selection.")


class ParkingSession:
    def __init__(
        self,
        grid: OccupancyGrid,
        state_store: StateStore,
        transaction_log: TransactionLog,
        clock: Callable[[], float] = time.time,
        license_max_length: int = 32,
        owner_max_length: int = 64,
    ):
        self.grid = grid
        self.state_store = state_store
        self.transaction_log = transaction_log
        self.clock = clock
        self.license_max_length = license_max_length
        self.owner_max_length = owner_max_length
        self.startup_warnings: list[str] = []

    # ── Construction ──────────────────────────────────────────────────────
    @classmethod
    def open(
        cls,
        data_dir: str,
        state_file: str = "parking_state.csv",
        transactions_file: str = "transactions.csv",
        floors: int = 5,
        spots_per_floor: int = 20,
        **kwargs,
    ) -> "ParkingSession":
        """Create the data directory if needed and rehydrate the grid from disk."""
        session = cls(
            OccupancyGrid(floors, spots_per_floor),
            StateStore(os.path.join(data_dir, state_file)),
            TransactionLog(os.path.join(data_dir, transactions_file)),
            **kwargs,
        )
        try:
            ensure_data_dir(data_dir)
            session.state_store.load(session.grid)
        except PersistenceWarning as e:
            logger.warning(f"[STARTUP] {e}")
            session.startup_warnings.append(str(e))
        return session

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "ParkingSession":
        return cls.open(
            settings.DATA_DIR,
            state_file=settings.STATE_FILE,
            transactions_file=settings.TRANSACTIONS_FILE,
            floors=settings.FLOORS,
            spots_per_floor=settings.SPOTS_PER_FLOOR,
            license_max_length=settings.LICENSE_MAX_LENGTH,
            owner_max_length=settings.OWNER_MAX_LENGTH,
            **kwargs,
        )

    # ── Helpers ───────────────────────────────────────────────────────────
    def _now(self) -> int:
        return int(self.clock())

    def _clean(self, value: Optional[str], what: str, max_length: int) -> str:
        value = (value or "").strip()
        if not value:
            raise ValidationError(f"{what} cannot be empty.")
        if len(value) > max_length:
            raise ValidationError(f"{what} is longer than {max_length} characters.")
        return value

    def _save(self, warnings: list[str]):
        try:
            self.state_store.save(self.grid)
        except PersistenceWarning as e:
            logger.warning(f"[PERSIST] {e}")
            warnings.append(str(e))

    # ── Operations ────────────────────────────────────────────────────────
    def park_vehicle(self, category: CategoryInput, license: str, owner: str) -> EntryResult:
        category = parse_category(category)
        license = self._clean(license, "License", self.license_max_length)
        owner = self._clean(owner, "Owner", self.owner_max_length)

        existing = self.grid.find_by_license(license)
        if existing is not None:
            raise DuplicateVehicle(license, *existing)

        free = self.grid.find_nearest_free_spot()
        if free is None:
            logger.info(f"[ENTRY] Rejected {license}: lot full ({self.grid.capacity} spots)")
            raise LotFull()

        vehicle = Vehicle(license=license, owner=owner, category=category, entry_time=self._now())
        self.grid.occupy(*free, vehicle)
        logger.info(f"[ENTRY] Plate={license} | Type={category.label} | Floor={free[0] + 1} Spot={free[1] + 1}")

        result = EntryResult(vehicle=vehicle)
        self._save(result.warnings)
        return result

    def exit_vehicle(self, license: str) -> Receipt:
        license = (license or "").strip()
        if not license:
            raise ValidationError("License cannot be empty.")

        position = self.grid.find_by_license(license)
        if position is None:
            raise NotFound(license)

        vehicle = self.grid.get(*position)
        exit_time = self._now()
        duration = billable_minutes(vehicle.entry_time, exit_time)
        tx = Transaction(
            license=vehicle.license,
            category=vehicle.category,
            entry_time=vehicle.entry_time,
            exit_time=exit_time,
            duration_min=duration,
            fee=compute_fee(vehicle.category, duration),
        )
        receipt = Receipt(transaction=tx, owner=vehicle.owner, floor=vehicle.floor, spot=vehicle.spot)

        try:
            self.transaction_log.append(tx)
        except PersistenceWarning as e:
            logger.warning(f"[PERSIST] {e}")
            receipt.warnings.append(str(e))

        self.grid.release(*position)
        logger.info(f"[EXIT] Plate={license} | {duration} min | Fee={tx.fee:.2f}")

        self._save(receipt.warnings)
        return receipt

    def search_vehicle(self, license: str) -> Optional[Vehicle]:
        position = self.grid.find_by_license((license or "").strip())
        return self.grid.get(*position) if position is not None else None

    def parked_vehicles(self) -> list[Vehicle]:
        return list(self.grid.occupied_spots())

    def shutdown(self) -> list[str]:
        """Persist the snapshot one last time. Returns any persistence warnings."""
        warnings: list[str] = []
        self._save(warnings)
        logger.info(f"Shutdown: {self.grid.occupied_count()} vehicles saved")
        return warnings

    # ── Reports ───────────────────────────────────────────────────────────
    def transactions(self) -> list[Transaction]:
        return self.transaction_log.read_all()

    def occupancy_report(self) -> report_service.OccupancyReport:
        return report_service.occupancy_report(self.grid)

    def revenue_report(self, now: Optional[datetime] = None) -> report_service.RevenueReport:
        return report_service.revenue_report(self.transactions(), now=now)

    def peak_hour_report(self) -> report_service.PeakHourReport:
        return report_service.peak_hour_report(self.grid, self.transactions())
