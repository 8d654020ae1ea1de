"""
Flat-file persistence for the parking grid and the transaction log.

State snapshot  : <data_dir>/parking_state.csv, rewritten in full on every
                  entry, exit and shutdown. One row per occupied spot.
Transaction log : <data_dir>/transactions.csv, append-only audit trail, one
                  row per completed visit. Reports are computed from it.

Any I/O failure raises PersistenceWarning. Callers keep their in-memory state
and report the warning; memory and disk may diverge until the next save.
"""

import csv
import os
import tempfile
from datetime import datetime

from smartpark.exceptions import PersistenceWarning
from smartpark.models.grid import OccupancyGrid
from smartpark.models.transaction import Transaction
from smartpark.models.vehicle import Vehicle, VehicleCategory
from smartpark.utils.logger import get_logger

logger = get_logger(__name__)

STATE_HEADER = ["floor", "spot", "license", "owner", "type", "entryTime"]
TRANSACTION_HEADER = ["license", "type", "entryTime", "exitTime", "durationMin", "fee"]

# Undecodable bytes are read as U+FFFD so one bad row can't abort a load
UNDECODABLE = "\ufffd"


def _is_local_time(epoch: int) -> bool:
    try:
        datetime.fromtimestamp(epoch)
    except (OverflowError, OSError, ValueError):
        return False
    return True


def _file_mode(path: str) -> int:
    """Mode of the existing file, or what a plain open(path, "w") would create."""
    try:
        return os.stat(path).st_mode & 0o777
    except OSError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def ensure_data_dir(path: str):
    """Create the data directory (and parents) if it does not exist yet."""
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise PersistenceWarning(f"Cannot create data directory {path}: {e}") from e


class StateStore:
    def __init__(self, path: str):
        self.path = path

    def save(self, grid: OccupancyGrid):
        """
        Write every occupied spot to a temp file next to the state file, then
        rename it into place so readers never see a partial snapshot.
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", dir=directory, prefix=".parking_state.", suffix=".tmp",
                newline="", encoding="utf-8", delete=False,
            ) as fp:
                tmp_path = fp.name
                writer = csv.writer(fp, lineterminator="\n")
                writer.writerow(STATE_HEADER)
                for v in grid.occupied_spots():
                    writer.writerow([v.floor, v.spot, v.license, v.owner, int(v.category), v.entry_time])
            # NamedTemporaryFile is always 0600
            os.chmod(tmp_path, _file_mode(self.path))
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise PersistenceWarning(f"Failed to persist parking state to {self.path}: {e}") from e
        logger.debug(f"State saved: {grid.occupied_count()} vehicles → {self.path}")

    def load(self, grid: OccupancyGrid) -> int:
        """
        Rebind every stored vehicle into grid at its recorded position.
        A missing file is an empty lot. Bad rows are skipped with a warning.
        Returns the number of vehicles restored.
        """
        if not os.path.exists(self.path):
            logger.info(f"No state file at {self.path} — starting with an empty lot")
            return 0

        restored = 0
        try:
            with open(self.path, newline="", encoding="utf-8", errors="replace") as fp:
                reader = csv.reader(fp)
                next(reader, None)  # header
                for row in reader:
                    if not row:
                        continue
                    vehicle = self._parse_row(row, reader.line_num, grid)
                    if vehicle is None:
                        continue
                    grid.occupy(vehicle.floor, vehicle.spot, vehicle)
                    restored += 1
        except (OSError, csv.Error) as e:
            raise PersistenceWarning(f"Failed to read parking state from {self.path}: {e}") from e

        logger.info(f"Restored {restored} parked vehicles from {self.path}")
        return restored

    def _parse_row(self, row: list[str], line_num: int, grid: OccupancyGrid):
        if len(row) < len(STATE_HEADER):
            logger.warning(f"[STATE] line {line_num}: expected 6 fields, got {len(row)} — skipped")
            return None
        if any(UNDECODABLE in field for field in row):
            logger.warning(f"[STATE] line {line_num}: invalid UTF-8 — skipped")
            return None
        try:
            floor, spot = int(row[0]), int(row[1])
            entry_time = int(row[5])
        except ValueError:
            logger.warning(f"[STATE] line {line_num}: non-numeric floor/spot/entryTime — skipped")
            return None
        if not _is_local_time(entry_time):
            logger.warning(f"[STATE] line {line_num}: entryTime {entry_time} out of range — skipped")
            return None

        license, owner = row[2].strip(), row[3].strip()
        category = VehicleCategory.from_code(row[4])
        if not license or category is None:
            logger.warning(f"[STATE] line {line_num}: missing license or unknown type {row[4]!r} — skipped")
            return None
        if not grid.in_bounds(floor, spot):
            logger.warning(f"[STATE] line {line_num}: spot ({floor}, {spot}) out of range — skipped")
            return None
        if not grid.is_free(floor, spot):
            logger.warning(f"[STATE] line {line_num}: spot ({floor}, {spot}) listed twice — skipped")
            return None
        if grid.find_by_license(license) is not None:
            logger.warning(f"[STATE] line {line_num}: license {license} listed twice — skipped")
            return None

        # Position and entry time come from the file, not from "now"
        return Vehicle(license=license, owner=owner, category=category,
                       entry_time=entry_time, floor=floor, spot=spot)


class TransactionLog:
    def __init__(self, path: str):
        self.path = path

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def append(self, tx: Transaction):
        """Append one completed visit. The header is written only on creation."""
        try:
            new_file = not os.path.exists(self.path) or os.path.getsize(self.path) == 0
            with open(self.path, "a", newline="", encoding="utf-8") as fp:
                writer = csv.writer(fp, lineterminator="\n")
                if new_file:
                    writer.writerow(TRANSACTION_HEADER)
                writer.writerow([
                    tx.license, int(tx.category), tx.entry_time, tx.exit_time,
                    tx.duration_min, f"{tx.fee:.2f}",
                ])
        except OSError as e:
            raise PersistenceWarning(f"Failed to record transaction in {self.path}: {e}") from e

    def read_all(self) -> list[Transaction]:
        """Every well-formed row, oldest first. Missing file → empty list."""
        if not self.exists():
            return []
        transactions = []
        try:
            with open(self.path, newline="", encoding="utf-8", errors="replace") as fp:
                reader = csv.reader(fp)
                next(reader, None)  # header
                for row in reader:
                    if not row:
                        continue
                    tx = self._parse_row(row, reader.line_num)
                    if tx is not None:
                        transactions.append(tx)
        except (OSError, csv.Error) as e:
            raise PersistenceWarning(f"Failed to read transactions from {self.path}: {e}") from e
        return transactions

    def _parse_row(self, row: list[str], line_num: int):
        if len(row) < len(TRANSACTION_HEADER):
            logger.warning(f"[TXN] line {line_num}: expected 6 fields, got {len(row)} — skipped")
            return None
        if any(UNDECODABLE in field for field in row):
            logger.warning(f"[TXN] line {line_num}: invalid UTF-8 — skipped")
            return None
        category = VehicleCategory.from_code(row[1])
        if category is None:
            logger.warning(f"[TXN] line {line_num}: unknown type {row[1]!r} — skipped")
            return None
        try:
            tx = Transaction(
                license=row[0],
                category=category,
                entry_time=int(row[2]),
                exit_time=int(row[3]),
                duration_min=int(row[4]),
                fee=float(row[5]),
            )
        except ValueError:
            logger.warning(f"[TXN] line {line_num}: malformed numeric field — skipped")
            return None
        if not (_is_local_time(tx.entry_time) and _is_local_time(tx.exit_time)):
            logger.warning(f"[TXN] line {line_num}: entry/exit time out of range — skipped")
            return None
        return tx
