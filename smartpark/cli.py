"""
Operator console: interactive menu over a ParkingSession.
Each command runs to completion before the next prompt. Errors are printed
inline and the loop continues; only "Save & Exit" (or end of input) leaves.

Usage: smartpark [--data-dir DIR]
"""

import argparse
import sys
from datetime import datetime

from smartpark.config import settings
from smartpark.exceptions import ParkingError
from smartpark.models.vehicle import VehicleCategory
from smartpark.services.report_service import OccupancyReport, PeakHourReport, RevenueReport
from smartpark.services.session_service import ParkingSession, Receipt
from smartpark.utils.logger import get_logger

logger = get_logger(__name__)

TIME_FMT = "%Y-%m-%d %H:%M:%S"


def _fmt_time(epoch: int) -> str:
    return datetime.fromtimestamp(epoch).strftime(TIME_FMT)


def _prompt(text: str) -> str:
    return input(text).strip()


def _print_warnings(warnings: list[str]):
    for w in warnings:
        print(f"Warning: {w}")


# ── Formatting ───────────────────────────────────────────────────────────────
def format_receipt(receipt: Receipt) -> str:
    tx = receipt.transaction
    return "\n".join([
        "--- Receipt ---",
        f"License: {tx.license}",
        f"Type: {tx.category.label}",
        f"Entry: {_fmt_time(tx.entry_time)}",
        f"Exit:  {_fmt_time(tx.exit_time)}",
        f"Duration: {tx.duration_min} min",
        f"Fee: {tx.fee:.2f}",
    ])


def format_occupancy(report: OccupancyReport) -> str:
    lines = ["=== Occupancy Report ==="]
    for f in report.floors:
        lines.append(f"Floor {f.floor + 1}: {f.occupied}/{f.capacity} ({f.percent:.1f}%)")
    lines.append(f"Overall: {report.occupied}/{report.capacity} ({report.percent:.1f}%)")
    return "\n".join(lines)


def format_revenue(report: RevenueReport) -> str:
    if not report.has_transactions:
        return "No transactions yet."
    return f"Revenue (today): {report.today:.2f}\nRevenue (total): {report.total:.2f}"


def format_peak_hour(report: PeakHourReport) -> str:
    lines = ["=== Peak Entry Hour ==="]
    if not report.has_data:
        lines.append("No data available yet.")
    else:
        lines.append(
            f"Busiest entry hour: {report.hour:02d}:00-{(report.hour + 1) % 24:02d}:00 "
            f"with {report.count} entries (historical + current)."
        )
    return "\n".join(lines)


# ── Menu actions ─────────────────────────────────────────────────────────────
def vehicle_entry(session: ParkingSession):
    print("\n=== Vehicle Entry ===")
    print("Select vehicle type:")
    for category in VehicleCategory:
        print(f"{int(category) + 1}. {category.label}")
    category = VehicleCategory.from_menu_choice(_prompt("> "))
    license = _prompt("License plate: ")
    owner = _prompt("Owner contact/name: ")

    result = session.park_vehicle(category, license, owner)
    v = result.vehicle
    _print_warnings(result.warnings)
    print(f"Assigned Floor {v.floor + 1}, Spot {v.spot + 1}.")
    print(f"Entry time: {_fmt_time(v.entry_time)}")


def vehicle_exit(session: ParkingSession):
    print("\n=== Vehicle Exit ===")
    receipt = session.exit_vehicle(_prompt("Enter license plate: "))
    print()
    print(format_receipt(receipt))
    _print_warnings(receipt.warnings)


def vehicle_search(session: ParkingSession):
    print("\n=== Search Vehicle ===")
    license = _prompt("Enter license plate: ")
    if not license:
        print("License cannot be empty.")
        return
    v = session.search_vehicle(license)
    if v is None:
        print(f"Vehicle with license {license} not found.")
        return
    print(f"Found: Floor {v.floor + 1}, Spot {v.spot + 1}, Type: {v.category.label}, "
          f"Owner: {v.owner}, Entry: {_fmt_time(v.entry_time)}")


def reports_menu(session: ParkingSession):
    while True:
        print("\n=== Reports ===")
        print("1. Occupancy\n2. Revenue\n3. Peak Entry Hour\n4. Back")
        choice = _prompt("> ")
        try:
            if choice == "1":
                print(format_occupancy(session.occupancy_report()))
            elif choice == "2":
                print(format_revenue(session.revenue_report()))
            elif choice == "3":
                print(format_peak_hour(session.peak_hour_report()))
            elif choice == "4":
                return
            else:
                print("Invalid choice.")
        except ParkingError as e:
            print(e)


ACTIONS = {
    "1": vehicle_entry,
    "2": vehicle_exit,
    "3": vehicle_search,
    "4": reports_menu,
}


def run_menu(session: ParkingSession) -> int:
    """Read-execute-print loop. Returns the process exit code."""
    while True:
        print("\n==============================")
        print(" Smart Parking System")
        print(f" Floors: {session.grid.floors}, Spots/Floor: {session.grid.spots_per_floor}")
        print("==============================")
        print("1. Vehicle Entry (Park)\n2. Vehicle Exit\n3. Search Vehicle\n4. Reports\n5. Save & Exit")
        try:
            choice = _prompt("> ")
        except EOFError:
            choice = "5"

        if choice == "5":
            _print_warnings(session.shutdown())
            print("Goodbye!")
            return 0

        action = ACTIONS.get(choice)
        if action is None:
            print("Invalid choice.")
            continue
        try:
            action(session)
        except ParkingError as e:
            print(e)
        except EOFError:
            print()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Smart Parking System operator console")
    parser.add_argument("--data-dir", default=settings.DATA_DIR,
                        help=f"Directory for state and transaction files (default: {settings.DATA_DIR})")
    args = parser.parse_args(argv)

    session = ParkingSession.open(
        args.data_dir,
        state_file=settings.STATE_FILE,
        transactions_file=settings.TRANSACTIONS_FILE,
        floors=settings.FLOORS,
        spots_per_floor=settings.SPOTS_PER_FLOOR,
        license_max_length=settings.LICENSE_MAX_LENGTH,
        owner_max_length=settings.OWNER_MAX_LENGTH,
    )
    _print_warnings(session.startup_warnings)
    logger.info(f"Console started on {args.data_dir} with {session.grid.occupied_count()} vehicles parked")
    return run_menu(session)


if __name__ == "__main__":
    sys.exit(main())
