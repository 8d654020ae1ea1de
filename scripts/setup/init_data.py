"""
Initialize the data directory: creates it and checks the persisted state.
Run once before first launch, or to inspect what a restart would load.
Usage: python scripts/setup/init_data.py [--data-dir DIR]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from smartpark.config import settings
from smartpark.exceptions import PersistenceWarning
from smartpark.services.session_service import ParkingSession


def main():
    parser = argparse.ArgumentParser(description="Create and inspect the SmartPark data directory")
    parser.add_argument("--data-dir", default=settings.DATA_DIR)
    args = parser.parse_args()

    print("🗄️  SmartPark Data Initialization")
    print("=" * 40)
    print(f"📁 Data directory: {os.path.abspath(args.data_dir)}")

    session = ParkingSession.open(
        args.data_dir,
        state_file=settings.STATE_FILE,
        transactions_file=settings.TRANSACTIONS_FILE,
        floors=settings.FLOORS,
        spots_per_floor=settings.SPOTS_PER_FLOOR,
    )
    if session.startup_warnings:
        for w in session.startup_warnings:
            print(f"❌ {w}")
        sys.exit(1)
    print("✅ Data directory ready")

    grid = session.grid
    print(f"\n🅿️  Grid: {grid.floors} floors × {grid.spots_per_floor} spots = {grid.capacity}")
    print(f"🚗 Parked vehicles restored: {grid.occupied_count()}")
    for v in grid.occupied_spots():
        print(f"   ✓ F{v.floor + 1}-S{v.spot + 1}  {v.license}  ({v.category.label})")

    try:
        txs = session.transactions()
    except PersistenceWarning as e:
        print(f"❌ {e}")
        sys.exit(1)
    print(f"\n🧾 Transactions on record: {len(txs)}")

    print("\n🎉 Ready! Start the operator console or the API:")
    print("   smartpark --data-dir", args.data_dir)
    print(f"   uvicorn smartpark.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT}")


if __name__ == "__main__":
    main()
