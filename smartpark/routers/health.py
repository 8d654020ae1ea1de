"""
System health check endpoint.
Returns status of backend + data directory + current occupancy.
"""

import os
from fastapi import APIRouter, Depends
from smartpark.store import get_session
from smartpark.services.session_service import ParkingSession
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
async def health_check(session: ParkingSession = Depends(get_session)):
    """
    Returns:
    - Backend status
    - Data directory writability (state + transaction files)
    - Occupied / capacity
    """
    result = {
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
        "backend": "ok",
        "storage": "unknown",
        "occupied": session.grid.occupied_count(),
        "capacity": session.grid.capacity,
        "startup_warnings": session.startup_warnings,
    }

    data_dir = os.path.dirname(os.path.abspath(session.state_store.path))
    if os.path.isdir(data_dir) and os.access(data_dir, os.W_OK):
        result["storage"] = "ok"
    else:
        result["storage"] = f"error: {data_dir} is not writable"
        result["status"] = "degraded"

    return result
