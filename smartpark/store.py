"""
Process-wide parking session wiring for the API.
The session (grid + files) is opened once at startup, held on app.state and
handed to every request through the get_session dependency.
"""

from fastapi import Request

from smartpark.config import settings
from smartpark.services.session_service import ParkingSession


def open_session() -> ParkingSession:
    """Ensure the data directory exists and load the persisted grid."""
    return ParkingSession.from_settings(settings)


def get_session(request: Request) -> ParkingSession:
    """FastAPI dependency — returns the session opened at startup."""
    return request.app.state.session
