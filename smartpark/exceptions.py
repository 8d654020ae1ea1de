"""
Error taxonomy for parking operations.
Raised by the grid and session services, caught and rendered by the CLI and
the API exception handlers.
"""


class ParkingError(Exception):
    """Base class for every error raised by the parking core."""


class ValidationError(ParkingError):
    """Empty or malformed input, or an unknown vehicle category."""


class DuplicateVehicle(ParkingError):
    def __init__(self, license: str, floor: int, spot: int):
        self.license = license
        self.floor = floor
        self.spot = spot
        super().__init__(
            f"Vehicle with license {license} is already parked at Floor {floor + 1}, Spot {spot + 1}."
        )


class LotFull(ParkingError):
    def __init__(self):
        super().__init__("Parking full. No available spots.")


class NotFound(ParkingError):
    def __init__(self, license: str):
        self.license = license
        super().__init__(f"Vehicle with license {license} not found.")


class PersistenceWarning(ParkingError):
    """State or transaction file could not be read or written. Never fatal."""


# Grid precondition guards. Callers check with the lookups first.

class SpotOutOfRange(ParkingError):
    pass


class SpotOccupied(ParkingError):
    pass


class SpotVacant(ParkingError):
    pass
