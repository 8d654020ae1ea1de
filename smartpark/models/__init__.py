# SmartPark — Domain Models
# Import all models here so callers can use `from smartpark.models import ...`

from smartpark.models.vehicle import Vehicle, VehicleCategory   # noqa
from smartpark.models.transaction import Transaction             # noqa
from smartpark.models.grid import OccupancyGrid                  # noqa
