"""
Tiered parking fee: first hour at a flat rate, each further started hour at
a lower rate. Durations are rounded up to whole hours, minimum one hour.
"""

from smartpark.models.vehicle import VehicleCategory

# category → (first_hour, additional_hour)
RATES = {
    VehicleCategory.TWO_WHEELER: (20.0, 10.0),
    VehicleCategory.STANDARD: (40.0, 20.0),
    VehicleCategory.HEAVY: (60.0, 30.0),
}


def billable_hours(duration_minutes: int) -> int:
    hours = -(-duration_minutes // 60)   # ceil for ints
    return max(1, hours)


def compute_fee(category: VehicleCategory, duration_minutes: int) -> float:
    first_hour, additional_hour = RATES[VehicleCategory(category)]
    hours = billable_hours(duration_minutes)
    if hours == 1:
        return first_hour
    return first_hour + (hours - 1) * additional_hour
