"""Unit tests for the tiered fee model."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from smartpark.models.vehicle import VehicleCategory
from smartpark.services.fee_service import RATES, billable_hours, compute_fee


class TestBillableHours:
    @pytest.mark.parametrize("minutes,hours", [
        (-30, 1), (0, 1), (1, 1), (59, 1), (60, 1), (61, 2), (90, 2), (120, 2), (121, 3),
    ])
    def test_rounds_up_with_one_hour_minimum(self, minutes, hours):
        assert billable_hours(minutes) == hours


class TestComputeFee:
    @pytest.mark.parametrize("category", list(VehicleCategory))
    def test_first_hour_flat_rate(self, category):
        first_hour, _ = RATES[category]
        for minutes in (1, 30, 59, 60):
            assert compute_fee(category, minutes) == first_hour

    @pytest.mark.parametrize("category", list(VehicleCategory))
    def test_zero_and_negative_bill_one_hour(self, category):
        first_hour, _ = RATES[category]
        assert compute_fee(category, 0) == first_hour
        assert compute_fee(category, -45) == first_hour

    def test_rate_table(self):
        assert compute_fee(VehicleCategory.TWO_WHEELER, 90) == 30.0
        assert compute_fee(VehicleCategory.STANDARD, 90) == 60.0
        assert compute_fee(VehicleCategory.HEAVY, 90) == 90.0
        assert compute_fee(VehicleCategory.STANDARD, 5 * 60) == 40.0 + 4 * 20.0

    @pytest.mark.parametrize("category", list(VehicleCategory))
    def test_non_decreasing_in_duration(self, category):
        fees = [compute_fee(category, m) for m in range(0, 24 * 60, 7)]
        assert fees == sorted(fees)

    def test_accepts_integer_code(self):
        assert compute_fee(2, 61) == 90.0
