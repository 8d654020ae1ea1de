"""Occupancy, revenue and peak entry-hour reports."""

from datetime import date
from fastapi import APIRouter, Depends
from smartpark.store import get_session
from smartpark.schemas.report import (
    FloorOccupancyOut, OccupancyReportOut, PeakHourReportOut, RevenueReportOut,
)
from smartpark.services.session_service import ParkingSession

router = APIRouter()


@router.get("/reports/occupancy", response_model=OccupancyReportOut, summary="Occupancy per floor")
async def get_occupancy(session: ParkingSession = Depends(get_session)):
    report = session.occupancy_report()
    floors = [
        FloorOccupancyOut(floor=f.floor + 1, occupied=f.occupied, capacity=f.capacity,
                          occupancy_percent=f.percent, is_full=f.occupied >= f.capacity)
        for f in report.floors
    ]
    return OccupancyReportOut(floors=floors, occupied=report.occupied, capacity=report.capacity,
                              occupancy_percent=report.percent,
                              is_full=report.occupied >= report.capacity)


@router.get("/reports/revenue", response_model=RevenueReportOut, summary="Revenue today and all-time")
async def get_revenue(session: ParkingSession = Depends(get_session)):
    report = session.revenue_report()
    return RevenueReportOut(date=str(date.today()), today=report.today, total=report.total,
                            transaction_count=report.transaction_count,
                            has_transactions=report.has_transactions)


@router.get("/reports/peak-hour", response_model=PeakHourReportOut, summary="Busiest entry hour")
async def get_peak_hour(session: ParkingSession = Depends(get_session)):
    """Counts past visits plus vehicles still parked. Earliest hour wins ties."""
    report = session.peak_hour_report()
    label = None
    if report.has_data:
        label = f"{report.hour:02d}:00-{(report.hour + 1) % 24:02d}:00"
    return PeakHourReportOut(hour=report.hour, count=report.count, label=label,
                             histogram=report.histogram, has_data=report.has_data)
