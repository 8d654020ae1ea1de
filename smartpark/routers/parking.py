"""
Entry / exit / search endpoints.
Handlers are coroutines so they run one at a time on the event loop;
grid mutations never interleave.
"""

from fastapi import APIRouter, Depends, status
from smartpark.store import get_session
from smartpark.schemas.vehicle import VehicleEntryIn, EntryOut, ParkedVehicleOut, SearchOut
from smartpark.schemas.transaction import ReceiptOut, TransactionOut
from smartpark.services.session_service import ParkingSession

router = APIRouter()


@router.post("/parking/entry", response_model=EntryOut, status_code=status.HTTP_201_CREATED,
             summary="Park a vehicle at the nearest free spot")
async def park_vehicle(body: VehicleEntryIn, session: ParkingSession = Depends(get_session)):
    """400 on bad input, 409 if the plate is already parked, 503 when the lot is full."""
    result = session.park_vehicle(body.category, body.license, body.owner)
    return EntryOut(vehicle=ParkedVehicleOut.from_vehicle(result.vehicle), warnings=result.warnings)


@router.post("/parking/exit/{license}", response_model=ReceiptOut, summary="Bill and release a vehicle")
async def exit_vehicle(license: str, session: ParkingSession = Depends(get_session)):
    receipt = session.exit_vehicle(license)
    return ReceiptOut(
        transaction=TransactionOut.from_transaction(receipt.transaction),
        owner=receipt.owner,
        floor=receipt.floor,
        spot=receipt.spot,
        warnings=receipt.warnings,
    )


@router.get("/parking/vehicles", response_model=list[ParkedVehicleOut], summary="List parked vehicles")
async def list_vehicles(session: ParkingSession = Depends(get_session)):
    """Currently parked vehicles in floor, spot order."""
    return [ParkedVehicleOut.from_vehicle(v) for v in session.parked_vehicles()]


@router.get("/parking/vehicles/{license}", response_model=SearchOut, summary="Look up a plate number")
async def search_vehicle(license: str, session: ParkingSession = Depends(get_session)):
    """Not being parked is a normal answer here, not a 404."""
    vehicle = session.search_vehicle(license)
    if vehicle is None:
        return SearchOut(license=license, found=False)
    return SearchOut(license=license, found=True, vehicle=ParkedVehicleOut.from_vehicle(vehicle))
