"""Completed visits, read-only view of the transaction log."""

from fastapi import APIRouter, Depends
from smartpark.store import get_session
from smartpark.schemas.transaction import TransactionOut
from smartpark.services.session_service import ParkingSession

router = APIRouter()


@router.get("/transactions", response_model=list[TransactionOut], summary="Transaction log, newest first")
async def list_transactions(limit: int = 50, session: ParkingSession = Depends(get_session)):
    txs = session.transactions()
    return [TransactionOut.from_transaction(tx) for tx in reversed(txs)][:max(0, limit)]
