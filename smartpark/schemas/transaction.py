from pydantic import BaseModel
from datetime import datetime


class TransactionOut(BaseModel):
    license: str
    category: str
    entry_time: int
    exit_time: int
    entry_at: datetime
    exit_at: datetime
    duration_min: int
    fee: float

    @classmethod
    def from_transaction(cls, tx) -> "TransactionOut":
        return cls(
            license=tx.license,
            category=tx.category.label,
            entry_time=tx.entry_time,
            exit_time=tx.exit_time,
            entry_at=datetime.fromtimestamp(tx.entry_time),
            exit_at=datetime.fromtimestamp(tx.exit_time),
            duration_min=tx.duration_min,
            fee=tx.fee,
        )


class ReceiptOut(BaseModel):
    transaction: TransactionOut
    owner: str
    floor: int
    spot: int
    warnings: list[str] = []
