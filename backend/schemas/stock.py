# backend/schemas/stock.py
from typing import Optional
from datetime import datetime

from models.enums import MovementType
from schemas.common import ORMBase


# Schema for returning stock ledger entries
class StockMovementOut(ORMBase):
    id: int
    product_id: int
    product_name: Optional[str] = None
    qty: float
    balance_after: float
    type: MovementType
    reason: Optional[str] = None
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    created_at: Optional[datetime] = None
