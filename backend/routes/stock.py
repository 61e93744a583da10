# backend/routes/stock.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.users import User
from models.stock import StockMovement
from models.enums import MovementType
from utils.tokenJWT import get_current_user
from schemas.common import Envelope
from schemas.stock import StockMovementOut

router = APIRouter(prefix="/api/stock-movements", tags=["Stock"])


# Stock ledger, newest first; count is the total before paging
@router.get("", response_model=Envelope[List[StockMovementOut]])
def list_movements(
    product: Optional[int] = Query(None),
    type: Optional[MovementType] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500, alias="pageSize"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(StockMovement).options(joinedload(StockMovement.product)).filter(
        StockMovement.user_id == current_user.id
    )
    if product is not None:
        query = query.filter(StockMovement.product_id == product)
    if type is not None:
        query = query.filter(StockMovement.type == type)

    total = query.count()
    movements = query.order_by(StockMovement.id.desc()).offset((page - 1) * page_size).limit(page_size).all()
    return {"success": True, "count": total, "data": movements}
