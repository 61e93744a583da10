# backend/utils/inventory.py
"""Stock bookkeeping for purchases, sales and manual adjustments.

None of these helpers commit. The calling route commits once, so the
invoice row, the product counters and the stock movements land in the
same transaction or not at all.
"""
import logging
from collections import OrderedDict
from typing import Dict, Iterable, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.enums import MovementType
from models.product import Product
from models.stock import StockMovement

logger = logging.getLogger(__name__)


def _fmt_qty(value: float) -> str:
    return f"{value:g}"


def lock_product(db: Session, user_id: int, product_id: int) -> Product:
    # FOR UPDATE serialises concurrent sales of the same product on Postgres;
    # SQLite ignores it and relies on its database-level write lock
    product = db.query(Product).filter(
        Product.id == product_id, Product.user_id == user_id
    ).with_for_update().first()
    if not product:
        raise HTTPException(status_code=404, detail=f"Product ID {product_id} not found")
    return product


def lock_products(db: Session, user_id: int, product_ids: Iterable[int]) -> Dict[int, Product]:
    """Lock each distinct product once, in ascending id order.

    Two documents touching the same products in a different order then
    wait on each other instead of deadlocking.
    """
    return {pid: lock_product(db, user_id, pid) for pid in sorted(set(product_ids))}


def apply_stock_change(
    db: Session,
    product: Product,
    qty_delta: float,
    movement_type: MovementType,
    user_id: int,
    reason: Optional[str] = None,
    reference: Optional[Tuple[str, int]] = None,
) -> StockMovement:
    """Add `qty_delta` (signed) to the product's stock and record the movement."""
    new_quantity = (product.current_stock or 0) + qty_delta
    if new_quantity < 0:
        raise HTTPException(
            status_code=400,
            detail=f"Insufficient stock for '{product.name}'. Available: {_fmt_qty(product.current_stock or 0)}",
        )
    product.current_stock = new_quantity

    ref_type, ref_id = reference if reference else (None, None)
    movement = StockMovement(
        user_id=user_id,
        product_id=product.id,
        qty=qty_delta,
        balance_after=new_quantity,
        type=movement_type,
        reason=reason,
        reference_type=ref_type,
        reference_id=ref_id,
    )
    db.add(movement)
    logger.debug("Stock %s %+g for product %s -> %g", movement_type.value, qty_delta, product.id, new_quantity)
    return movement


def check_availability(db: Session, user_id: int, items: Iterable) -> Dict[int, Product]:
    """Verify every requested quantity is in stock before anything is written.

    Quantities of repeated products are summed. Stock equal to the request is
    enough; only `stock < requested` fails. Returns the locked products keyed
    by id.
    """
    requested: "OrderedDict[int, float]" = OrderedDict()
    for item in items:
        if not item.quantity or item.quantity <= 0:
            raise HTTPException(status_code=400, detail="Quantity must be a positive number")
        requested[item.product_id] = requested.get(item.product_id, 0) + item.quantity

    products = lock_products(db, user_id, requested)
    for product_id, quantity in requested.items():
        product = products[product_id]
        if (product.current_stock or 0) < quantity:
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient stock for '{product.name}'. Available: {_fmt_qty(product.current_stock or 0)}",
            )
    return products


def receive_purchase(db: Session, user_id: int, purchase, products: Dict[int, Product]) -> None:
    for item in purchase.items:
        apply_stock_change(
            db, products[item.product_id], item.quantity, MovementType.PURCHASE, user_id,
            reason=f"Purchase {purchase.invoice_number}", reference=("purchase", purchase.id),
        )


def revert_purchase(db: Session, user_id: int, purchase) -> None:
    # Fails with 400 when the purchased goods were already sold on
    products = lock_products(db, user_id, (item.product_id for item in purchase.items))
    for item in purchase.items:
        apply_stock_change(
            db, products[item.product_id], -item.quantity, MovementType.PURCHASE_REVERSAL, user_id,
            reason=f"Purchase {purchase.invoice_number} deleted", reference=("purchase", purchase.id),
        )


def issue_sale(db: Session, user_id: int, sale, products: Dict[int, Product]) -> None:
    for item in sale.items:
        apply_stock_change(
            db, products[item.product_id], -item.quantity, MovementType.SALE, user_id,
            reason=f"Sale {sale.invoice_number}", reference=("sale", sale.id),
        )


def revert_sale(db: Session, user_id: int, sale) -> None:
    products = lock_products(db, user_id, (item.product_id for item in sale.items))
    for item in sale.items:
        apply_stock_change(
            db, products[item.product_id], item.quantity, MovementType.SALE_REVERSAL, user_id,
            reason=f"Sale {sale.invoice_number} deleted", reference=("sale", sale.id),
        )
