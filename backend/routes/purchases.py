# backend/routes/purchases.py
from typing import List, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models.users import User
from models.party import Party
from models.purchase import Purchase, PurchaseItem
from models.enums import PaymentStatus, PurchaseStatus
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.records import get_owned, apply_changes, search_filter
from utils.inventory import lock_products, receive_purchase, revert_purchase
from utils.ledger import (
    build_line_items, invoice_totals, derive_payment_status,
    next_invoice_number, ensure_unique_invoice_number,
)
from schemas.common import Envelope
from schemas import purchase as purchase_schemas

router = APIRouter(prefix="/api/purchases", tags=["Purchases"])


# =========================
# HELPER: SUPPLIER CHECK
# =========================
def _get_supplier(db: Session, user_id: int, party_id: int) -> Party:
    party = get_owned(db, Party, user_id, party_id, "Party")
    if not party.type.can_supply():
        raise HTTPException(status_code=400, detail=f"Party '{party.name}' is not a supplier")
    return party


def _get_purchase(db: Session, user_id: int, purchase_id: int, lock: bool = False) -> Purchase:
    return get_owned(db, Purchase, user_id, purchase_id, "Purchase", lock=lock)


# =========================
# CREATE + STOCK IN
# =========================
@router.post("", status_code=201, response_model=Envelope[purchase_schemas.PurchaseOut])
def create_purchase(
    payload: purchase_schemas.PurchaseCreate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    uid = current_user.id
    party = _get_supplier(db, uid, payload.party_id)

    invoice_number = payload.invoice_number or next_invoice_number(db, Purchase, uid, "PUR")
    ensure_unique_invoice_number(db, Purchase, uid, invoice_number)

    # Resolve every product before anything is written
    products = lock_products(db, uid, (item.product_id for item in payload.items))
    items = build_line_items(payload.items, products, PurchaseItem, "purchase_price")
    totals = invoice_totals(items, payload.shipping_charges, payload.other_charges)

    purchase = Purchase(
        user_id=uid,
        invoice_number=invoice_number,
        reference_number=payload.reference_number,
        party_id=party.id,
        purchase_date=payload.purchase_date or datetime.now(),
        due_date=payload.due_date,
        shipping_charges=payload.shipping_charges,
        other_charges=payload.other_charges,
        paid_amount=payload.paid_amount,
        payment_status=derive_payment_status(payload.paid_amount, totals["total_amount"]),
        status=payload.status,
        notes=payload.notes,
        items=items,
        **totals,
    )
    db.add(purchase)
    db.flush()

    # Record and stock counters share one commit
    receive_purchase(db, uid, purchase, products)
    db.commit()
    db.refresh(purchase)

    write_log(
        db, user_id=uid, action="PURCHASE_CREATE", resource="purchases", status="SUCCESS",
        ip=client_ip(request),
        meta={"id": purchase.id, "invoice_number": purchase.invoice_number, "total": purchase.total_amount},
    )
    return {"success": True, "message": "Purchase created successfully", "data": purchase}


# =========================
# LIST
# =========================
@router.get("", response_model=Envelope[List[purchase_schemas.PurchaseOut]])
def list_purchases(
    party: Optional[int] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    status: Optional[PurchaseStatus] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    query = db.query(Purchase).options(
        selectinload(Purchase.items), selectinload(Purchase.party)
    ).filter(Purchase.user_id == current_user.id)

    if party is not None: query = query.filter(Purchase.party_id == party)
    if payment_status is not None: query = query.filter(Purchase.payment_status == payment_status)
    if status is not None: query = query.filter(Purchase.status == status)
    if search: query = query.filter(search_filter(Purchase.invoice_number, search))

    purchases = query.order_by(Purchase.created_at.desc(), Purchase.id.desc()).all()
    return {"success": True, "count": len(purchases), "data": purchases}


@router.get("/{purchase_id}", response_model=Envelope[purchase_schemas.PurchaseOut])
def get_purchase(
    purchase_id: int,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    purchase = _get_purchase(db, current_user.id, purchase_id)
    return {"success": True, "data": purchase}


# =========================
# UPDATE (header fields only)
# =========================
@router.put("/{purchase_id}", response_model=Envelope[purchase_schemas.PurchaseOut])
def update_purchase(
    purchase_id: int, payload: purchase_schemas.PurchaseUpdate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    uid = current_user.id
    purchase = _get_purchase(db, uid, purchase_id)
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("party_id") is not None:
        _get_supplier(db, uid, changes["party_id"])
    if changes.get("invoice_number"):
        ensure_unique_invoice_number(db, Purchase, uid, changes["invoice_number"], exclude_id=purchase.id)

    # paid_amount changes here leave payment_status alone; see PATCH /payment
    apply_changes(purchase, changes, required={
        "party_id", "invoice_number", "purchase_date", "paid_amount", "status",
    })
    db.commit()
    db.refresh(purchase)

    write_log(
        db, user_id=uid, action="PURCHASE_UPDATE", resource="purchases", status="SUCCESS",
        ip=client_ip(request), meta={"id": purchase.id, "fields": sorted(changes)},
    )
    return {"success": True, "message": "Purchase updated successfully", "data": purchase}


# =========================
# DELETE + STOCK REVERSAL
# =========================
@router.delete("/{purchase_id}", response_model=Envelope)
def delete_purchase(
    purchase_id: int, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    uid = current_user.id
    purchase = _get_purchase(db, uid, purchase_id, lock=True)
    pid, number = purchase.id, purchase.invoice_number

    try:
        revert_purchase(db, uid, purchase)
        db.delete(purchase)
        db.commit()
    except HTTPException as e:
        db.rollback()
        write_log(
            db, user_id=uid, action="PURCHASE_DELETE", resource="purchases", status="FAIL",
            ip=client_ip(request), meta={"id": pid, "reason": e.detail},
        )
        raise

    write_log(
        db, user_id=uid, action="PURCHASE_DELETE", resource="purchases", status="SUCCESS",
        ip=client_ip(request), meta={"id": pid, "invoice_number": number},
    )
    return {"success": True, "message": "Purchase deleted successfully"}


# =========================
# PAYMENT
# =========================
@router.patch("/{purchase_id}/payment", response_model=Envelope[purchase_schemas.PurchaseOut])
def update_payment_status(
    purchase_id: int, payload: purchase_schemas.PaymentUpdate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    purchase = _get_purchase(db, current_user.id, purchase_id, lock=True)

    purchase.paid_amount = payload.paid_amount
    purchase.payment_status = derive_payment_status(payload.paid_amount, purchase.total_amount)
    db.commit()
    db.refresh(purchase)

    write_log(
        db, user_id=current_user.id, action="PURCHASE_PAYMENT", resource="purchases", status="SUCCESS",
        ip=client_ip(request),
        meta={"id": purchase.id, "paid": purchase.paid_amount, "payment_status": purchase.payment_status.value},
    )
    return {"success": True, "message": "Payment status updated successfully", "data": purchase}
