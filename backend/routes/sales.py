# backend/routes/sales.py
from typing import List, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models.users import User
from models.party import Party
from models.sale import Sale, SaleItem
from models.enums import PaymentStatus, SaleStatus
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.records import get_owned, apply_changes, search_filter
from utils.inventory import check_availability, issue_sale, revert_sale
from utils.ledger import (
    build_line_items, invoice_totals, derive_payment_status,
    next_invoice_number, ensure_unique_invoice_number,
)
from schemas.common import Envelope
from schemas import sale as sale_schemas

router = APIRouter(prefix="/api/sales", tags=["Sales"])


def _get_customer(db: Session, user_id: int, party_id: int) -> Party:
    party = get_owned(db, Party, user_id, party_id, "Party")
    if not party.type.can_buy():
        raise HTTPException(status_code=400, detail=f"Party '{party.name}' is not a customer")
    return party


def _get_sale(db: Session, user_id: int, sale_id: int, lock: bool = False) -> Sale:
    return get_owned(db, Sale, user_id, sale_id, "Sale", lock=lock)


# =========================
# CREATE + STOCK OUT
# =========================
@router.post("", status_code=201, response_model=Envelope[sale_schemas.SaleOut])
def create_sale(
    payload: sale_schemas.SaleCreate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    uid = current_user.id
    party = _get_customer(db, uid, payload.party_id) if payload.party_id is not None else None

    invoice_number = payload.invoice_number or next_invoice_number(db, Sale, uid, "SAL")
    ensure_unique_invoice_number(db, Sale, uid, invoice_number)

    # Every item is checked before any stock moves or the sale is written
    try:
        products = check_availability(db, uid, payload.items)
    except HTTPException as e:
        db.rollback()
        if e.status_code == 400:
            write_log(
                db, user_id=uid, action="SALE_CREATE", resource="sales", status="FAIL",
                ip=client_ip(request), meta={"reason": e.detail},
            )
        raise

    items = build_line_items(payload.items, products, SaleItem, "sale_price")
    totals = invoice_totals(items, payload.shipping_charges, payload.other_charges, payload.round_off)

    sale = Sale(
        user_id=uid,
        invoice_number=invoice_number,
        party_id=party.id if party else None,
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        customer_address=payload.customer_address,
        sale_date=payload.sale_date or datetime.now(),
        due_date=payload.due_date,
        shipping_charges=payload.shipping_charges,
        other_charges=payload.other_charges,
        round_off=payload.round_off,
        paid_amount=payload.paid_amount,
        payment_status=derive_payment_status(payload.paid_amount, totals["total_amount"]),
        payment_mode=payload.payment_mode,
        status=payload.status,
        notes=payload.notes,
        items=items,
        **totals,
    )
    db.add(sale)
    db.flush()

    issue_sale(db, uid, sale, products)
    db.commit()
    db.refresh(sale)

    write_log(
        db, user_id=uid, action="SALE_CREATE", resource="sales", status="SUCCESS",
        ip=client_ip(request),
        meta={"id": sale.id, "invoice_number": sale.invoice_number, "total": sale.total_amount},
    )
    return {"success": True, "message": "Sale created successfully", "data": sale}


# =========================
# LIST
# =========================
@router.get("", response_model=Envelope[List[sale_schemas.SaleOut]])
def list_sales(
    party: Optional[int] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    status: Optional[SaleStatus] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    query = db.query(Sale).options(
        selectinload(Sale.items), selectinload(Sale.party)
    ).filter(Sale.user_id == current_user.id)

    if party is not None: query = query.filter(Sale.party_id == party)
    if payment_status is not None: query = query.filter(Sale.payment_status == payment_status)
    if status is not None: query = query.filter(Sale.status == status)
    if search: query = query.filter(search_filter(Sale.invoice_number, search))

    sales = query.order_by(Sale.created_at.desc(), Sale.id.desc()).all()
    return {"success": True, "count": len(sales), "data": sales}


@router.get("/{sale_id}", response_model=Envelope[sale_schemas.SaleOut])
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    sale = _get_sale(db, current_user.id, sale_id)
    return {"success": True, "data": sale}


# =========================
# UPDATE (header fields only)
# =========================
@router.put("/{sale_id}", response_model=Envelope[sale_schemas.SaleOut])
def update_sale(
    sale_id: int, payload: sale_schemas.SaleUpdate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    uid = current_user.id
    sale = _get_sale(db, uid, sale_id)
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("party_id") is not None:
        _get_customer(db, uid, changes["party_id"])
    if changes.get("invoice_number"):
        ensure_unique_invoice_number(db, Sale, uid, changes["invoice_number"], exclude_id=sale.id)

    apply_changes(sale, changes, required={
        "invoice_number", "sale_date", "paid_amount", "payment_mode", "status",
    })
    db.commit()
    db.refresh(sale)

    write_log(
        db, user_id=uid, action="SALE_UPDATE", resource="sales", status="SUCCESS",
        ip=client_ip(request), meta={"id": sale.id, "fields": sorted(changes)},
    )
    return {"success": True, "message": "Sale updated successfully", "data": sale}


# =========================
# DELETE + STOCK REVERSAL
# =========================
@router.delete("/{sale_id}", response_model=Envelope)
def delete_sale(
    sale_id: int, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    uid = current_user.id
    sale = _get_sale(db, uid, sale_id, lock=True)
    sid, number = sale.id, sale.invoice_number

    revert_sale(db, uid, sale)
    db.delete(sale)
    db.commit()

    write_log(
        db, user_id=uid, action="SALE_DELETE", resource="sales", status="SUCCESS",
        ip=client_ip(request), meta={"id": sid, "invoice_number": number},
    )
    return {"success": True, "message": "Sale deleted successfully"}


# =========================
# PAYMENT
# =========================
@router.patch("/{sale_id}/payment", response_model=Envelope[sale_schemas.SaleOut])
def update_payment_status(
    sale_id: int, payload: sale_schemas.PaymentUpdate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    sale = _get_sale(db, current_user.id, sale_id, lock=True)

    sale.paid_amount = payload.paid_amount
    sale.payment_status = derive_payment_status(payload.paid_amount, sale.total_amount)
    db.commit()
    db.refresh(sale)

    write_log(
        db, user_id=current_user.id, action="SALE_PAYMENT", resource="sales", status="SUCCESS",
        ip=client_ip(request),
        meta={"id": sale.id, "paid": sale.paid_amount, "payment_status": sale.payment_status.value},
    )
    return {"success": True, "message": "Payment status updated successfully", "data": sale}
