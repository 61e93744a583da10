# backend/utils/ledger.py
"""Money arithmetic for invoices and party balances.

Everything here is pure apart from `next_invoice_number`, which reads the
owner's existing invoice numbers.
"""
from typing import Iterable, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session

from config import settings
from models.enums import PaymentStatus


def money(value: float) -> float:
    return round(float(value or 0), 2)


def derive_payment_status(paid_amount: float, total_amount: float) -> PaymentStatus:
    """Classify how much of `total_amount` is covered by `paid_amount`.

    paid >= total is PAID (a zero-total invoice counts as paid), any positive
    amount below the total is PARTIAL, anything else is UNPAID.
    """
    paid = paid_amount or 0
    if paid >= (total_amount or 0):
        return PaymentStatus.PAID
    if paid > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def line_amounts(quantity: float, unit_price: float, discount: float, tax_rate: float) -> Tuple[float, float]:
    """Return (tax_amount, total) for one line item."""
    gross = quantity * unit_price
    if discount > gross:
        raise HTTPException(status_code=400, detail="Item discount cannot exceed the line amount")
    net = gross - discount
    tax_amount = net * tax_rate / 100
    return money(tax_amount), money(net + tax_amount)


def invoice_totals(items: Iterable, *extra_charges: float) -> dict:
    """Sum line items into the invoice header fields.

    `extra_charges` (shipping, other charges, round-off) are added to the
    grand total only.
    """
    subtotal = discount = tax = total = 0.0
    for item in items:
        subtotal += item.quantity * item.unit_price
        discount += item.discount or 0
        tax += item.tax_amount or 0
        total += item.total
    total += sum(c or 0 for c in extra_charges)
    return {
        "subtotal": money(subtotal),
        "discount_amount": money(discount),
        "tax_amount": money(tax),
        "total_amount": money(total),
    }


def adjust_balance(current_balance: float, amount: float, direction: str) -> float:
    if direction == "add":
        return money(current_balance + amount)
    if direction == "subtract":
        return money(current_balance - amount)
    raise HTTPException(status_code=400, detail="type must be 'add' or 'subtract'")


def next_invoice_number(db: Session, model, user_id: int, prefix: str) -> str:
    # Highest numeric suffix among the owner's PREFIX-nnnnn numbers, plus one
    rows = db.query(model.invoice_number).filter(
        model.user_id == user_id,
        model.invoice_number.like(f"{prefix}-%"),
    ).all()
    last = 0
    for (value,) in rows:
        tail = value[len(prefix) + 1:]
        if tail.isdigit():
            last = max(last, int(tail))
    return f"{prefix}-{last + 1:0{settings.INVOICE_NUMBER_WIDTH}d}"


def ensure_unique_invoice_number(db: Session, model, user_id: int, invoice_number: str, exclude_id: int = None) -> None:
    query = db.query(model.id).filter(model.user_id == user_id, model.invoice_number == invoice_number)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail=f"Invoice number '{invoice_number}' already exists")


def build_line_items(items_in: Iterable, products: dict, item_cls, default_price_attr: str) -> list:
    """Turn request items into `item_cls` rows, snapshotting product data.

    Missing unit price falls back to the product's `default_price_attr`
    (purchase_price or sale_price); missing tax rate to the product's rate.
    """
    lines = []
    for item in items_in:
        product = products[item.product_id]
        unit_price = item.unit_price if item.unit_price is not None else getattr(product, default_price_attr)
        tax_rate = item.tax_rate if item.tax_rate is not None else (product.tax_rate or 0)
        discount = item.discount or 0
        tax_amount, total = line_amounts(item.quantity, unit_price, discount, tax_rate)
        lines.append(item_cls(
            product_id=product.id,
            product_name=product.name,
            quantity=item.quantity,
            unit_price=unit_price,
            discount=discount,
            tax_rate=tax_rate,
            tax_amount=tax_amount,
            total=total,
        ))
    return lines
