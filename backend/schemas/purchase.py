# backend/schemas/purchase.py
from pydantic import Field, AliasChoices
from typing import List, Optional
from datetime import datetime

from models.enums import PaymentStatus, PurchaseStatus
from schemas.common import ORMBase, NonEmptyStr
from schemas.items import LineItemCreate, LineItemOut, PaymentUpdate  # noqa: F401

PARTY_ALIASES = AliasChoices("partyId", "party_id", "party")


# Input schema for creating a purchase; totals are computed server side
class PurchaseCreate(ORMBase):
    party_id: int = Field(validation_alias=PARTY_ALIASES)
    items: List[LineItemCreate] = Field(min_length=1)
    invoice_number: Optional[NonEmptyStr] = None
    reference_number: Optional[str] = None
    purchase_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    shipping_charges: float = Field(default=0, ge=0)
    other_charges: float = Field(default=0, ge=0)
    paid_amount: float = Field(default=0, ge=0)
    status: PurchaseStatus = PurchaseStatus.CONFIRMED
    notes: Optional[str] = None


# Header fields editable after creation. Items and charges are fixed
# because stock and totals were derived from them.
class PurchaseUpdate(ORMBase):
    party_id: Optional[int] = Field(default=None, validation_alias=PARTY_ALIASES)
    invoice_number: Optional[NonEmptyStr] = None
    reference_number: Optional[str] = None
    purchase_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    paid_amount: Optional[float] = Field(default=None, ge=0)
    status: Optional[PurchaseStatus] = None
    notes: Optional[str] = None


class PurchaseOut(ORMBase):
    id: int
    invoice_number: str
    reference_number: Optional[str] = None
    party_id: int
    party_name: Optional[str] = None
    purchase_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    subtotal: float
    discount_amount: float
    tax_amount: float
    shipping_charges: float
    other_charges: float
    total_amount: float
    paid_amount: float
    balance_amount: float
    payment_status: PaymentStatus
    status: PurchaseStatus
    notes: Optional[str] = None
    items: List[LineItemOut]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
