# backend/schemas/sale.py
from pydantic import Field, AliasChoices
from typing import List, Optional
from datetime import datetime

from models.enums import PaymentMode, PaymentStatus, SaleStatus
from schemas.common import ORMBase, NonEmptyStr
from schemas.items import LineItemCreate, LineItemOut, PaymentUpdate  # noqa: F401

PARTY_ALIASES = AliasChoices("partyId", "party_id", "party")


# Input schema for creating a sale; party may be omitted for walk-in customers
class SaleCreate(ORMBase):
    party_id: Optional[int] = Field(default=None, validation_alias=PARTY_ALIASES)
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    items: List[LineItemCreate] = Field(min_length=1)
    invoice_number: Optional[NonEmptyStr] = None
    sale_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    shipping_charges: float = Field(default=0, ge=0)
    other_charges: float = Field(default=0, ge=0)
    round_off: float = 0
    paid_amount: float = Field(default=0, ge=0)
    payment_mode: PaymentMode = PaymentMode.CASH
    status: SaleStatus = SaleStatus.CONFIRMED
    notes: Optional[str] = None


class SaleUpdate(ORMBase):
    party_id: Optional[int] = Field(default=None, validation_alias=PARTY_ALIASES)
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    invoice_number: Optional[NonEmptyStr] = None
    sale_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    paid_amount: Optional[float] = Field(default=None, ge=0)
    payment_mode: Optional[PaymentMode] = None
    status: Optional[SaleStatus] = None
    notes: Optional[str] = None


class SaleOut(ORMBase):
    id: int
    invoice_number: str
    party_id: Optional[int] = None
    party_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    sale_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    subtotal: float
    discount_amount: float
    tax_amount: float
    shipping_charges: float
    other_charges: float
    round_off: float
    total_amount: float
    paid_amount: float
    balance_amount: float
    payment_status: PaymentStatus
    payment_mode: PaymentMode
    status: SaleStatus
    notes: Optional[str] = None
    items: List[LineItemOut]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
