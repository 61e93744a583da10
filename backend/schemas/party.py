# backend/schemas/party.py
from pydantic import Field, field_validator
from typing import Optional, Literal
from datetime import datetime

from models.enums import PartyType
from schemas.common import ORMBase, NonEmptyStr


class Address(ORMBase):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = "India"


class _ContactFields(ORMBase):
    @field_validator("email", check_fields=False)
    @classmethod
    def _normalize_email(cls, value):
        return value.strip().lower() if value else value


class PartyCreate(_ContactFields):
    name: NonEmptyStr
    type: PartyType
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[Address] = None
    gstin: Optional[str] = None
    pan_number: Optional[str] = None
    opening_balance: float = 0
    credit_limit: float = Field(default=0, ge=0)
    is_active: bool = True


# Partial update; current balance moves only through the balance endpoint
class PartyUpdate(_ContactFields):
    name: Optional[NonEmptyStr] = None
    type: Optional[PartyType] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[Address] = None
    gstin: Optional[str] = None
    pan_number: Optional[str] = None
    opening_balance: Optional[float] = None
    credit_limit: Optional[float] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


# Body of PATCH /parties/{id}/balance
class BalanceUpdate(ORMBase):
    amount: float = Field(ge=0)
    type: Literal["add", "subtract"]


class PartyOut(ORMBase):
    id: int
    name: str
    type: PartyType
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Address
    gstin: Optional[str] = None
    pan_number: Optional[str] = None
    opening_balance: float
    current_balance: float
    credit_limit: float
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
