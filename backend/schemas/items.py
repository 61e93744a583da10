# backend/schemas/items.py
# Pieces shared by purchases and sales
from pydantic import Field, AliasChoices
from typing import Optional

from schemas.common import ORMBase


# Input schema for a single line item of a purchase or sale
class LineItemCreate(ORMBase):
    product_id: int = Field(validation_alias=AliasChoices("productId", "product_id", "product"))
    quantity: float = Field(ge=1)
    unit_price: Optional[float] = Field(default=None, ge=0)
    discount: float = Field(default=0, ge=0)
    tax_rate: Optional[float] = Field(default=None, ge=0, le=100)


# Output schema for a stored line item
class LineItemOut(ORMBase):
    id: int
    product_id: int
    product_name: str
    quantity: float
    unit_price: float
    discount: float
    tax_rate: float
    tax_amount: float
    total: float


# Body of PATCH /purchases/{id}/payment and /sales/{id}/payment
class PaymentUpdate(ORMBase):
    paid_amount: float = Field(ge=0)
