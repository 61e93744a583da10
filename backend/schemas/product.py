# backend/schemas/product.py
from pydantic import Field, AliasChoices
from typing import Optional, Literal
from datetime import datetime

from models.enums import Unit
from schemas.common import ORMBase, NonEmptyStr

CATEGORY_ALIASES = AliasChoices("categoryId", "category_id", "category")


# Schema for creating a new product. Stock always starts at zero and is
# moved by purchases, sales and stock adjustments.
class ProductCreate(ORMBase):
    name: NonEmptyStr
    category_id: int = Field(validation_alias=CATEGORY_ALIASES)
    purchase_price: float = Field(ge=0)
    sale_price: float = Field(ge=0)
    sku: Optional[str] = None
    barcode: Optional[str] = None
    description: Optional[str] = None
    unit: Unit = Unit.PCS
    min_stock_level: float = Field(default=10, ge=0)
    tax_rate: float = Field(default=0, ge=0, le=100)
    hsn_code: Optional[str] = None
    is_active: bool = True


# Schema for partial product updates - all fields optional, stock excluded
class ProductUpdate(ORMBase):
    name: Optional[NonEmptyStr] = None
    category_id: Optional[int] = Field(default=None, validation_alias=CATEGORY_ALIASES)
    purchase_price: Optional[float] = Field(default=None, ge=0)
    sale_price: Optional[float] = Field(default=None, ge=0)
    sku: Optional[str] = None
    barcode: Optional[str] = None
    description: Optional[str] = None
    unit: Optional[Unit] = None
    min_stock_level: Optional[float] = Field(default=None, ge=0)
    tax_rate: Optional[float] = Field(default=None, ge=0, le=100)
    hsn_code: Optional[str] = None
    is_active: Optional[bool] = None


# Body of PATCH /products/{id}/stock
class StockAdjust(ORMBase):
    quantity: float = Field(gt=0)
    type: Literal["add", "subtract"]
    reason: Optional[str] = None


class ProductOut(ORMBase):
    id: int
    name: str
    sku: Optional[str] = None
    barcode: Optional[str] = None
    category_id: int
    category_name: Optional[str] = None
    description: Optional[str] = None
    unit: Unit
    purchase_price: float
    sale_price: float
    current_stock: float
    min_stock_level: float
    tax_rate: float
    hsn_code: Optional[str] = None
    is_active: bool
    is_low_stock: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
