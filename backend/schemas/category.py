# backend/schemas/category.py
from typing import Optional
from datetime import datetime

from schemas.common import ORMBase, NonEmptyStr


class CategoryCreate(ORMBase):
    name: NonEmptyStr
    description: Optional[str] = None
    is_active: bool = True


# All fields optional: only the ones sent are changed
class CategoryUpdate(ORMBase):
    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryOut(ORMBase):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
