# backend/routes/categories.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from models.category import Category
from models.product import Product
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.records import get_owned, apply_changes, search_filter
from schemas.common import Envelope
from schemas.category import CategoryCreate, CategoryUpdate, CategoryOut

router = APIRouter(prefix="/api/categories", tags=["Categories"])


def _ensure_name_free(db: Session, user_id: int, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Category.id).filter(Category.user_id == user_id, Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail=f"Category '{name}' already exists")


@router.post("", status_code=201, response_model=Envelope[CategoryOut])
def create_category(
    payload: CategoryCreate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    _ensure_name_free(db, current_user.id, payload.name)

    category = Category(user_id=current_user.id, **payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)

    write_log(
        db, user_id=current_user.id, action="CATEGORY_CREATE", resource="categories",
        status="SUCCESS", ip=client_ip(request), meta={"id": category.id},
    )
    return {"success": True, "message": "Category created successfully", "data": category}


@router.get("", response_model=Envelope[List[CategoryOut]])
def list_categories(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    query = db.query(Category).filter(Category.user_id == current_user.id)
    if is_active is not None:
        query = query.filter(Category.is_active == is_active)
    if search:
        query = query.filter(search_filter(Category.name, search))

    categories = query.order_by(Category.created_at.desc(), Category.id.desc()).all()
    return {"success": True, "count": len(categories), "data": categories}


@router.get("/{category_id}", response_model=Envelope[CategoryOut])
def get_category(
    category_id: int,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    category = get_owned(db, Category, current_user.id, category_id, "Category")
    return {"success": True, "data": category}


@router.put("/{category_id}", response_model=Envelope[CategoryOut])
def update_category(
    category_id: int, payload: CategoryUpdate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    category = get_owned(db, Category, current_user.id, category_id, "Category")
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name"):
        _ensure_name_free(db, current_user.id, changes["name"], exclude_id=category.id)

    apply_changes(category, changes, required={"name", "is_active"})
    db.commit()
    db.refresh(category)

    write_log(
        db, user_id=current_user.id, action="CATEGORY_UPDATE", resource="categories",
        status="SUCCESS", ip=client_ip(request), meta={"id": category.id},
    )
    return {"success": True, "message": "Category updated successfully", "data": category}


@router.delete("/{category_id}", response_model=Envelope)
def delete_category(
    category_id: int, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    category = get_owned(db, Category, current_user.id, category_id, "Category")
    in_use = db.query(Product.id).filter(Product.category_id == category.id).first()
    if in_use:
        raise HTTPException(status_code=400, detail="Category has products assigned and cannot be deleted")

    cid = category.id
    db.delete(category)
    db.commit()

    write_log(
        db, user_id=current_user.id, action="CATEGORY_DELETE", resource="categories",
        status="SUCCESS", ip=client_ip(request), meta={"id": cid},
    )
    return {"success": True, "message": "Category deleted successfully"}
