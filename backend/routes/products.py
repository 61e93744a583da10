# backend/routes/products.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from models.category import Category
from models.product import Product
from models.purchase import PurchaseItem
from models.sale import SaleItem
from models.enums import MovementType
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.records import get_owned, apply_changes, search_filter
from utils.inventory import apply_stock_change
from schemas.common import Envelope
import schemas.product as product_schemas

router = APIRouter(prefix="/api/products", tags=["Products"])


# ---- HELPERS ----
def _norm_sku(sku: Optional[str]) -> Optional[str]:
    if sku is None:
        return None
    s = sku.strip().upper()
    return s if s else None

def _ensure_sku_free(db: Session, user_id: int, sku: Optional[str], exclude_id: Optional[int] = None) -> None:
    if not sku:
        return
    query = db.query(Product.id).filter(Product.user_id == user_id, Product.sku == sku)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail=f"SKU '{sku}' already exists")


# =========================
# CREATE
# =========================
@router.post("", status_code=201, response_model=Envelope[product_schemas.ProductOut])
def create_product(
    payload: product_schemas.ProductCreate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    get_owned(db, Category, current_user.id, payload.category_id, "Category")

    data = payload.model_dump()
    data["sku"] = _norm_sku(data.get("sku"))
    _ensure_sku_free(db, current_user.id, data["sku"])

    product = Product(user_id=current_user.id, current_stock=0, **data)
    db.add(product)
    db.commit()
    db.refresh(product)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": product.id, "sku": product.sku},
    )
    return {"success": True, "message": "Product created successfully", "data": product}


# =========================
# LIST
# =========================
@router.get("", response_model=Envelope[List[product_schemas.ProductOut]])
def list_products(
    category: Optional[int] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    low_stock: Optional[bool] = Query(None, alias="lowStock"),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    query = db.query(Product).filter(Product.user_id == current_user.id)

    if category is not None: query = query.filter(Product.category_id == category)
    if is_active is not None: query = query.filter(Product.is_active == is_active)
    if low_stock: query = query.filter(Product.current_stock <= Product.min_stock_level)
    if search: query = query.filter(search_filter(Product.name, search))

    products = query.order_by(Product.created_at.desc(), Product.id.desc()).all()
    return {"success": True, "count": len(products), "data": products}


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=Envelope[product_schemas.ProductOut])
def get_product(
    product_id: int,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    product = get_owned(db, Product, current_user.id, product_id, "Product")
    return {"success": True, "data": product}


# =========================
# UPDATE (stock is not editable here)
# =========================
@router.put("/{product_id}", response_model=Envelope[product_schemas.ProductOut])
def update_product(
    product_id: int, payload: product_schemas.ProductUpdate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    product = get_owned(db, Product, current_user.id, product_id, "Product")
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("category_id") is not None:
        get_owned(db, Category, current_user.id, changes["category_id"], "Category")
    if "sku" in changes:
        changes["sku"] = _norm_sku(changes["sku"])
        _ensure_sku_free(db, current_user.id, changes["sku"], exclude_id=product.id)

    apply_changes(product, changes, required={
        "name", "category_id", "purchase_price", "sale_price", "unit",
        "min_stock_level", "tax_rate", "is_active",
    })
    db.commit()
    db.refresh(product)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": product.id, "fields": sorted(changes)},
    )
    return {"success": True, "message": "Product updated successfully", "data": product}


# =========================
# DELETE
# =========================
@router.delete("/{product_id}", response_model=Envelope)
def delete_product(
    product_id: int, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    product = get_owned(db, Product, current_user.id, product_id, "Product")

    # Line items keep a reference to the product for stock reversal
    used = (
        db.query(PurchaseItem.id).filter(PurchaseItem.product_id == product.id).first()
        or db.query(SaleItem.id).filter(SaleItem.product_id == product.id).first()
    )
    if used:
        raise HTTPException(status_code=400, detail="Product is used in purchases or sales and cannot be deleted")

    pid, pname = product.id, product.name
    db.delete(product)
    db.commit()
    write_log(
        db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": pid},
    )
    return {"success": True, "message": f"Product '{pname}' deleted successfully"}


# =========================
# MANUAL STOCK ADJUSTMENT
# =========================
@router.patch("/{product_id}/stock", response_model=Envelope[product_schemas.ProductOut])
def adjust_stock(
    product_id: int, payload: product_schemas.StockAdjust, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    product = get_owned(db, Product, current_user.id, product_id, "Product", lock=True)

    qty_delta = payload.quantity if payload.type == "add" else -payload.quantity
    try:
        movement = apply_stock_change(
            db, product, qty_delta, MovementType.ADJUSTMENT, current_user.id,
            reason=payload.reason or f"Manual {payload.type}",
        )
        db.commit()
    except HTTPException as e:
        db.rollback()
        write_log(
            db, user_id=current_user.id, action="STOCK_ADJUSTMENT", resource="products",
            status="FAIL", ip=client_ip(request), meta={"id": product_id, "reason": e.detail},
        )
        raise
    db.refresh(product)

    write_log(
        db, user_id=current_user.id, action="STOCK_ADJUSTMENT", resource="products",
        status="SUCCESS", ip=client_ip(request),
        meta={"id": product.id, "qty": qty_delta, "movement_id": movement.id},
    )
    return {"success": True, "message": "Stock updated successfully", "data": product}
