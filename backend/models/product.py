# backend/models/product.py
from sqlalchemy import (
    Column, Integer, String, Float, Boolean, ForeignKey, DateTime, Enum,
    CheckConstraint, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from database import Base
from models.enums import Unit

# Catalog entry with prices, tax rate and the running stock counter.
# current_stock is only changed through purchases, sales and the
# stock-adjustment endpoint, never through a plain update.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    sku = Column(String, nullable=True, index=True)
    barcode = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    description = Column(String, nullable=True)
    unit = Column(Enum(Unit), nullable=False, default=Unit.PCS)

    # Prices and tax rate, guarded by check constraints
    purchase_price = Column(Float, CheckConstraint("purchase_price >= 0"), nullable=False)
    sale_price = Column(Float, CheckConstraint("sale_price >= 0"), nullable=False)
    tax_rate = Column(Float, CheckConstraint("tax_rate >= 0 AND tax_rate <= 100"), nullable=False, default=0)
    hsn_code = Column(String, nullable=True)

    # Stock data
    current_stock = Column(Float, CheckConstraint("current_stock >= 0"), nullable=False, default=0)
    min_stock_level = Column(Float, nullable=False, default=10)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="products")

    __table_args__ = (
        UniqueConstraint("user_id", "sku", name="uq_product_owner_sku"),
    )

    @property
    def is_low_stock(self) -> bool:
        return (self.current_stock or 0) <= (self.min_stock_level or 0)

    @property
    def category_name(self):
        return self.category.name if self.category else None
