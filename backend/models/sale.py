# backend/models/sale.py
from sqlalchemy import (
    Column, Integer, String, Float, ForeignKey, DateTime, Enum, Text,
    CheckConstraint, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from database import Base
from models.enums import PaymentStatus, PaymentMode, SaleStatus

# Customer invoice; party is optional (walk-in customers)
class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    invoice_number = Column(String, nullable=False, index=True)
    party_id = Column(Integer, ForeignKey("parties.id"), nullable=True, index=True)

    # Walk-in customer details
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    customer_address = Column(String, nullable=True)

    sale_date = Column(DateTime(timezone=True), server_default=func.now())
    due_date = Column(DateTime(timezone=True), nullable=True)

    subtotal = Column(Float, nullable=False, default=0)
    discount_amount = Column(Float, nullable=False, default=0)
    tax_amount = Column(Float, nullable=False, default=0)
    shipping_charges = Column(Float, nullable=False, default=0)
    other_charges = Column(Float, nullable=False, default=0)
    round_off = Column(Float, nullable=False, default=0)
    total_amount = Column(Float, nullable=False)
    paid_amount = Column(Float, CheckConstraint("paid_amount >= 0"), nullable=False, default=0)

    payment_status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.UNPAID, index=True)
    payment_mode = Column(Enum(PaymentMode), nullable=False, default=PaymentMode.CASH)
    status = Column(Enum(SaleStatus), nullable=False, default=SaleStatus.CONFIRMED, index=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    party = relationship("Party")
    items = relationship(
        "SaleItem", back_populates="sale",
        cascade="all, delete-orphan", order_by="SaleItem.id",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "invoice_number", name="uq_sale_owner_invoice"),
    )

    @property
    def balance_amount(self) -> float:
        return round((self.total_amount or 0) - (self.paid_amount or 0), 2)

    @property
    def party_name(self):
        return self.party.name if self.party else self.customer_name


class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    product_name = Column(String, nullable=False)
    quantity = Column(Float, CheckConstraint("quantity >= 1"), nullable=False)
    unit_price = Column(Float, CheckConstraint("unit_price >= 0"), nullable=False)
    discount = Column(Float, nullable=False, default=0)
    tax_rate = Column(Float, nullable=False, default=0)
    tax_amount = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False)

    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")
