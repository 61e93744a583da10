# backend/models/stock.py
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Enum, func
from sqlalchemy.orm import relationship
from database import Base
from models.enums import MovementType

# One entry of the stock ledger, written in the same transaction as the
# stock change it describes
class StockMovement(Base):
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    # Signed quantity: positive adds stock, negative removes it
    qty = Column(Float, nullable=False)
    # Stock level after the movement was applied
    balance_after = Column(Float, nullable=False)

    type = Column(Enum(MovementType), nullable=False, index=True)
    reason = Column(String, nullable=True)

    # Document that caused the movement ("purchase", "sale"), if any
    reference_type = Column(String, nullable=True)
    reference_id = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    product = relationship("Product")

    @property
    def product_name(self):
        return self.product.name if self.product else None
