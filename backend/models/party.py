# backend/models/party.py
from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey, DateTime, Enum, func
from database import Base
from models.enums import PartyType

# Supplier, customer or both, with a running balance.
# current_balance starts at opening_balance and moves only through the
# balance-adjustment endpoint.
class Party(Base):
    __tablename__ = "parties"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    type = Column(Enum(PartyType), nullable=False, index=True)

    # Contact details
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address_street = Column(String, nullable=True)
    address_city = Column(String, nullable=True)
    address_state = Column(String, nullable=True)
    address_pincode = Column(String, nullable=True)
    address_country = Column(String, nullable=True, default="India")
    gstin = Column(String, nullable=True)
    pan_number = Column(String, nullable=True)

    # Balances
    opening_balance = Column(Float, nullable=False, default=0)
    current_balance = Column(Float, nullable=False, default=0)
    credit_limit = Column(Float, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def address(self):
        return {
            "street": self.address_street,
            "city": self.address_city,
            "state": self.address_state,
            "pincode": self.address_pincode,
            "country": self.address_country,
        }
