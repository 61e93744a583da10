# backend/models/enums.py
import enum


# Role a trading party plays towards the business
class PartyType(str, enum.Enum):
    SUPPLIER = "supplier"
    CUSTOMER = "customer"
    BOTH = "both"

    def can_supply(self) -> bool:
        return self in (PartyType.SUPPLIER, PartyType.BOTH)

    def can_buy(self) -> bool:
        return self in (PartyType.CUSTOMER, PartyType.BOTH)


# Units a product can be stocked in
class Unit(str, enum.Enum):
    PCS = "pcs"
    KG = "kg"
    G = "g"
    LTR = "ltr"
    ML = "ml"
    BOX = "box"
    PACK = "pack"
    DOZEN = "dozen"
    METER = "meter"
    FEET = "feet"


# How much of an invoice total has been settled
class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class PurchaseStatus(str, enum.Enum):
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class SaleStatus(str, enum.Enum):
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentMode(str, enum.Enum):
    CASH = "cash"
    UPI = "upi"
    CARD = "card"
    BANK = "bank"
    CREDIT = "credit"
    CHEQUE = "cheque"


# Classification of a stock ledger entry
class MovementType(str, enum.Enum):
    PURCHASE = "PURCHASE"
    PURCHASE_REVERSAL = "PURCHASE_REVERSAL"
    SALE = "SALE"
    SALE_REVERSAL = "SALE_REVERSAL"
    ADJUSTMENT = "ADJUSTMENT"
