import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class VendorSaleStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


class VendorSale(Base):
    """Marketplace sale attributed to a reseller, split into commission and platform fee"""
    __tablename__ = "vendor_sales"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    buyer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    item_type = Column(String(50), nullable=False)
    item_id = Column(Integer, nullable=False)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)
    sale_amount_cents = Column(Integer, nullable=False)
    vendor_commission_cents = Column(Integer, nullable=False)
    platform_fee_cents = Column(Integer, nullable=False)
    status = Column(Enum(VendorSaleStatus), nullable=False, default=VendorSaleStatus.PENDING)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    vendor = relationship("User", foreign_keys=[vendor_id])
    buyer = relationship("User", foreign_keys=[buyer_id])
