import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class ProductType(str, enum.Enum):
    SUBSCRIPTION = "subscription"
    TIKTOK_ACCOUNT = "tiktok_account"
    INSTAGRAM_ACCOUNT = "instagram_account"
    TELEGRAM_GROUP = "telegram_group"
    MODEL = "model"


class Transaction(Base):
    """A payment attempt, or an access grant issued by an admin"""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    external_id = Column(String(255), unique=True, nullable=False)
    amount_cents = Column(Integer, nullable=False)
    net_amount_cents = Column(Integer, nullable=True)
    status = Column(Enum(TransactionStatus), nullable=False, default=TransactionStatus.PENDING)
    payment_method = Column(String(50), nullable=True)
    product_type = Column(Enum(ProductType), nullable=True)
    product_id = Column(Integer, nullable=True)
    buyer_name = Column(String(255), nullable=True)
    buyer_email = Column(String(255), nullable=True)
    buyer_phone = Column(String(20), nullable=True)
    buyer_document = Column(String(30), nullable=True)
    is_admin_granted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="transactions")
