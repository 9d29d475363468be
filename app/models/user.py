from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from .base import Base


class AppRole(str, enum.Enum):
    """Single role value per user"""
    ADMIN = "admin"
    USER = "user"
    VENDOR = "vendor"
    VENDOR_INSTAGRAM = "vendor_instagram"
    VENDOR_TIKTOK = "vendor_tiktok"
    VENDOR_MODEL = "vendor_model"
    INDICADOR = "indicador"
    GERENTE_CONTAS = "gerente_contas"


VENDOR_ROLES = (
    AppRole.VENDOR,
    AppRole.VENDOR_INSTAGRAM,
    AppRole.VENDOR_TIKTOK,
    AppRole.VENDOR_MODEL,
)


class User(Base):
    """User model for authentication and authorization"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(AppRole), nullable=False, default=AppRole.USER)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    subscriptions = relationship("Subscription", back_populates="user")
    transactions = relationship("Transaction", back_populates="user")
    smart_link_pages = relationship("SmartLinkPage", back_populates="user")
