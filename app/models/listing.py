"""Marketplace inventory: accounts, groups and models for sale.

Each row carries a public part (shown while browsing) and a deliverable part
revealed to the buyer only after the sale. ``is_sold`` is true exactly when
``sold_at`` and ``sold_to_user_id`` are both set.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Float, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import declared_attr

from .base import Base


class ListingKind(str, enum.Enum):
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    TELEGRAM = "telegram"
    MODEL = "model"


class ListingMixin:
    id = Column(Integer, primary_key=True, index=True)
    price_cents = Column(Integer, nullable=False)
    niche = Column(String(100), nullable=True)
    image_url = Column(String(1024), nullable=True)
    is_sold = Column(Boolean, nullable=False, default=False)
    sold_at = Column(DateTime(timezone=True), nullable=True)
    deliverable_info = Column(Text, nullable=True)
    deliverable_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def sold_to_user_id(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    @declared_attr
    def created_by(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=True, index=True)


class TikTokAccount(ListingMixin, Base):
    __tablename__ = "tiktok_accounts"
    kind = ListingKind.TIKTOK

    username = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    followers = Column(Integer, nullable=False, default=0)
    likes = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)
    deliverable_login = Column(String(255), nullable=True)
    deliverable_password = Column(Text, nullable=True)  # Fernet ciphertext
    deliverable_email = Column(String(255), nullable=True)


class InstagramAccount(ListingMixin, Base):
    __tablename__ = "instagram_accounts"
    kind = ListingKind.INSTAGRAM

    username = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    followers = Column(Integer, nullable=False, default=0)
    following = Column(Integer, nullable=False, default=0)
    posts_count = Column(Integer, nullable=False, default=0)
    engagement_rate = Column(Float, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    deliverable_login = Column(String(255), nullable=True)
    deliverable_password = Column(Text, nullable=True)  # Fernet ciphertext
    deliverable_email = Column(String(255), nullable=True)


class TelegramGroup(ListingMixin, Base):
    __tablename__ = "telegram_groups"
    kind = ListingKind.TELEGRAM

    group_name = Column(String(255), nullable=False)
    group_username = Column(String(255), nullable=True)
    group_type = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    members_count = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)
    deliverable_invite_link = Column(String(1024), nullable=True)


class ModelForSale(ListingMixin, Base):
    __tablename__ = "models_for_sale"
    kind = ListingKind.MODEL

    name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    assets = Column(JSON, nullable=True)
    scripts = Column(JSON, nullable=True)
    funnel_json = Column(JSON, nullable=True)
    deliverable_link = Column(String(1024), nullable=True)


LISTING_MODELS = {
    ListingKind.TIKTOK: TikTokAccount,
    ListingKind.INSTAGRAM: InstagramAccount,
    ListingKind.TELEGRAM: TelegramGroup,
    ListingKind.MODEL: ModelForSale,
}
