from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class SmartLinkPage(Base):
    """Per-user public landing page used for lead capture"""
    __tablename__ = "smart_link_pages"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    background_color = Column(String(20), nullable=False, default="#1a1a2e")
    text_color = Column(String(20), nullable=False, default="#ffffff")
    button_style = Column(String(20), nullable=False, default="rounded")
    meta_pixel_id = Column(String(100), nullable=True)
    tiktok_pixel_id = Column(String(100), nullable=True)
    google_analytics_id = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    total_views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="smart_link_pages")
    buttons = relationship(
        "SmartLinkButton",
        back_populates="page",
        cascade="all, delete-orphan",
        order_by="SmartLinkButton.position",
    )


class SmartLinkButton(Base):
    __tablename__ = "smart_link_buttons"

    id = Column(Integer, primary_key=True, index=True)
    page_id = Column(Integer, ForeignKey("smart_link_pages.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    icon = Column(String(50), nullable=True)
    position = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    clicks = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    page = relationship("SmartLinkPage", back_populates="buttons")
