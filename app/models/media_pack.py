from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, JSON
from sqlalchemy.sql import func

from .base import Base
from .plan import PlanType


class AdminMediaPack(Base):
    """Named bundle of uploaded files gated by a minimum plan.

    ``media_files`` holds a list of ``{"name", "url", "type", "size"}`` dicts.
    """
    __tablename__ = "admin_media"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    pack_type = Column(String(50), nullable=False, default="images")
    image_url = Column(String(1024), nullable=True)
    min_plan = Column(Enum(PlanType), nullable=False, default=PlanType.FREE)
    media_files = Column(JSON, nullable=False, default=list)
    file_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
