"""
Listing schemas, one family per kind.

Public models never carry deliverable fields. Write models take ``price`` as
typed by the user ("499.90", "499,90", 500); routers convert it to cents.
"""
from dataclasses import dataclass
from pydantic import BaseModel, Field
from typing import Optional, Union, Any, Dict, List, Type
from datetime import datetime

from app.models.listing import ListingKind
from app.schemas.common import PartialUpdate
from app.services.encryption import decrypt_value

Price = Union[str, int]


class ListingWriteBase(PartialUpdate):
    niche: Optional[str] = Field(None, max_length=100)
    image_url: Optional[str] = Field(None, max_length=1024)
    deliverable_info: Optional[str] = None
    deliverable_notes: Optional[str] = None


class ListingPublicBase(BaseModel):
    id: int
    niche: Optional[str] = None
    image_url: Optional[str] = None
    price_cents: int
    is_sold: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ListingAdminMixin(BaseModel):
    sold_at: Optional[datetime] = None
    sold_to_user_id: Optional[int] = None
    created_by: Optional[int] = None
    deliverable_info: Optional[str] = None
    deliverable_notes: Optional[str] = None


# TikTok

class TikTokCreate(ListingWriteBase):
    username: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    followers: int = Field(0, ge=0)
    likes: int = Field(0, ge=0)
    is_verified: bool = False
    price: Price
    deliverable_login: Optional[str] = None
    deliverable_password: Optional[str] = None
    deliverable_email: Optional[str] = None


class TikTokUpdate(ListingWriteBase):
    not_nullable = ("username", "followers", "likes", "is_verified", "price")

    username: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    followers: Optional[int] = Field(None, ge=0)
    likes: Optional[int] = Field(None, ge=0)
    is_verified: Optional[bool] = None
    price: Optional[Price] = None
    deliverable_login: Optional[str] = None
    deliverable_password: Optional[str] = None
    deliverable_email: Optional[str] = None


class TikTokPublic(ListingPublicBase):
    username: str
    description: Optional[str] = None
    followers: int
    likes: int
    is_verified: bool


class TikTokAdmin(TikTokPublic, ListingAdminMixin):
    deliverable_login: Optional[str] = None
    deliverable_password: Optional[str] = None
    deliverable_email: Optional[str] = None


# Instagram

class InstagramCreate(ListingWriteBase):
    username: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    followers: int = Field(0, ge=0)
    following: int = Field(0, ge=0)
    posts_count: int = Field(0, ge=0)
    engagement_rate: Optional[float] = Field(None, ge=0)
    is_verified: bool = False
    price: Price
    deliverable_login: Optional[str] = None
    deliverable_password: Optional[str] = None
    deliverable_email: Optional[str] = None


class InstagramUpdate(ListingWriteBase):
    not_nullable = ("username", "followers", "following", "posts_count", "is_verified", "price")

    username: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    followers: Optional[int] = Field(None, ge=0)
    following: Optional[int] = Field(None, ge=0)
    posts_count: Optional[int] = Field(None, ge=0)
    engagement_rate: Optional[float] = Field(None, ge=0)
    is_verified: Optional[bool] = None
    price: Optional[Price] = None
    deliverable_login: Optional[str] = None
    deliverable_password: Optional[str] = None
    deliverable_email: Optional[str] = None


class InstagramPublic(ListingPublicBase):
    username: str
    description: Optional[str] = None
    followers: int
    following: int
    posts_count: int
    engagement_rate: Optional[float] = None
    is_verified: bool


class InstagramAdmin(InstagramPublic, ListingAdminMixin):
    deliverable_login: Optional[str] = None
    deliverable_password: Optional[str] = None
    deliverable_email: Optional[str] = None


# Telegram groups

class TelegramCreate(ListingWriteBase):
    group_name: str = Field(..., min_length=1, max_length=255)
    group_username: Optional[str] = Field(None, max_length=255)
    group_type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    members_count: int = Field(0, ge=0)
    is_verified: bool = False
    price: Price
    deliverable_invite_link: Optional[str] = Field(None, max_length=1024)


class TelegramUpdate(ListingWriteBase):
    not_nullable = ("group_name", "members_count", "is_verified", "price")

    group_name: Optional[str] = Field(None, min_length=1, max_length=255)
    group_username: Optional[str] = Field(None, max_length=255)
    group_type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    members_count: Optional[int] = Field(None, ge=0)
    is_verified: Optional[bool] = None
    price: Optional[Price] = None
    deliverable_invite_link: Optional[str] = Field(None, max_length=1024)


class TelegramPublic(ListingPublicBase):
    group_name: str
    group_username: Optional[str] = None
    group_type: Optional[str] = None
    description: Optional[str] = None
    members_count: int
    is_verified: bool


class TelegramAdmin(TelegramPublic, ListingAdminMixin):
    deliverable_invite_link: Optional[str] = None


# Models for sale

class ModelCreate(ListingWriteBase):
    name: str = Field(..., min_length=1, max_length=255)
    bio: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    assets: Optional[List[Any]] = None
    scripts: Optional[List[Any]] = None
    funnel_json: Optional[Dict[str, Any]] = None
    price: Price
    deliverable_link: Optional[str] = Field(None, max_length=1024)


class ModelUpdate(ListingWriteBase):
    not_nullable = ("name", "price")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    bio: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    assets: Optional[List[Any]] = None
    scripts: Optional[List[Any]] = None
    funnel_json: Optional[Dict[str, Any]] = None
    price: Optional[Price] = None
    deliverable_link: Optional[str] = Field(None, max_length=1024)


class ModelPublic(ListingPublicBase):
    name: str
    bio: Optional[str] = None
    category: Optional[str] = None


class ModelAdmin(ModelPublic, ListingAdminMixin):
    assets: Optional[List[Any]] = None
    scripts: Optional[List[Any]] = None
    funnel_json: Optional[Dict[str, Any]] = None
    deliverable_link: Optional[str] = None


@dataclass(frozen=True)
class ListingSchemas:
    create: Type[BaseModel]
    update: Type[BaseModel]
    public: Type[BaseModel]
    admin: Type[BaseModel]


LISTING_SCHEMAS = {
    ListingKind.TIKTOK: ListingSchemas(TikTokCreate, TikTokUpdate, TikTokPublic, TikTokAdmin),
    ListingKind.INSTAGRAM: ListingSchemas(InstagramCreate, InstagramUpdate, InstagramPublic, InstagramAdmin),
    ListingKind.TELEGRAM: ListingSchemas(TelegramCreate, TelegramUpdate, TelegramPublic, TelegramAdmin),
    ListingKind.MODEL: ListingSchemas(ModelCreate, ModelUpdate, ModelPublic, ModelAdmin),
}


class MarkSoldRequest(BaseModel):
    buyer_id: int


class NichesResponse(BaseModel):
    niches: List[str]


class PurchaseResponse(BaseModel):
    kind: ListingKind
    id: int
    title: str
    image_url: Optional[str] = None
    price_cents: int
    sold_at: Optional[datetime] = None
    deliverable: Dict[str, Any]


def detailed_view(kind: ListingKind, listing) -> BaseModel:
    """Owner/admin representation, with the deliverable password in clear text."""
    view = LISTING_SCHEMAS[kind].admin.model_validate(listing)
    if "deliverable_password" in type(view).model_fields:
        view.deliverable_password = decrypt_value(listing.deliverable_password or "") or None
    return view
