"""
Marketplace listing helpers: filtering, sorting and sale state.

Browsing loads the rows of one kind and narrows them in memory. Every
predicate in ListingFilters is optional; the ones that are set intersect.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from app.models.listing import ListingKind
from app.services.encryption import encrypt_value, decrypt_value
from app.services.money import parse_price_to_cents

SORT_OPTIONS = ("newest", "price_asc", "price_desc", "followers_desc")

TITLE_FIELD = {
    ListingKind.TIKTOK: "username",
    ListingKind.INSTAGRAM: "username",
    ListingKind.TELEGRAM: "group_name",
    ListingKind.MODEL: "name",
}

DESCRIPTION_FIELD = {
    ListingKind.TIKTOK: "description",
    ListingKind.INSTAGRAM: "description",
    ListingKind.TELEGRAM: "description",
    ListingKind.MODEL: "bio",
}

# Models for sale have no audience count
FOLLOWERS_FIELD = {
    ListingKind.TIKTOK: "followers",
    ListingKind.INSTAGRAM: "followers",
    ListingKind.TELEGRAM: "members_count",
}


@dataclass
class ListingFilters:
    search: Optional[str] = None
    niche: Optional[str] = None
    verified_only: bool = False
    min_price_cents: Optional[int] = None
    max_price_cents: Optional[int] = None
    min_followers: Optional[int] = None
    max_followers: Optional[int] = None
    include_sold: bool = False


def _text(item, field_map) -> str:
    field = field_map.get(item.kind)
    if field is None:
        return ""
    return getattr(item, field, None) or ""


def followers_of(item) -> Optional[int]:
    """Audience size of a listing, or None when the kind has none."""
    field = FOLLOWERS_FIELD.get(item.kind)
    if field is None:
        return None
    return getattr(item, field, None) or 0


def _matches(item, filters: ListingFilters) -> bool:
    if not filters.include_sold and item.is_sold:
        return False

    if filters.search:
        needle = filters.search.strip().lower()
        haystack = f"{_text(item, TITLE_FIELD)}\n{_text(item, DESCRIPTION_FIELD)}".lower()
        if needle not in haystack:
            return False

    if filters.niche and item.niche != filters.niche:
        return False

    if filters.verified_only and not getattr(item, "is_verified", False):
        return False

    if filters.min_price_cents is not None and item.price_cents < filters.min_price_cents:
        return False
    if filters.max_price_cents is not None and item.price_cents > filters.max_price_cents:
        return False

    followers = followers_of(item)
    if followers is not None:
        if filters.min_followers is not None and followers < filters.min_followers:
            return False
        if filters.max_followers is not None and followers > filters.max_followers:
            return False

    return True


def filter_listings(items: Iterable, filters: ListingFilters) -> List:
    return [item for item in items if _matches(item, filters)]


def sort_listings(items: Iterable, sort_by: str = "newest") -> List:
    """Return a new list ordered by one of SORT_OPTIONS. Ties keep input order."""
    items = list(items)
    if sort_by == "newest":
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(items, key=lambda i: _aware(i.created_at) or epoch, reverse=True)
    if sort_by == "price_asc":
        return sorted(items, key=lambda i: i.price_cents)
    if sort_by == "price_desc":
        return sorted(items, key=lambda i: i.price_cents, reverse=True)
    if sort_by == "followers_desc":
        return sorted(items, key=lambda i: followers_of(i) or 0, reverse=True)
    raise ValueError(f"Unknown sort option: {sort_by}")


def distinct_niches(items: Iterable) -> List[str]:
    return sorted({item.niche for item in items if item.niche})


def mark_sold(listing, buyer_id: int, now: Optional[datetime] = None):
    """Set the sold triple. Raises ValueError if the listing is already sold."""
    if listing.is_sold:
        raise ValueError("Listing already sold")
    listing.is_sold = True
    listing.sold_at = now or datetime.now(timezone.utc)
    listing.sold_to_user_id = buyer_id
    return listing


def reactivate(listing):
    """Put a sold listing back on sale. Only the sold triple changes."""
    listing.is_sold = False
    listing.sold_at = None
    listing.sold_to_user_id = None
    return listing


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Fields holding secrets that are stored encrypted
ENCRYPTED_FIELDS = ("deliverable_password",)

DELIVERABLE_FIELDS = {
    ListingKind.TIKTOK: ("deliverable_login", "deliverable_password", "deliverable_email",
                         "deliverable_info", "deliverable_notes"),
    ListingKind.INSTAGRAM: ("deliverable_login", "deliverable_password", "deliverable_email",
                            "deliverable_info", "deliverable_notes"),
    ListingKind.TELEGRAM: ("deliverable_invite_link", "deliverable_info", "deliverable_notes"),
    ListingKind.MODEL: ("deliverable_link", "assets", "scripts", "funnel_json",
                        "deliverable_info", "deliverable_notes"),
}


def title_of(listing) -> str:
    return _text(listing, TITLE_FIELD)


def apply_changes(listing, changes: dict, require_positive_price: bool = False):
    """
    Copy validated form fields onto a listing.

    ``price`` is parsed into ``price_cents`` and deliverable passwords are
    encrypted. Raises ValueError for an unparseable price, or a zero price when
    ``require_positive_price`` is set.
    """
    changes = dict(changes)
    if "price" in changes:
        price = changes.pop("price")
        if price is not None:
            cents = parse_price_to_cents(price)
            if require_positive_price and cents <= 0:
                raise ValueError("Price must be greater than zero")
            listing.price_cents = cents

    for field_name, value in changes.items():
        if field_name in ENCRYPTED_FIELDS:
            value = encrypt_value(value) if value else None
        setattr(listing, field_name, value)
    return listing


def deliverable_payload(listing) -> dict:
    """Post-purchase payload of a listing with passwords decrypted."""
    payload = {}
    for field_name in DELIVERABLE_FIELDS.get(listing.kind, ()):
        value = getattr(listing, field_name, None)
        if field_name in ENCRYPTED_FIELDS:
            value = decrypt_value(value or "") or None
        payload[field_name] = value
    return payload
