# Database models
from .base import Base
from .user import User, AppRole, VENDOR_ROLES
from .profile import Profile
from .plan import Plan, PlanType, PLAN_ORDER, Subscription, SubscriptionStatus
from .transaction import Transaction, TransactionStatus, ProductType
from .listing import (
    ListingKind,
    TikTokAccount,
    InstagramAccount,
    TelegramGroup,
    ModelForSale,
    LISTING_MODELS,
)
from .media_pack import AdminMediaPack
from .vendor_sale import VendorSale, VendorSaleStatus
from .smart_link import SmartLinkPage, SmartLinkButton
from .banner import DashboardBanner
from .funnel_template import FunnelTemplate
from .admin_setting import AdminSetting, AdminSettingHistory, AdminTextSetting
from .notification import Notification, NotificationType, UserNotificationRead
from .account_manager import AccountManagerSeller, AccountManagerLog

__all__ = [
    "Base",
    "User",
    "AppRole",
    "VENDOR_ROLES",
    "Profile",
    "Plan",
    "PlanType",
    "PLAN_ORDER",
    "Subscription",
    "SubscriptionStatus",
    "Transaction",
    "TransactionStatus",
    "ProductType",
    "ListingKind",
    "TikTokAccount",
    "InstagramAccount",
    "TelegramGroup",
    "ModelForSale",
    "LISTING_MODELS",
    "AdminMediaPack",
    "VendorSale",
    "VendorSaleStatus",
    "SmartLinkPage",
    "SmartLinkButton",
    "DashboardBanner",
    "FunnelTemplate",
    "AdminSetting",
    "AdminSettingHistory",
    "AdminTextSetting",
    "Notification",
    "NotificationType",
    "UserNotificationRead",
    "AccountManagerSeller",
    "AccountManagerLog",
]
