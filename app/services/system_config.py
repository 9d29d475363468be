"""
System configuration catalogue.

A fixed set of keys documented in the admin panel. Values saved by an admin
live in admin_text_settings (secrets encrypted); unset keys fall back to a
default derived from the environment.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.admin_setting import AdminTextSetting
from app.models.user import User
from app.services.encryption import encrypt_value, decrypt_value

CATEGORIES = {
    "database": "Banco de Dados",
    "vps": "VPS / Servidor",
    "webhook": "Webhooks",
    "api": "Chaves de API",
    "general": "Geral",
}


@dataclass(frozen=True)
class ConfigKey:
    key: str
    description: str
    category: str
    is_secret: bool = False


CONFIG_KEYS = [
    ConfigKey("SUPABASE_URL", "URL do projeto hospedado", "database"),
    ConfigKey("SUPABASE_ANON_KEY", "Chave pública anônima", "database"),
    ConfigKey("SUPABASE_PROJECT_ID", "ID do projeto hospedado", "database"),
    ConfigKey("TELEGRAM_BOT_WEBHOOK_URL", "URL do webhook para bots Telegram", "webhook"),
    ConfigKey("MERCADOPAGO_WEBHOOK_URL", "URL do webhook para notificações do MercadoPago", "webhook"),
    ConfigKey("PAYMENT_WEBHOOK_URL", "URL do webhook para confirmações de pagamento", "webhook"),
    ConfigKey("FUNNEL_WEBHOOK_URL", "URL do webhook para eventos de funil", "webhook"),
    ConfigKey("EXTERNAL_API_BASE_URL", "URL base para API externa (se usar VPS)", "vps"),
    ConfigKey("VPS_HOST", "Endereço IP ou hostname da VPS", "vps"),
    ConfigKey("MERCADOPAGO_ACCESS_TOKEN", "Token de acesso do MercadoPago", "api", is_secret=True),
    ConfigKey("UTMIFY_API_KEY", "Chave da API Utmify para tracking", "api", is_secret=True),
    ConfigKey("smart_link_base_url", "URL base para os Smart Links públicos", "general"),
    ConfigKey("APP_BASE_URL", "URL base da aplicação", "general"),
]

CONFIG_BY_KEY = {c.key: c for c in CONFIG_KEYS}


@dataclass(frozen=True)
class ExternalFunction:
    name: str
    description: str
    requires_auth: bool
    method: str = "POST"

    @property
    def url(self) -> str:
        return f"{settings.functions_base_url}/{self.name}"


FUNCTIONS = [
    ExternalFunction("telegram-bot", "Processa mensagens do Telegram", True),
    ExternalFunction("create-payment", "Cria pagamentos PIX", True),
    ExternalFunction("payment-webhook", "Recebe notificações de pagamento", False),
    ExternalFunction("mercadopago-webhook", "Webhook do MercadoPago", False),
    ExternalFunction("mercadopago-oauth", "OAuth do MercadoPago", True, method="GET"),
    ExternalFunction("funnel-webhook", "Processa eventos de funil", False),
    ExternalFunction("campaign-dispatch", "Dispara campanhas", True),
    ExternalFunction("social-post", "Publica em redes sociais", True),
]


def mask_token(token: str) -> str:
    """Mask a secret: show first 10 chars + ****, or **** if too short."""
    if not token:
        return ""
    if len(token) < 10:
        return "****"
    return token[:10] + "****"


def default_value(key: str) -> str:
    functions = settings.functions_base_url
    defaults = {
        "SUPABASE_URL": settings.supabase_url,
        "SUPABASE_ANON_KEY": settings.supabase_anon_key,
        "SUPABASE_PROJECT_ID": settings.supabase_project_id,
        "TELEGRAM_BOT_WEBHOOK_URL": f"{functions}/telegram-bot",
        "MERCADOPAGO_WEBHOOK_URL": f"{functions}/mercadopago-webhook",
        "PAYMENT_WEBHOOK_URL": f"{functions}/payment-webhook",
        "FUNNEL_WEBHOOK_URL": f"{functions}/funnel-webhook",
        "smart_link_base_url": settings.smart_link_base_url,
        "APP_BASE_URL": settings.app_base_url,
    }
    return defaults.get(key, "")


def _stored(db: Session) -> Dict[str, AdminTextSetting]:
    keys = list(CONFIG_BY_KEY)
    rows = db.query(AdminTextSetting).filter(AdminTextSetting.setting_key.in_(keys)).all()
    return {row.setting_key: row for row in rows}


def _entry(config: ConfigKey, row: Optional[AdminTextSetting]) -> dict:
    stored = row.setting_value if row is not None else None
    if stored and config.is_secret:
        stored = decrypt_value(stored)

    value = stored if stored else default_value(config.key)
    return {
        "key": config.key,
        "description": config.description,
        "category": config.category,
        "is_secret": config.is_secret,
        "value": mask_token(value) if config.is_secret else value,
        "configured": bool(stored),
        "is_default": not stored,
        "updated_at": row.updated_at if row is not None else None,
    }


def list_config(db: Session) -> List[dict]:
    stored = _stored(db)
    return [_entry(c, stored.get(c.key)) for c in CONFIG_KEYS]


def get_value(db: Session, key: str) -> str:
    """Plain value of a key: saved value if any, else its default."""
    config = CONFIG_BY_KEY[key]
    row = db.query(AdminTextSetting).filter(AdminTextSetting.setting_key == key).first()
    stored = row.setting_value if row is not None else None
    if stored and config.is_secret:
        stored = decrypt_value(stored)
    return stored or default_value(key)


def set_value(db: Session, key: str, value: str, user: Optional[User] = None) -> dict:
    """
    Save a value (empty string clears it back to the default).

    Raises ValueError for keys outside the catalogue.
    """
    config = CONFIG_BY_KEY.get(key)
    if config is None:
        raise ValueError(f"Unknown configuration key: {key}")

    stored = value.strip() if value else ""
    if stored and config.is_secret:
        stored = encrypt_value(stored)

    row = db.query(AdminTextSetting).filter(AdminTextSetting.setting_key == key).first()
    if row is None:
        row = AdminTextSetting(setting_key=key, description=config.description)
        db.add(row)
    row.setting_value = stored or None
    row.updated_by = user.id if user is not None else None

    db.commit()
    db.refresh(row)
    return _entry(config, row)
