"""
Fernet encryption for secrets at rest.

Covers listing deliverable passwords and secret system-config values. The key
is derived from ENCRYPTION_SECRET, or from the JWT secret when unset, so
rotating either makes previously stored ciphertext unreadable.
"""
import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from app.config import settings


def _fernet() -> Fernet:
    secret = settings.encryption_secret or settings.jwt_secret_key
    digest = hashlib.sha256(secret.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def encrypt_value(plaintext: str) -> str:
    if not plaintext:
        return ""
    return _fernet().encrypt(plaintext.encode()).decode()


def decrypt_value(ciphertext: str) -> str:
    """Return the plaintext, or "" when the value is empty or was encrypted with another key."""
    if not ciphertext:
        return ""
    try:
        return _fernet().decrypt(ciphertext.encode()).decode()
    except InvalidToken:
        return ""
