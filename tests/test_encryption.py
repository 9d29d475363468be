"""Tests for Fernet encryption of stored secrets."""
from unittest.mock import patch

from app.services.encryption import encrypt_value, decrypt_value


def test_roundtrip():
    token = encrypt_value("hunter2")
    assert token != "hunter2"
    assert decrypt_value(token) == "hunter2"


def test_empty_values():
    assert encrypt_value("") == ""
    assert decrypt_value("") == ""


def test_other_key_yields_empty():
    with patch("app.services.encryption.settings") as mock_settings:
        mock_settings.encryption_secret = "first-secret"
        token = encrypt_value("hunter2")
    with patch("app.services.encryption.settings") as mock_settings:
        mock_settings.encryption_secret = "second-secret"
        assert decrypt_value(token) == ""


def test_falls_back_to_jwt_secret():
    with patch("app.services.encryption.settings") as mock_settings:
        mock_settings.encryption_secret = ""
        mock_settings.jwt_secret_key = "jwt-secret"
        token = encrypt_value("abc")
        mock_settings.encryption_secret = "jwt-secret"
        assert decrypt_value(token) == "abc"


def test_garbage_ciphertext_yields_empty():
    assert decrypt_value("not-a-token") == ""
