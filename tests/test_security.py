import jwt
import pytest

from backend.app.core.security import ALGORITHM, create_access_token, decode_access_token
from backend.app.core.settings import get_settings


def test_create_and_decode_access_token():
    token = create_access_token(42, "ops@example.com", "Ops")
    assert isinstance(token, str) and token
    decoded = decode_access_token(token)
    assert decoded["sub"] == "42"
    assert decoded["email"] == "ops@example.com"
    assert decoded["name"] == "Ops"


def test_access_token_expiration():
    token = create_access_token(1, "expired@example.com", "Expired", expires_minutes=-1)
    with pytest.raises(ValueError):
        decode_access_token(token)


def test_token_signed_with_other_key_rejected():
    token = jwt.encode({"sub": "1"}, "a-completely-different-signing-key-value", algorithm=ALGORITHM)
    with pytest.raises(ValueError):
        decode_access_token(token)


def test_token_uses_configured_secret():
    token = create_access_token(7, "a@example.com", "A")
    decoded = jwt.decode(token, get_settings().SECRET_KEY, algorithms=[ALGORITHM])
    assert decoded["sub"] == "7"
