"""Tests for JWT encoding and decoding."""

import base64
import hashlib
import hmac
import json
from datetime import datetime, timezone

import pytest

from src.careadmin.core.config import Settings
from src.careadmin.core.exceptions import UnauthorizedError
from src.careadmin.core.security import _decode_jwt, _encode_jwt, create_access_token

SECRET = "test-secret-key-that-is-at-least-32-characters"


@pytest.fixture
def mock_settings():
    return Settings(SECRET_KEY=SECRET)


def create_raw_token(payload: dict, secret: str = SECRET) -> str:
    header = {"alg": "HS256", "typ": "JWT"}

    def b64_encode(data: dict) -> str:
        js = json.dumps(data, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(js).rstrip(b"=").decode("ascii")

    signing_input = f"{b64_encode(header)}.{b64_encode(payload)}".encode("ascii")
    signature = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    encoded_signature = base64.urlsafe_b64encode(signature).rstrip(b"=").decode("ascii")
    return f"{signing_input.decode('ascii')}.{encoded_signature}"


def _now() -> int:
    return int(datetime.now(timezone.utc).timestamp())


def test_decode_jwt_success(mock_settings):
    token = create_raw_token({"sub": "+919999999999", "exp": _now() + 3600})
    assert _decode_jwt(token, settings=mock_settings)["sub"] == "+919999999999"


def test_decode_jwt_expired(mock_settings):
    token = create_raw_token({"sub": "+919999999999", "exp": _now() - 3600})
    with pytest.raises(UnauthorizedError) as exc:
        _decode_jwt(token, settings=mock_settings)
    assert exc.value.error_code == "TOKEN_EXPIRED"


def test_decode_jwt_invalid_signature(mock_settings):
    token = create_raw_token({"sub": "+919999999999", "exp": _now() + 3600}, secret="wrong-secret")
    with pytest.raises(UnauthorizedError) as exc:
        _decode_jwt(token, settings=mock_settings)
    assert exc.value.error_code == "INVALID_TOKEN"


def test_decode_jwt_malformed(mock_settings):
    with pytest.raises(UnauthorizedError):
        _decode_jwt("not-a-jwt", settings=mock_settings)


def test_decode_jwt_missing_exp(mock_settings):
    token = create_raw_token({"sub": "+919999999999"})
    with pytest.raises(UnauthorizedError) as exc:
        _decode_jwt(token, settings=mock_settings)
    assert "expiration" in exc.value.message


def test_encode_rejects_other_algorithms():
    with pytest.raises(ValueError):
        _encode_jwt({"sub": "x"}, secret=SECRET, algorithm="RS256")


def test_create_access_token_round_trip(mock_settings):
    token = create_access_token(subject="+918888888888", settings=mock_settings, role="operational")
    payload = _decode_jwt(token, settings=mock_settings)
    assert payload["sub"] == "+918888888888"
    assert payload["role"] == "operational"
    assert payload["exp"] - payload["iat"] == mock_settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def test_create_access_token_custom_lifetime(mock_settings):
    token = create_access_token(subject="+918888888888", settings=mock_settings, role="admin", expires_minutes=5)
    payload = _decode_jwt(token, settings=mock_settings)
    assert payload["exp"] - payload["iat"] == 300
