"""
Tests for one-shot and session token handling.
"""
import string
from datetime import datetime, timedelta, timezone

from clinic_api.auth.tokens import (
    generate_one_shot_token,
    create_session_token,
    decode_session_token,
    get_token_expiry_time,
    is_token_expired
)
from clinic_api.config import settings
from jose import jwt


def test_one_shot_token_is_128_bit_hex():
    token = generate_one_shot_token()
    assert len(token) == 32
    assert all(c in string.hexdigits for c in token)


def test_one_shot_tokens_are_unique():
    tokens = {generate_one_shot_token() for _ in range(100)}
    assert len(tokens) == 100


def test_session_token_decodes_to_account_id():
    token = create_session_token(42)
    assert decode_session_token(token) == 42


def test_session_token_claims():
    token = create_session_token(7)
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    assert payload["sub"] == "7"
    assert payload["exp"] - payload["iat"] == settings.access_token_expire_minutes * 60


def test_session_token_rejected_after_expiry():
    issued_at = datetime.now(timezone.utc) - timedelta(minutes=61)
    token = create_session_token(42, issued_at=issued_at)
    assert decode_session_token(token) is None


def test_session_token_still_valid_before_expiry():
    issued_at = datetime.now(timezone.utc) - timedelta(minutes=59)
    token = create_session_token(42, issued_at=issued_at)
    assert decode_session_token(token) == 42


def test_session_token_with_wrong_signature_rejected():
    token = jwt.encode({"sub": "42", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
                       "another-secret", algorithm="HS256")
    assert decode_session_token(token) is None


def test_session_token_with_non_numeric_subject_rejected():
    token = jwt.encode({"sub": "admin", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
                       settings.secret_key, algorithm=settings.algorithm)
    assert decode_session_token(token) is None


def test_garbage_session_token_rejected():
    assert decode_session_token("not-a-jwt") is None


def test_token_expiry_helpers():
    assert not is_token_expired(get_token_expiry_time(30))
    assert is_token_expired(get_token_expiry_time(-1))
    assert is_token_expired(datetime.now(timezone.utc) - timedelta(seconds=1))
