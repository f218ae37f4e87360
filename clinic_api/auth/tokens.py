"""
Token issuing and verification.

Two kinds of tokens are handled here:
- opaque one-shot tokens (email verification, password reset) that are
  stored server side and consumed on redemption
- signed session tokens (JWT) that are never stored and expire on their own
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from ..config import settings

# 16 random bytes, rendered as 32 hex characters
ONE_SHOT_TOKEN_BYTES = 16

def generate_one_shot_token() -> str:
    """
    Generate an opaque single-use token.
    
    Returns:
        str: Random hex string
    """
    return secrets.token_hex(ONE_SHOT_TOKEN_BYTES)

def get_token_expiry_time(minutes: int) -> datetime:
    """
    Get the expiry timestamp for a token issued now.
    
    Args:
        minutes: Lifetime of the token in minutes
        
    Returns:
        datetime: Naive UTC timestamp
    """
    return datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(minutes=minutes)

def is_token_expired(expires_at: datetime) -> bool:
    """
    Check whether a stored expiry timestamp has passed.

    Stored timestamps are naive UTC; aware values are normalised first.
    """
    if expires_at.tzinfo is not None:
        expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)
    return datetime.now(timezone.utc).replace(tzinfo=None) >= expires_at

def create_session_token(
    account_id: int,
    expires_delta: Optional[timedelta] = None,
    issued_at: Optional[datetime] = None
) -> str:
    """
    Create a signed session token for an account.
    
    Args:
        account_id: ID of the authenticated account
        expires_delta: Optional custom lifetime
        issued_at: Optional issue time, defaults to now
        
    Returns:
        str: Encoded JWT token
    """
    issued_at = issued_at or datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    
    to_encode = {
        "sub": str(account_id),
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

def decode_session_token(token: str) -> Optional[int]:
    """
    Verify a session token and return the account ID it was issued for.
    
    Args:
        token: JWT token string
        
    Returns:
        int: Account ID if the token is valid, None if the signature, expiry
        or subject is invalid
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        return None
    return int(subject)
