"""
FastAPI dependencies for authentication and authorization.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from .models import User
from .service import get_user_profile
from .tokens import decode_session_token
from .exceptions import (
    MissingCredentialException,
    InvalidOrExpiredTokenException
)

# Bearer token scheme; missing headers are reported by get_current_account_id
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login", auto_error=False)

def get_current_account_id(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> int:
    """
    Validate the bearer session token of the request.

    No database lookup happens here, the signature and expiry are enough.
    
    Args:
        request: Incoming request, the account ID is stored on its state
        token: JWT token from Authorization header
        
    Returns:
        int: ID of the authenticated account
        
    Raises:
        MissingCredentialException: If no bearer token was sent
        InvalidOrExpiredTokenException: If the token is invalid or expired
    """
    if not token:
        raise MissingCredentialException(headers={"WWW-Authenticate": "Bearer"})
    
    account_id = decode_session_token(token)
    if account_id is None:
        raise InvalidOrExpiredTokenException()
    
    request.state.account_id = account_id
    return account_id

def get_current_user(
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db)
) -> User:
    """
    Get the account behind the session token.
    
    Raises:
        AccountNotFoundException: If the account no longer exists
    """
    return get_user_profile(db, account_id)
