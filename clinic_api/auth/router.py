"""
Authentication routes for the clinic booking system.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.mail import Mailer, get_mailer
from ..exceptions import StoreUnavailableException
from .dependencies import get_current_user
from .models import User
from .schemas import (
    RegisterRequest, LoginRequest, EmailRequest, NewPasswordRequest,
    MessageResponse, LoginResponse, UserResponse
)
from .service import (
    register_user, verify_account, resend_verification, login_user,
    forgot_password, validate_reset_token, reset_password
)
from .exceptions import AuthException, AccountNotFoundException, InvalidTokenException

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/auth", tags=["Authentication"])

# ============================================================================
# REGISTRATION & VERIFICATION
# ============================================================================

@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
async def register_route(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer)
):
    """
    Account self-registration endpoint.

    The account stays unverified until the link sent by email is opened.

    Raises:
        HTTPException: If a field is missing, the email already exists or the
        password is too short
    """
    try:
        return await register_user(db, mailer, data.email, data.password, data.name)
    except AuthException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error during registration: {str(e)}")
        raise StoreUnavailableException("Error registering the user")
    except Exception as e:
        logger.error(f"Unexpected error during registration: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error registering the user"
        )

@router.get("/verify/{token}", response_model=MessageResponse)
def verify_route(token: str, db: Session = Depends(get_db)):
    """
    Email verification endpoint, opened from the link in the verification email.
    """
    try:
        return verify_account(db, token)
    except InvalidTokenException as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.detail)
    except SQLAlchemyError as e:
        logger.error(f"Database error during account verification: {str(e)}")
        raise StoreUnavailableException("There was an error confirming the account")

@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification_route(
    data: EmailRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer)
):
    """
    Send a new verification link to an account that is not verified yet.
    """
    try:
        return await resend_verification(db, mailer, data.email)
    except AuthException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error while resending verification: {str(e)}")
        raise StoreUnavailableException()

# ============================================================================
# LOGIN & SESSION
# ============================================================================

@router.post("/login", response_model=LoginResponse)
def login_route(data: LoginRequest, db: Session = Depends(get_db)):
    """
    User login endpoint.

    Returns:
        LoginResponse with the session token

    Raises:
        HTTPException: If the account does not exist, is not verified or the
        password is wrong
    """
    try:
        return login_user(db, data.email, data.password)
    except AccountNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.detail)
    except AuthException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error during login: {str(e)}")
        raise StoreUnavailableException("Error processing the login request")
    except Exception as e:
        logger.error(f"Unexpected error during login: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing the login request"
        )

@router.get("/user", response_model=UserResponse)
def get_user_route(current_user: User = Depends(get_current_user)):
    """
    Get the profile of the authenticated account.
    """
    return current_user

# ============================================================================
# PASSWORD RESET
# ============================================================================

@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password_route(
    data: EmailRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer)
):
    """
    Request a password reset link by email.
    """
    try:
        return await forgot_password(db, mailer, data.email)
    except AuthException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error during forgot password: {str(e)}")
        raise StoreUnavailableException()

@router.get("/forgot-password/{token}", response_model=MessageResponse)
def validate_reset_token_route(token: str, db: Session = Depends(get_db)):
    """
    Check a reset link before asking for the new password.
    """
    try:
        return validate_reset_token(db, token)
    except AuthException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error while validating reset token: {str(e)}")
        raise StoreUnavailableException()

@router.post("/forgot-password/{token}", response_model=MessageResponse)
def reset_password_route(
    token: str,
    data: NewPasswordRequest,
    db: Session = Depends(get_db)
):
    """
    Set a new password with a reset link. The link cannot be used again.
    """
    try:
        return reset_password(db, token, data.password)
    except AuthException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error during password reset: {str(e)}")
        raise StoreUnavailableException("Error changing the password")
